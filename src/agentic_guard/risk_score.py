"""Rule of Two risk scorer.

Any one capability is routine for a coding agent. Any two together raise
a ``risky`` verdict; all three together are still ``risky`` (the most
severe ordinary case) and never escalate to ``critical``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from agentic_guard.capabilities import DETECTORS, Capability, CapabilityFinding
from agentic_guard.toolcall import ToolCall, ToolInput, normalize_call
from agentic_guard.types import NO_VERDICT, Verdict, VerdictKind

logger = logging.getLogger(__name__)

RULE_OF_TWO_THRESHOLD = 2


@dataclass(frozen=True)
class Analysis:
    """Rule of Two analysis of one tool call."""

    tool_name: str
    untrusted_input: CapabilityFinding
    sensitive_access: CapabilityFinding
    state_change: CapabilityFinding

    def finding(self, capability: Capability) -> CapabilityFinding:
        if capability is Capability.UNTRUSTED_INPUT:
            return self.untrusted_input
        if capability is Capability.SENSITIVE_ACCESS:
            return self.sensitive_access
        return self.state_change

    @property
    def detected(self) -> tuple[Capability, ...]:
        return tuple(cap for cap in Capability if self.finding(cap).detected)

    @property
    def capability_count(self) -> int:
        return len(self.detected)

    @property
    def capability_string(self) -> str:
        """Detected capabilities joined like ``"A+B"``."""
        return "+".join(cap.value for cap in self.detected)

    def all_reasons(self) -> tuple[str, ...]:
        """Reasons from every detector, each prefixed with its capability letter."""
        return tuple(
            f"{cap.value}: {reason}"
            for cap in Capability
            for reason in self.finding(cap).reasons
        )

    def format_block_message(self) -> str:
        """Multi-line per-capability breakdown for operator display."""
        parts = [
            f"Tool: {self.tool_name}",
            f"Capabilities: {self.capability_string}",
        ]
        headings = {
            Capability.UNTRUSTED_INPUT: "  [A] Untrustworthy input: ",
            Capability.SENSITIVE_ACCESS: "  [B] Sensitive access: ",
            Capability.STATE_CHANGE: "  [C] State change: ",
        }
        for cap in self.detected:
            parts.append(headings[cap] + ", ".join(self.finding(cap).reasons))
        return "\n".join(parts)


class RuleOfTwoScorer:
    """Combines the three capability detectors into a single verdict.

    Args:
        threshold: Number of detected capabilities that makes a call
            risky. Defaults to :data:`RULE_OF_TWO_THRESHOLD`.
    """

    def __init__(self, threshold: int = RULE_OF_TWO_THRESHOLD) -> None:
        if not 1 <= threshold <= len(Capability):
            raise ValueError(
                f"threshold must be between 1 and {len(Capability)}, got {threshold}"
            )
        self._threshold = threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def analyze(self, view: ToolInput, cwd: str = "", tool_name: str = "") -> Analysis:
        findings = {cap: detect(view, cwd) for cap, detect in DETECTORS}
        return Analysis(
            tool_name=tool_name,
            untrusted_input=findings[Capability.UNTRUSTED_INPUT],
            sensitive_access=findings[Capability.SENSITIVE_ACCESS],
            state_change=findings[Capability.STATE_CHANGE],
        )

    def analyze_call(self, call: ToolCall) -> Analysis:
        return self.analyze(normalize_call(call), call.cwd, call.tool_name)

    def verdict(self, analysis: Analysis) -> Verdict:
        count = analysis.capability_count
        if count < self._threshold:
            return NO_VERDICT

        logger.debug(
            "[AGENTIC_GUARD] Rule of Two: %s combines %s", analysis.tool_name, analysis.capability_string
        )
        reasons = analysis.all_reasons()
        if count == len(Capability):
            summary = "combines all three capabilities (A+B+C)"
        else:
            summary = f"combines {analysis.capability_string} capabilities ({count} of 3)"
        return Verdict(
            kind=VerdictKind.RISKY,
            details=f"{analysis.tool_name} {summary}. Reasons: {'; '.join(reasons)}",
            allow_ask=True,
            tool_name=analysis.tool_name,
            capabilities=analysis.detected,
            reasons=reasons,
        )

    def score(self, call: ToolCall) -> Verdict:
        return self.verdict(self.analyze_call(call))
