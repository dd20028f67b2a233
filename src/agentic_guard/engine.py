"""Guard engine: evaluates one tool call and produces exactly one Decision.

Order of evaluation:
1. Critical threat detection (config tampering, then invisible Unicode).
   If it fires, the Rule of Two scorer is skipped.
2. Rule of Two scoring over capabilities A, B and C.
3. Rendering of the resulting verdict under the configured mode.

Any unexpected exception during evaluation fails closed (deny).
"""
from __future__ import annotations

import logging

from agentic_guard.config import GuardConfig, Mode
from agentic_guard.errors import ApprovalRequiredError, GuardBlockedError
from agentic_guard.otel import emit_guard_decision
from agentic_guard.renderer import deny, render
from agentic_guard.risk_score import RuleOfTwoScorer
from agentic_guard.threats import detect_critical_threat_call
from agentic_guard.toolcall import ToolCall
from agentic_guard.types import Decision, PermissionDecision

logger = logging.getLogger(__name__)


class GuardEngine:
    """Pre-execution guard for agent tool calls.

    Args:
        mode: Operating mode. Defaults to the mode in *config*, or
            :attr:`Mode.BLOCK` when neither is given.
        config: Per-invocation configuration.
        scorer: Rule of Two scorer (default threshold 2).
    """

    def __init__(
        self,
        mode: Mode | None = None,
        config: GuardConfig | None = None,
        scorer: RuleOfTwoScorer | None = None,
    ) -> None:
        self._config = config or GuardConfig()
        self._mode = mode if mode is not None else self._config.mode
        self._scorer = scorer or RuleOfTwoScorer()

    @property
    def mode(self) -> Mode:
        return self._mode

    def evaluate(self, call: ToolCall) -> Decision:
        """Evaluate *call* and return the decision for the host."""
        try:
            decision = self._evaluate(call)
        except Exception as exc:
            logger.exception("[AGENTIC_GUARD] Evaluation failed for %s", call.tool_name)
            decision = deny(f"Blocked: internal guard error ({type(exc).__name__})")

        emit_guard_decision(decision, tool_kind=call.kind.value)
        return decision

    def _evaluate(self, call: ToolCall) -> Decision:
        threat = detect_critical_threat_call(call)
        if threat is not None:
            logger.info(
                "[AGENTIC_GUARD] Critical threat %s in %s: %s",
                threat.threat_type,
                call.tool_name,
                threat.details,
            )
            return render(threat, self._mode)

        analysis = self._scorer.analyze_call(call)
        if analysis.capability_count:
            logger.debug("[AGENTIC_GUARD] %s", analysis.format_block_message())
        return render(self._scorer.verdict(analysis), self._mode)

    def enforce(self, call: ToolCall) -> Decision:
        """Evaluate *call* and raise unless it is allowed.

        Raises:
            GuardBlockedError: The decision is deny.
            ApprovalRequiredError: The decision is ask.
        """
        decision = self.evaluate(call)
        if decision.decision is PermissionDecision.DENY:
            raise GuardBlockedError(decision)
        if decision.decision is PermissionDecision.ASK:
            raise ApprovalRequiredError(decision)
        return decision
