"""Decision renderer: Verdict + Mode -> Decision.

Rules:
- NONE                          -> allow, exit 0, nothing emitted.
- CRITICAL agent_config_write   -> deny in every mode.
- CRITICAL invisible_unicode    -> ask payload in ask mode, else deny.
- RISKY                         -> ask payload in ask mode, else deny.
- CRITICAL of any other subtype -> deny (fail closed).
"""
from __future__ import annotations

from agentic_guard.config import Mode
from agentic_guard.types import (
    EXIT_ALLOW,
    EXIT_BLOCK,
    NO_VERDICT,
    Decision,
    HookPayload,
    PermissionDecision,
    ThreatType,
    Verdict,
    VerdictKind,
)


def allow(verdict: Verdict = NO_VERDICT) -> Decision:
    return Decision(exit_code=EXIT_ALLOW, decision=PermissionDecision.ALLOW, verdict=verdict)


def deny(message: str, verdict: Verdict = NO_VERDICT) -> Decision:
    return Decision(
        exit_code=EXIT_BLOCK,
        decision=PermissionDecision.DENY,
        stderr=message,
        verdict=verdict,
    )


def ask(reason: str, message: str, verdict: Verdict) -> Decision:
    return Decision(
        exit_code=EXIT_ALLOW,
        decision=PermissionDecision.ASK,
        payload=HookPayload(decision=PermissionDecision.ASK, reason=reason, message=message),
        verdict=verdict,
    )


def _render_critical(verdict: Verdict, mode: Mode) -> Decision:
    if verdict.threat_type == ThreatType.AGENT_CONFIG_WRITE.value:
        return deny(
            f"Blocked: Attempted write to agent configuration. {verdict.details}",
            verdict,
        )

    if verdict.threat_type == ThreatType.INVISIBLE_UNICODE.value:
        if mode is Mode.ASK and verdict.allow_ask:
            return ask(
                f"Invisible Unicode detected: {verdict.details}",
                "Invisible Unicode characters detected in tool input. "
                "These may indicate a prompt injection attack. "
                f"Details: {verdict.details}",
                verdict,
            )
        return deny(f"Blocked: Invisible Unicode detected in tool input. {verdict.details}", verdict)

    return deny(f"Blocked: Unknown critical threat: {verdict.threat_type}", verdict)


def _render_risky(verdict: Verdict, mode: Mode) -> Decision:
    reasons = "; ".join(verdict.reasons)
    caps = verdict.capability_string
    if mode is Mode.ASK and verdict.allow_ask:
        if len(verdict.capabilities) == 3:
            message = (
                f"Rule of Two: {verdict.tool_name} combines all three capabilities (A+B+C). "
                "This action processes untrustworthy input, accesses sensitive data, "
                f"AND changes state. Reasons: {reasons}"
            )
        else:
            message = f"Rule of Two: {verdict.tool_name} combines {caps} capabilities. Reasons: {reasons}"
        return ask(
            f"Rule of Two: {verdict.tool_name} combines {caps} capabilities. Reasons: {reasons}",
            message,
            verdict,
        )
    return deny(f"Blocked: Rule of Two violation. {verdict.details}", verdict)


def render(verdict: Verdict, mode: Mode) -> Decision:
    """Map *verdict* and the configured *mode* onto a Decision."""
    if verdict.kind is VerdictKind.NONE:
        return allow(verdict)
    if verdict.kind is VerdictKind.RISKY:
        return _render_risky(verdict, mode)
    return _render_critical(verdict, mode)
