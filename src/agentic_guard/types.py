"""Core guard types.

Verdict: what the critical-threat check or the scorer concluded.
Decision: what the guard tells the agent host.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from agentic_guard.capabilities import Capability

# Exit status reserved by agent hosts for "blocked".
EXIT_ALLOW = 0
EXIT_BLOCK = 2

HOOK_EVENT_NAME = "PreToolUse"


class VerdictKind(str, Enum):
    NONE = "none"
    RISKY = "risky"
    CRITICAL = "critical"


class ThreatType(str, Enum):
    """Critical threat subtypes known to the renderer."""

    AGENT_CONFIG_WRITE = "agent_config_write"
    INVISIBLE_UNICODE = "invisible_unicode"


class PermissionDecision(str, Enum):
    ALLOW = "allow"
    ASK = "ask"
    DENY = "deny"


@dataclass(frozen=True)
class Verdict:
    """Outcome of critical-threat detection or Rule of Two scoring.

    Attributes:
        kind: none, risky or critical.
        threat_type: Critical subtype. Kept as a plain string so that a
            subtype the renderer does not know can still reach it and be
            denied.
        details: Human-readable summary for the operator.
        allow_ask: Whether ask-mode may downgrade a block to a prompt.
        tool_name: Host tool name, for operator-facing text.
        capabilities: Capabilities that contributed to a risky verdict.
        reasons: Aggregated, capability-attributed reasons.
    """

    kind: VerdictKind
    threat_type: str | None = None
    details: str = ""
    allow_ask: bool = True
    tool_name: str = ""
    capabilities: tuple[Capability, ...] = field(default_factory=tuple)
    reasons: tuple[str, ...] = field(default_factory=tuple)

    @property
    def capability_string(self) -> str:
        return "+".join(cap.value for cap in self.capabilities)


NO_VERDICT = Verdict(kind=VerdictKind.NONE)


@dataclass(frozen=True)
class HookPayload:
    """Structured message for the host's primary output channel."""

    decision: PermissionDecision
    reason: str
    message: str = ""
    event_name: str = HOOK_EVENT_NAME


@dataclass(frozen=True)
class Decision:
    """Final, externally visible guard result for one tool call."""

    exit_code: int
    decision: PermissionDecision
    payload: HookPayload | None = None
    stderr: str = ""
    verdict: Verdict = NO_VERDICT

    @property
    def blocked(self) -> bool:
        return self.exit_code != EXIT_ALLOW
