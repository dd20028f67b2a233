"""Guard exception types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agentic_guard.types import Decision


class PayloadError(ValueError):
    """Raised when a host payload cannot be turned into a tool call."""


class GuardBlockedError(Exception):
    """Raised by ``GuardEngine.enforce`` when the decision is deny."""

    def __init__(self, decision: Decision) -> None:
        self.decision = decision
        self.reason = decision.stderr
        super().__init__(self.reason or "Blocked by agentic guard")


class ApprovalRequiredError(Exception):
    """Raised by ``GuardEngine.enforce`` when the decision is ask."""

    def __init__(self, decision: Decision) -> None:
        self.decision = decision
        self.reason = decision.payload.reason if decision.payload is not None else ""
        super().__init__(f"[ASK] {self.reason}")
