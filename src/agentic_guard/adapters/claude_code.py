"""Claude Code PreToolUse hook adapter.

Input (stdin)::

    {"session_id": "...", "cwd": "...", "hook_event_name": "PreToolUse",
     "tool_name": "Bash", "tool_input": {"command": "ls"}}

Output:
    allow -> exit 0, nothing written.
    ask   -> exit 0, hook response JSON on stdout.
    deny  -> exit 2, message on stderr.
"""
from __future__ import annotations

from typing import Any, Union

from agentic_guard.adapters._shared import HostOutput, decode_object, dump, str_field
from agentic_guard.toolcall import ToolCall
from agentic_guard.types import (
    EXIT_ALLOW,
    HOOK_EVENT_NAME,
    Decision,
    HookPayload,
    PermissionDecision,
)

HOST = "Claude Code"
DISABLED_REASON = "Rule of Two: disabled"


def parse_payload(raw: Union[bytes, str]) -> ToolCall:
    """Turn a PreToolUse payload into a ToolCall.

    Missing or mistyped fields fall back to defaults; ``tool_input`` is
    handed to the normalizer as-is.

    Raises:
        PayloadError: *raw* is not a JSON object.
    """
    data = decode_object(raw, HOST)
    arguments: Any = data.get("tool_input")
    return ToolCall(
        tool_name=str_field(data, "tool_name"),
        arguments=arguments if isinstance(arguments, dict) else {},
        cwd=str_field(data, "cwd"),
        session_id=str_field(data, "session_id"),
    )


def hook_response(payload: HookPayload) -> dict[str, Any]:
    response: dict[str, Any] = {
        "hookSpecificOutput": {
            "hookEventName": payload.event_name,
            "permissionDecision": payload.decision.value,
            "permissionDecisionReason": payload.reason,
        },
    }
    if payload.message:
        response["systemMessage"] = payload.message
    return response


def render_output(decision: Decision) -> HostOutput:
    """Translate a Decision into Claude Code's stdout/stderr/exit contract."""
    if decision.decision is PermissionDecision.DENY:
        return HostOutput(stdout=None, stderr=decision.stderr, exit_code=decision.exit_code)
    if decision.payload is None:
        return HostOutput(stdout=None, stderr="", exit_code=decision.exit_code)
    return HostOutput(stdout=dump(hook_response(decision.payload)), stderr="", exit_code=decision.exit_code)


def render_disabled() -> HostOutput:
    """Explicit allow response used when the guard is switched off."""
    payload = HookPayload(
        decision=PermissionDecision.ALLOW,
        reason=DISABLED_REASON,
        event_name=HOOK_EVENT_NAME,
    )
    return HostOutput(stdout=dump(hook_response(payload)), stderr="", exit_code=EXIT_ALLOW)
