"""Cursor ``beforeShellExecution`` hook adapter.

Cursor hands over a bare shell command; it is mapped onto the ``Bash``
tool so the same detectors apply. Cursor expects a permission object on
stdout for every decision::

    {"permission": "allow" | "ask" | "deny",
     "user_message": "...", "agent_message": "..."}
"""
from __future__ import annotations

from typing import Any, Union

from agentic_guard.adapters._shared import HostOutput, decode_object, dump, str_field
from agentic_guard.toolcall import ToolCall
from agentic_guard.types import EXIT_ALLOW, Decision, PermissionDecision

HOST = "Cursor"
SHELL_TOOL_NAME = "Bash"
CURSOR_HOOK_EVENTS = frozenset({"beforeShellExecution", "beforeMCPExecution"})


def parse_payload(raw: Union[bytes, str]) -> ToolCall:
    """Turn a Cursor shell hook payload into a shell ToolCall.

    Raises:
        PayloadError: *raw* is not a JSON object.
    """
    data = decode_object(raw, HOST)
    return ToolCall(
        tool_name=SHELL_TOOL_NAME,
        arguments={"command": str_field(data, "command")},
        cwd=str_field(data, "cwd"),
        session_id=str_field(data, "conversation_id"),
    )


def _response(permission: PermissionDecision, user_message: str = "", agent_message: str = "") -> str:
    response: dict[str, Any] = {"permission": permission.value}
    if user_message:
        response["user_message"] = user_message
    if agent_message:
        response["agent_message"] = agent_message
    return dump(response)


def render_output(decision: Decision) -> HostOutput:
    if decision.decision is PermissionDecision.DENY:
        return HostOutput(
            stdout=_response(PermissionDecision.DENY, user_message=decision.stderr),
            stderr=decision.stderr,
            exit_code=decision.exit_code,
        )
    if decision.decision is PermissionDecision.ASK and decision.payload is not None:
        return HostOutput(
            stdout=_response(
                PermissionDecision.ASK,
                user_message=decision.payload.message or decision.payload.reason,
                agent_message=decision.payload.reason,
            ),
            stderr="",
            exit_code=decision.exit_code,
        )
    return HostOutput(stdout=_response(PermissionDecision.ALLOW), stderr="", exit_code=decision.exit_code)


def render_disabled() -> HostOutput:
    return HostOutput(stdout=_response(PermissionDecision.ALLOW), stderr="", exit_code=EXIT_ALLOW)
