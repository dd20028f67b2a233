"""Agent host detection.

Resolution order (first match wins):
1. ``CURSOR_AGENT=1`` in the environment.
2. ``CLAUDECODE=1`` in the environment.
3. Shape of the payload itself.
4. Unknown, which callers treat as Claude Code.
"""
from __future__ import annotations

import json
import os
from enum import Enum
from typing import Mapping, Optional, Union

from agentic_guard.adapters.cursor import CURSOR_HOOK_EVENTS
from agentic_guard.types import HOOK_EVENT_NAME


class AgentType(str, Enum):
    UNKNOWN = "unknown"
    CLAUDE_CODE = "claude_code"
    CURSOR = "cursor"


def detect_agent(environ: Optional[Mapping[str, str]] = None) -> AgentType:
    """Detect the host from environment variables only."""
    env = os.environ if environ is None else environ
    if env.get("CURSOR_AGENT") == "1":
        return AgentType.CURSOR
    if env.get("CLAUDECODE") == "1":
        return AgentType.CLAUDE_CODE
    return AgentType.UNKNOWN


def detect_agent_from_input(raw: Union[bytes, str]) -> AgentType:
    """Guess the host from the shape of its payload.

    Never raises: anything that is not a JSON object is ``UNKNOWN``.
    """
    if not raw:
        return AgentType.UNKNOWN
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return AgentType.UNKNOWN
    if not isinstance(data, dict):
        return AgentType.UNKNOWN

    def field(key: str) -> str:
        value = data.get(key)
        return value if isinstance(value, str) else ""

    if field("cursor_version"):
        return AgentType.CURSOR
    event = field("hook_event_name")
    if event in CURSOR_HOOK_EVENTS:
        return AgentType.CURSOR
    tool_name = field("tool_name")
    if tool_name and event in (HOOK_EVENT_NAME, ""):
        return AgentType.CLAUDE_CODE
    if field("command") and not tool_name:
        return AgentType.CURSOR
    return AgentType.UNKNOWN


def resolve_agent(raw: Union[bytes, str], environ: Optional[Mapping[str, str]] = None) -> AgentType:
    """Environment first, payload shape second, Claude Code as the fallback."""
    agent = detect_agent(environ)
    if agent is AgentType.UNKNOWN:
        agent = detect_agent_from_input(raw)
    if agent is AgentType.UNKNOWN:
        agent = AgentType.CLAUDE_CODE
    return agent
