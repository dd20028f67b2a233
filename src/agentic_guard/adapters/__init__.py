"""Host adapters: translate agent-host payloads to ToolCalls and Decisions back."""
from __future__ import annotations

from types import ModuleType

from agentic_guard.adapters import claude_code, cursor
from agentic_guard.adapters._shared import HostOutput
from agentic_guard.adapters.detect import AgentType, detect_agent, detect_agent_from_input, resolve_agent

_ADAPTERS: dict[AgentType, ModuleType] = {
    AgentType.CLAUDE_CODE: claude_code,
    AgentType.CURSOR: cursor,
    AgentType.UNKNOWN: claude_code,
}


def adapter_for(agent: AgentType) -> ModuleType:
    """Return the adapter module for *agent*. Unknown hosts get Claude Code."""
    return _ADAPTERS[agent]


__all__ = [
    "AgentType",
    "HostOutput",
    "adapter_for",
    "claude_code",
    "cursor",
    "detect_agent",
    "detect_agent_from_input",
    "resolve_agent",
]
