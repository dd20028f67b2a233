"""Tool-call model and normalizer for the agentic guard.

ToolKind: closed enumeration of the tool kinds the guard understands.
ToolCall: immutable snapshot of one proposed agent action.
normalize(): turns the untyped argument bag into a typed per-kind view.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union


class ToolKind(str, Enum):
    """Kinds of tool calls an agent host can hand to the guard."""

    SHELL = "shell_command"
    FILE_WRITE = "file_write"
    FILE_EDIT = "file_edit"
    FILE_READ = "file_read"
    GLOB = "directory_glob"
    GREP = "content_search"
    NOTEBOOK_EDIT = "notebook_edit"
    TODO_WRITE = "todo_write"
    WEB_FETCH = "web_fetch"
    WEB_SEARCH = "web_search"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> "ToolKind":
        """Resolve a host tool name (or a canonical value) to a ToolKind.

        Unrecognized names map to ``UNKNOWN`` rather than raising.
        """
        if not isinstance(name, str):
            return cls.UNKNOWN
        kind = _HOST_TOOL_NAMES.get(name)
        if kind is not None:
            return kind
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


# Claude Code tool names.
_HOST_TOOL_NAMES: dict[str, ToolKind] = {
    "Bash": ToolKind.SHELL,
    "Write": ToolKind.FILE_WRITE,
    "Edit": ToolKind.FILE_EDIT,
    "Read": ToolKind.FILE_READ,
    "Glob": ToolKind.GLOB,
    "Grep": ToolKind.GREP,
    "NotebookEdit": ToolKind.NOTEBOOK_EDIT,
    "TodoWrite": ToolKind.TODO_WRITE,
    "WebFetch": ToolKind.WEB_FETCH,
    "WebSearch": ToolKind.WEB_SEARCH,
}


@dataclass(frozen=True)
class ToolCall:
    """Immutable snapshot describing a single proposed tool invocation.

    ``tool_name`` keeps the host's own spelling for operator-facing text;
    ``kind`` is derived from it once, at construction.
    """

    tool_name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)
    cwd: str = ""
    session_id: str = ""

    @property
    def kind(self) -> ToolKind:
        return ToolKind.from_name(self.tool_name)


# ---------------------------------------------------------------------------
# Normalized views
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShellInput:
    command: str = ""
    description: str = ""
    timeout: int = 0


@dataclass(frozen=True)
class WriteInput:
    file_path: str = ""
    content: str = ""


@dataclass(frozen=True)
class EditInput:
    file_path: str = ""
    old_string: str = ""
    new_string: str = ""


@dataclass(frozen=True)
class ReadInput:
    file_path: str = ""
    offset: int = 0
    limit: int = 0


@dataclass(frozen=True)
class GlobInput:
    pattern: str = ""
    path: str = ""


@dataclass(frozen=True)
class GrepInput:
    pattern: str = ""
    path: str = ""
    glob: str = ""


@dataclass(frozen=True)
class NotebookEditInput:
    notebook_path: str = ""
    new_source: str = ""
    cell_id: str = ""
    edit_mode: str = ""


@dataclass(frozen=True)
class TodoWriteInput:
    item_count: int = 0


@dataclass(frozen=True)
class WebFetchInput:
    url: str = ""
    prompt: str = ""


@dataclass(frozen=True)
class WebSearchInput:
    query: str = ""


@dataclass(frozen=True)
class UnknownInput:
    """View for tool kinds the guard does not recognise.

    Every string value survives, nested ones included, in argument order
    and keyed by a dotted path (``params.body``, ``items.0``), so the
    invisible-character scan can still inspect them.
    """

    strings: tuple[tuple[str, str], ...] = ()


ToolInput = Union[
    ShellInput,
    WriteInput,
    EditInput,
    ReadInput,
    GlobInput,
    GrepInput,
    NotebookEditInput,
    TodoWriteInput,
    WebFetchInput,
    WebSearchInput,
    UnknownInput,
]


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def get_str(args: Mapping[str, Any], key: str) -> str:
    """Return ``args[key]`` if it is a string, else ``""``."""
    value = args.get(key)
    return value if isinstance(value, str) else ""


def get_int(args: Mapping[str, Any], key: str) -> int:
    """Return ``args[key]`` coerced to int, else 0.

    JSON decoders may hand numbers over as int or float; floats are
    truncated. Booleans, strings and non-finite floats count as the
    wrong shape.
    """
    value = args.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return 0


def _as_mapping(args: Any) -> Mapping[str, Any]:
    return args if isinstance(args, Mapping) else {}


# Bounds for walking nested arguments of unrecognized tools.
MAX_NESTING_DEPTH = 32
MAX_COLLECTED_STRINGS = 4096


def _collect_strings(value: Any, prefix: str, depth: int, out: list[tuple[str, str]]) -> None:
    """Depth-first walk of mappings and lists, appending (dotted path, string)."""
    if isinstance(value, Mapping):
        items = ((str(key), child) for key, child in value.items())
    elif isinstance(value, (list, tuple)):
        items = ((str(index), child) for index, child in enumerate(value))
    else:
        return
    for key, child in items:
        if len(out) >= MAX_COLLECTED_STRINGS:
            return
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(child, str):
            out.append((path, child))
        elif depth + 1 < MAX_NESTING_DEPTH:
            _collect_strings(child, path, depth + 1, out)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


def normalize(kind: ToolKind, arguments: Any) -> ToolInput:
    """Project a raw argument bag onto the typed view for *kind*."""
    args = _as_mapping(arguments)

    if kind is ToolKind.SHELL:
        return ShellInput(
            command=get_str(args, "command"),
            description=get_str(args, "description"),
            timeout=get_int(args, "timeout"),
        )
    if kind is ToolKind.FILE_WRITE:
        return WriteInput(
            file_path=get_str(args, "file_path"),
            content=get_str(args, "content"),
        )
    if kind is ToolKind.FILE_EDIT:
        return EditInput(
            file_path=get_str(args, "file_path"),
            old_string=get_str(args, "old_string"),
            new_string=get_str(args, "new_string"),
        )
    if kind is ToolKind.FILE_READ:
        return ReadInput(
            file_path=get_str(args, "file_path"),
            offset=get_int(args, "offset"),
            limit=get_int(args, "limit"),
        )
    if kind is ToolKind.GLOB:
        return GlobInput(pattern=get_str(args, "pattern"), path=get_str(args, "path"))
    if kind is ToolKind.GREP:
        return GrepInput(
            pattern=get_str(args, "pattern"),
            path=get_str(args, "path"),
            glob=get_str(args, "glob"),
        )
    if kind is ToolKind.NOTEBOOK_EDIT:
        return NotebookEditInput(
            notebook_path=get_str(args, "notebook_path"),
            new_source=get_str(args, "new_source"),
            cell_id=get_str(args, "cell_id"),
            edit_mode=get_str(args, "edit_mode"),
        )
    if kind is ToolKind.TODO_WRITE:
        todos = args.get("todos")
        return TodoWriteInput(item_count=len(todos) if isinstance(todos, list) else 0)
    if kind is ToolKind.WEB_FETCH:
        return WebFetchInput(url=get_str(args, "url"), prompt=get_str(args, "prompt"))
    if kind is ToolKind.WEB_SEARCH:
        return WebSearchInput(query=get_str(args, "query"))

    strings: list[tuple[str, str]] = []
    _collect_strings(args, "", 0, strings)
    return UnknownInput(strings=tuple(strings))


def normalize_call(call: ToolCall) -> ToolInput:
    """Shorthand for ``normalize(call.kind, call.arguments)``."""
    return normalize(call.kind, call.arguments)
