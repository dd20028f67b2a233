"""Critical threat detection.

Critical threats bypass Rule of Two scoring entirely. Two checks run in a
fixed order:

1. Agent configuration tampering: a write or edit aimed at the files that
   steer the agent itself. Always blocks, ask-mode is ignored.
2. Invisible Unicode: zero-width, bidi-control, tag and other control
   characters smuggled into tool input. Honors ask-mode.
"""
from __future__ import annotations

import posixpath
import unicodedata
from dataclasses import dataclass

from agentic_guard.toolcall import (
    EditInput,
    GlobInput,
    GrepInput,
    NotebookEditInput,
    ReadInput,
    ShellInput,
    ToolCall,
    ToolInput,
    UnknownInput,
    WebFetchInput,
    WebSearchInput,
    WriteInput,
    normalize_call,
)
from agentic_guard.types import ThreatType, Verdict, VerdictKind

# (name, first code point, last code point)
INVISIBLE_RANGES: tuple[tuple[str, int, int], ...] = (
    ("Zero-width space", 0x200B, 0x200B),
    ("Zero-width non-joiner", 0x200C, 0x200C),
    ("Zero-width joiner", 0x200D, 0x200D),
    ("Word joiner", 0x2060, 0x2060),
    ("Zero-width no-break space (BOM)", 0xFEFF, 0xFEFF),
    ("Left-to-right mark", 0x200E, 0x200E),
    ("Right-to-left mark", 0x200F, 0x200F),
    ("Left-to-right embedding", 0x202A, 0x202A),
    ("Right-to-left embedding", 0x202B, 0x202B),
    ("Pop directional formatting", 0x202C, 0x202C),
    ("Left-to-right override", 0x202D, 0x202D),
    ("Right-to-left override", 0x202E, 0x202E),
    ("Soft hyphen", 0x00AD, 0x00AD),
    ("Invisible separator", 0x2063, 0x2063),
    ("Invisible times", 0x2062, 0x2062),
    ("Invisible plus", 0x2064, 0x2064),
    ("Function application", 0x2061, 0x2061),
    # Unicode tag block, used to hide instructions in plain text
    ("Tag characters", 0xE0000, 0xE007F),
)

_ALLOWED_CONTROLS = frozenset("\n\r\t")

CONTEXT_RADIUS = 5

# Directory patterns end with "/"; everything else is a file pattern.
AGENT_CONFIG_PATHS: tuple[str, ...] = (
    ".claude/",
    "CLAUDE.md",
    ".cursor/hooks.json",
    ".cursor/rules/",
)


@dataclass(frozen=True)
class InvisibleChar:
    """One invisible or control character found in tool input."""

    char: str
    name: str
    position: int
    context: str
    field: str = ""

    @property
    def codepoint(self) -> str:
        return f"U+{ord(self.char):04X}"


# ---------------------------------------------------------------------------
# Agent configuration tampering
# ---------------------------------------------------------------------------


def normalize_path(path: str) -> str:
    """Clean *path* and drop a leading ``./`` for comparison."""
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return cleaned


def matches_config_path(path: str, pattern: str) -> bool:
    if pattern.endswith("/"):
        directory = pattern[:-1]
        return (
            path == directory
            or path.startswith(pattern)
            or f"/{directory}/" in path
            or path.endswith("/" + directory)
        )
    return path == pattern or path.endswith("/" + pattern) or posixpath.basename(path) == pattern


def detect_config_write(view: ToolInput) -> Verdict | None:
    """Return a blocking verdict if a write or edit targets agent configuration."""
    if not isinstance(view, (WriteInput, EditInput)) or not view.file_path:
        return None

    target = view.file_path
    normalized = normalize_path(target)
    for pattern in AGENT_CONFIG_PATHS:
        if matches_config_path(normalized, pattern):
            return Verdict(
                kind=VerdictKind.CRITICAL,
                threat_type=ThreatType.AGENT_CONFIG_WRITE.value,
                details=f"Write to {target}",
                allow_ask=False,
            )
    return None


# ---------------------------------------------------------------------------
# Invisible Unicode
# ---------------------------------------------------------------------------


def invisible_name(char: str) -> str | None:
    """Return the display name of *char* if it is invisible, else None."""
    code = ord(char)
    for name, start, end in INVISIBLE_RANGES:
        if start <= code <= end:
            return name
    if unicodedata.category(char) == "Cc" and char not in _ALLOWED_CONTROLS:
        return f"Control character U+{code:04X}"
    return None


def _context(text: str, pos: int) -> str:
    start = max(pos - CONTEXT_RADIUS, 0)
    end = min(pos + CONTEXT_RADIUS + 1, len(text))
    parts = []
    for i in range(start, end):
        if i == pos:
            parts.append("[HERE]")
        elif invisible_name(text[i]) is not None:
            parts.append("[?]")
        else:
            parts.append(text[i])
    return "".join(parts)


def scan_invisible(text: str, field_name: str = "") -> list[InvisibleChar]:
    """Scan *text* character by character for invisible characters."""
    found: list[InvisibleChar] = []
    for pos, char in enumerate(text):
        name = invisible_name(char)
        if name is not None:
            found.append(
                InvisibleChar(
                    char=char,
                    name=name,
                    position=pos,
                    context=_context(text, pos),
                    field=field_name,
                )
            )
    return found


def scanned_fields(view: ToolInput) -> tuple[tuple[str, str], ...]:
    """The (field name, value) pairs the invisible scan inspects for *view*."""
    if isinstance(view, ShellInput):
        return (("command", view.command),)
    if isinstance(view, WriteInput):
        return (("file_path", view.file_path), ("content", view.content))
    if isinstance(view, EditInput):
        return (
            ("file_path", view.file_path),
            ("old_string", view.old_string),
            ("new_string", view.new_string),
        )
    if isinstance(view, ReadInput):
        return (("file_path", view.file_path),)
    if isinstance(view, GlobInput):
        return (("pattern", view.pattern), ("path", view.path))
    if isinstance(view, GrepInput):
        return (("pattern", view.pattern), ("path", view.path), ("glob", view.glob))
    if isinstance(view, NotebookEditInput):
        return (("notebook_path", view.notebook_path), ("new_source", view.new_source))
    if isinstance(view, WebFetchInput):
        return (("url", view.url), ("prompt", view.prompt))
    if isinstance(view, WebSearchInput):
        return (("query", view.query),)
    if isinstance(view, UnknownInput):
        return view.strings
    return ()


def detect_invisible(view: ToolInput) -> list[InvisibleChar]:
    findings: list[InvisibleChar] = []
    for field_name, value in scanned_fields(view):
        if value:
            findings.extend(scan_invisible(value, field_name))
    return findings


def format_invisible(findings: list[InvisibleChar]) -> str:
    """Summarize findings for operator display.

    A single finding shows its position and context; several are grouped
    by name in first-seen order.
    """
    if not findings:
        return ""
    if len(findings) == 1:
        f = findings[0]
        return f"{f.name} ({f.codepoint}) at position {f.position}: ...{f.context}..."

    counts: dict[str, int] = {}
    for f in findings:
        counts[f.name] = counts.get(f.name, 0) + 1
    parts = ", ".join(f"{name} (x{count})" for name, count in counts.items())
    return f"{len(findings)} invisible characters: {parts}"


def detect_invisible_threat(view: ToolInput) -> Verdict | None:
    findings = detect_invisible(view)
    if not findings:
        return None
    return Verdict(
        kind=VerdictKind.CRITICAL,
        threat_type=ThreatType.INVISIBLE_UNICODE.value,
        details=format_invisible(findings),
        allow_ask=True,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def detect_critical_threat(view: ToolInput) -> Verdict | None:
    """Run the critical checks in order. Returns None when neither fires."""
    threat = detect_config_write(view)
    if threat is not None:
        return threat
    return detect_invisible_threat(view)


def detect_critical_threat_call(call: ToolCall) -> Verdict | None:
    threat = detect_critical_threat(normalize_call(call))
    if threat is None:
        return None
    return Verdict(
        kind=threat.kind,
        threat_type=threat.threat_type,
        details=threat.details,
        allow_ask=threat.allow_ask,
        tool_name=call.tool_name,
    )
