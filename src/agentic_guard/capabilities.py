"""Rule of Two capability detectors.

Each detector answers one question about a normalized tool call:

- A: does it ingest untrustworthy input?
- B: does it touch sensitive resources?
- C: does it change state or talk to the outside world?

Detectors are pure functions of the view and working directory. They
dispatch on the view type only to pick which fields to inspect.
"""
from __future__ import annotations

import enum
import posixpath
from dataclasses import dataclass, field
from typing import Iterable

from agentic_guard.patterns import (
    EXTERNAL_COMM_PATTERNS,
    EXTERNAL_DATA_COMMANDS,
    OBFUSCATION_PATTERNS,
    PIPE_FROM_EXTERNAL_RE,
    PRODUCTION_INDICATORS,
    REDIRECT_PATTERNS,
    REVERSE_SHELL_PATTERNS,
    SENSITIVE_COMMANDS,
    SENSITIVE_FILE_EXTENSIONS,
    SENSITIVE_PATH_PATTERNS,
    STATE_CHANGING_COMMANDS,
    TRUSTED_HOME_PREFIXES,
    UNTRUSTED_CONTENT_MARKERS,
    UNTRUSTED_PATH_PATTERNS,
)
from agentic_guard.toolcall import (
    EditInput,
    GlobInput,
    GrepInput,
    NotebookEditInput,
    ReadInput,
    ShellInput,
    TodoWriteInput,
    ToolInput,
    WebFetchInput,
    WebSearchInput,
    WriteInput,
)


class Capability(enum.Enum):
    """The three Rule of Two capabilities."""

    UNTRUSTED_INPUT = "A"
    SENSITIVE_ACCESS = "B"
    STATE_CHANGE = "C"


@dataclass(frozen=True)
class CapabilityFinding:
    """Result of one capability detector.

    ``reasons`` is additive evidence: every category that matched adds
    one entry naming the pattern.
    """

    detected: bool = False
    reasons: tuple[str, ...] = field(default_factory=tuple)


class _Collector:
    """Private, append-only reason list for one detector run."""

    def __init__(self) -> None:
        self.reasons: list[str] = []

    def add(self, reason: str) -> None:
        self.reasons.append(reason)

    def finding(self) -> CapabilityFinding:
        return CapabilityFinding(detected=bool(self.reasons), reasons=tuple(self.reasons))


def _first_match(text: str, patterns: Iterable[str]) -> str | None:
    """Return the first pattern found in *text* (case-insensitive)."""
    lowered = text.lower()
    for pattern in patterns:
        if pattern.lower() in lowered:
            return pattern
    return None


def _first_suffix(text: str, suffixes: Iterable[str]) -> str | None:
    lowered = text.lower()
    for suffix in suffixes:
        if lowered.endswith(suffix):
            return suffix
    return None


def truncate(text: str, max_len: int) -> str:
    """Shorten *text* to *max_len* characters, ending in ``...`` if cut."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


# ---------------------------------------------------------------------------
# Capability A
# ---------------------------------------------------------------------------


def _is_within(path: str, directory: str) -> bool:
    """Containment test on cleaned paths, so `..` segments cannot escape."""
    path = posixpath.normpath(path)
    directory = posixpath.normpath(directory).rstrip("/") or "/"
    if directory == "/":
        return True
    return path == directory or path.startswith(directory + "/")


def detect_untrusted_input(view: ToolInput, cwd: str = "") -> CapabilityFinding:
    """Capability A: the action ingests data from outside the operator's control."""
    out = _Collector()

    if isinstance(view, WebFetchInput):
        out.add("fetching external URL: " + truncate(view.url, 50))

    elif isinstance(view, WebSearchInput):
        out.add("web search returns external data")

    elif isinstance(view, ShellInput):
        cmd = view.command

        fetch = _first_match(cmd, EXTERNAL_DATA_COMMANDS)
        if fetch is not None:
            out.add("command fetches external data: " + fetch)

        if PIPE_FROM_EXTERNAL_RE.search(cmd):
            out.add("piping data from external source")

        obfuscation = _first_match(cmd, OBFUSCATION_PATTERNS)
        if obfuscation is not None:
            out.add("obfuscated/encoded command: " + obfuscation)

        reverse_shell = _first_match(cmd, REVERSE_SHELL_PATTERNS)
        if reverse_shell is not None:
            out.add("reverse shell pattern: " + reverse_shell)

    elif isinstance(view, ReadInput):
        path = view.file_path

        cleaned = posixpath.normpath(path) if path else ""

        untrusted = _first_match(path, UNTRUSTED_PATH_PATTERNS)
        if untrusted is None:
            untrusted = _first_match(cleaned, UNTRUSTED_PATH_PATTERNS)
        if untrusted is not None:
            out.add("reading from untrusted path: " + untrusted)

        if (
            cwd
            and posixpath.isabs(path)
            and not _is_within(path, cwd)
            and not cleaned.startswith(TRUSTED_HOME_PREFIXES)
        ):
            out.add("reading file outside project directory")

    elif isinstance(view, (WriteInput, EditInput)):
        content = view.content if isinstance(view, WriteInput) else view.new_string
        for marker in UNTRUSTED_CONTENT_MARKERS:
            if marker in content:
                out.add("content contains dynamic expansion: " + marker)
                break

    return out.finding()


# ---------------------------------------------------------------------------
# Capability B
# ---------------------------------------------------------------------------


def _target_path(view: ToolInput) -> str:
    if isinstance(view, (ReadInput, WriteInput, EditInput)):
        return view.file_path
    if isinstance(view, (GlobInput, GrepInput)):
        return view.path
    return ""


def detect_sensitive_access(view: ToolInput, cwd: str = "") -> CapabilityFinding:
    """Capability B: the action touches credentials, infra control planes or prod."""
    out = _Collector()

    path = _target_path(view)
    if path:
        pattern = _first_match(path, SENSITIVE_PATH_PATTERNS)
        if pattern is not None:
            out.add("accessing sensitive path: " + pattern)

        ext = _first_suffix(path, SENSITIVE_FILE_EXTENSIONS)
        if ext is not None:
            out.add("accessing sensitive file type: " + ext)

        indicator = _first_match(path, PRODUCTION_INDICATORS)
        if indicator is not None:
            out.add("accessing production path: " + indicator)

    if isinstance(view, ShellInput):
        cmd = view.command

        command = _first_match(cmd, SENSITIVE_COMMANDS)
        if command is not None:
            out.add("running sensitive command: " + command.strip())

        # Catches things like `tee ~/.aws/credentials`.
        pattern = _first_match(cmd, SENSITIVE_PATH_PATTERNS)
        if pattern is not None:
            out.add("command accesses sensitive path: " + pattern)

        ext = _first_match(cmd, SENSITIVE_FILE_EXTENSIONS)
        if ext is not None:
            out.add("command accesses sensitive file type: " + ext)

        indicator = _first_match(cmd, PRODUCTION_INDICATORS)
        if indicator is not None:
            out.add("command references production: " + indicator)

    return out.finding()


# ---------------------------------------------------------------------------
# Capability C
# ---------------------------------------------------------------------------


def detect_state_change(view: ToolInput, cwd: str = "") -> CapabilityFinding:
    """Capability C: the action mutates persistent state or communicates externally."""
    out = _Collector()

    if isinstance(view, WriteInput):
        out.add("writing file: " + truncate(view.file_path, 50))

    elif isinstance(view, EditInput):
        out.add("editing file: " + truncate(view.file_path, 50))

    elif isinstance(view, NotebookEditInput):
        out.add("modifying notebook")

    elif isinstance(view, TodoWriteInput):
        out.add("modifying todo list state")

    elif isinstance(view, ShellInput):
        cmd = view.command

        state_cmd = _first_match(cmd, STATE_CHANGING_COMMANDS)
        if state_cmd is not None:
            out.add("state-changing command: " + state_cmd.strip())

        if not out.reasons:
            comm = _first_match(cmd, EXTERNAL_COMM_PATTERNS)
            if comm is not None:
                out.add("external communication: " + comm.strip())

        if not out.reasons and any(redirect in cmd for redirect in REDIRECT_PATTERNS):
            out.add("output redirection to file")

    return out.finding()


DETECTORS = (
    (Capability.UNTRUSTED_INPUT, detect_untrusted_input),
    (Capability.SENSITIVE_ACCESS, detect_sensitive_access),
    (Capability.STATE_CHANGE, detect_state_change),
)
