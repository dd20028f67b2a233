"""Guard configuration.

Everything is read from environment variables once per invocation and
frozen into a :class:`GuardConfig`. Stdlib only.

Environment:
    AGENTIC_GUARD_MODE       ``block`` (default) or ``ask``.
    AGENTIC_GUARD_DISABLE    Any non-empty value allows every call.
    AGENTIC_GUARD_LOG_LEVEL  Enables stderr logging at this level.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

MODE_ENV_VAR = "AGENTIC_GUARD_MODE"
DISABLE_ENV_VAR = "AGENTIC_GUARD_DISABLE"
LOG_LEVEL_ENV_VAR = "AGENTIC_GUARD_LOG_LEVEL"

DEFAULT_MAX_INPUT_BYTES = 1 * 1024 * 1024


class Mode(str, Enum):
    """How non-critical and ask-honoring critical findings are handled.

    BLOCK: deny outright (default).
    ASK: ask the operator for confirmation.
    """

    BLOCK = "block"
    ASK = "ask"


def detect_mode(environ: Optional[Mapping[str, str]] = None) -> Mode:
    """Read the operating mode from ``AGENTIC_GUARD_MODE``.

    Unset, empty or unrecognized values fall back to :attr:`Mode.BLOCK`,
    the stricter mode.
    """
    env = os.environ if environ is None else environ
    raw = env.get(MODE_ENV_VAR, "").strip().lower()
    if raw == Mode.ASK.value:
        return Mode.ASK
    return Mode.BLOCK


def _parse_log_level(raw: str) -> Optional[int]:
    raw = raw.strip().upper()
    if not raw:
        return None
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else None


@dataclass(frozen=True)
class GuardConfig:
    """Immutable per-invocation configuration."""

    mode: Mode = Mode.BLOCK
    disabled: bool = False
    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES
    log_level: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GuardConfig":
        env = os.environ if environ is None else environ
        return cls(
            mode=detect_mode(env),
            disabled=bool(env.get(DISABLE_ENV_VAR, "")),
            log_level=_parse_log_level(env.get(LOG_LEVEL_ENV_VAR, "")),
        )
