"""Shared utilities for agentic-guard host adapters.

Internal module, not part of the public API. Centralizes payload decoding
and the output triple that every host adapter produces.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from agentic_guard.errors import PayloadError


@dataclass(frozen=True)
class HostOutput:
    """What the entry point writes back to the agent host.

    ``stdout`` is None when nothing should be written to the primary
    channel. ``stderr`` is empty when the diagnostic channel stays silent.
    """

    stdout: Optional[str]
    stderr: str
    exit_code: int


def decode_object(raw: Union[bytes, str], host: str) -> Mapping[str, Any]:
    """Decode *raw* as a JSON object.

    Raises:
        PayloadError: *raw* is empty, not JSON, or not a JSON object.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PayloadError(f"invalid {host} input: not UTF-8 ({exc.reason})") from exc
    if not raw.strip():
        raise PayloadError(f"invalid {host} input: empty payload")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"invalid {host} input: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise PayloadError(f"invalid {host} input: expected a JSON object")
    return data


def str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def dump(obj: Mapping[str, Any]) -> str:
    """Serialize a host response compactly.

    Non-ASCII text is escaped, so lone surrogates copied from the payload
    cannot break the write to stdout.
    """
    return json.dumps(obj, separators=(",", ":"))
