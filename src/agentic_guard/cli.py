"""Hook entry point: ``agentic-guard`` / ``python -m agentic_guard``.

Reads one payload from stdin, evaluates it, writes the host response and
exits with the decision's status. Takes no flags; behaviour is controlled
through environment variables (see :mod:`agentic_guard.config`).
"""
from __future__ import annotations

import logging
import sys
from typing import IO, Any, Mapping, Optional

from agentic_guard.adapters import HostOutput, adapter_for, resolve_agent
from agentic_guard.config import GuardConfig
from agentic_guard.engine import GuardEngine
from agentic_guard.errors import PayloadError
from agentic_guard.renderer import deny
from agentic_guard.types import EXIT_BLOCK

logger = logging.getLogger(__name__)

_PACKAGE_LOGGER = "agentic_guard"


def configure_logging(config: GuardConfig, stream: IO[str]) -> Optional[logging.Handler]:
    """Attach a stderr handler when a log level is configured.

    Returns the installed handler, or None when logging stays silent.
    """
    if config.log_level is None:
        return None
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    package_logger.addHandler(handler)
    package_logger.setLevel(config.log_level)
    return handler


def read_input(stream: IO[Any], limit: int) -> bytes:
    """Read at most ``limit + 1`` bytes so oversized input is detectable."""
    source = getattr(stream, "buffer", stream)
    data = source.read(limit + 1)
    if isinstance(data, str):
        data = data.encode("utf-8")
    return data


def encodable(text: str, stream: IO[str]) -> str:
    """Return *text* with anything the stream's codec rejects backslash-escaped."""
    encoding = getattr(stream, "encoding", None) or "utf-8"
    return text.encode(encoding, "backslashreplace").decode(encoding)


def _write(output: HostOutput, stdout: IO[str], stderr: IO[str]) -> int:
    try:
        if output.stdout is not None:
            stdout.write(encodable(output.stdout, stdout) + "\n")
            stdout.flush()
        if output.stderr:
            stderr.write(encodable(output.stderr, stderr) + "\n")
            stderr.flush()
    except UnicodeError as exc:
        logger.error("[AGENTIC_GUARD] Failed to write host response: %s", exc)
        stderr.write(f"Blocked: internal guard error ({type(exc).__name__})\n")
        stderr.flush()
        return EXIT_BLOCK
    return output.exit_code


def run(
    stdin: IO[Any],
    stdout: IO[str],
    stderr: IO[str],
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Process one hook invocation and return the exit status."""
    config = GuardConfig.from_env(environ)
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    previous_level = package_logger.level
    handler = configure_logging(config, stderr)
    try:
        raw = read_input(stdin, config.max_input_bytes)
        adapter = adapter_for(resolve_agent(raw, environ))

        if config.disabled:
            logger.info("[AGENTIC_GUARD] Disabled, allowing without analysis")
            return _write(adapter.render_disabled(), stdout, stderr)

        if len(raw) > config.max_input_bytes:
            logger.warning("[AGENTIC_GUARD] Input exceeds %d bytes", config.max_input_bytes)
            decision = deny(f"Blocked: input exceeds {config.max_input_bytes} bytes")
            return _write(adapter.render_output(decision), stdout, stderr)

        try:
            call = adapter.parse_payload(raw)
        except PayloadError as exc:
            logger.warning("[AGENTIC_GUARD] %s", exc)
            return _write(adapter.render_output(deny(f"Blocked: {exc}")), stdout, stderr)

        decision = GuardEngine(config=config).evaluate(call)
        return _write(adapter.render_output(decision), stdout, stderr)
    finally:
        if handler is not None:
            package_logger.removeHandler(handler)
            package_logger.setLevel(previous_level)


def main() -> None:
    sys.exit(run(sys.stdin, sys.stdout, sys.stderr))


if __name__ == "__main__":
    main()
