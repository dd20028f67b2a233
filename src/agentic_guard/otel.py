"""OpenTelemetry integration for guard decisions.

Privacy: full command text and file content are NEVER exported. Only
structured metadata (tool kind, verdict kind, threat type, decision, a
truncated reason snippet) is emitted.

Usage:
    from agentic_guard.otel import enable_otel
    enable_otel(service_name="my-agent-host")
"""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from agentic_guard.types import Decision

logger = logging.getLogger(__name__)

_otel_enabled: bool = False
_tracer: Any = None


def enable_otel(
    service_name: str,
    exporter: Any = None,
    endpoint: str | None = None,
) -> None:
    """Enable OTel export. Requires opentelemetry-sdk installed separately."""
    global _otel_enabled, _tracer
    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import SERVICE_NAME, Resource
        from opentelemetry.sdk.trace import TracerProvider

        resource = Resource.create({SERVICE_NAME: service_name})
        provider = TracerProvider(resource=resource)

        if exporter is not None:
            from opentelemetry.sdk.trace.export import SimpleSpanProcessor

            provider.add_span_processor(SimpleSpanProcessor(exporter))
        elif endpoint:
            os.environ.setdefault("OTEL_EXPORTER_OTLP_ENDPOINT", endpoint)

        trace.set_tracer_provider(provider)
        _tracer = trace.get_tracer("agentic-guard")
        _otel_enabled = True
        logger.info("[AGENTIC_GUARD] OTel enabled: service=%r", service_name)
    except ImportError as exc:
        logger.warning("opentelemetry-sdk not installed. OTel disabled. %s", exc)


def enable_otel_with_tracer(tracer: Any) -> None:
    """Enable OTel using an existing tracer (for testing)."""
    global _otel_enabled, _tracer
    _tracer = tracer
    _otel_enabled = True


def is_otel_enabled() -> bool:
    """Return True if OTel is currently enabled."""
    return _otel_enabled


def disable_otel() -> None:
    """Disable OTel and clear the tracer."""
    global _otel_enabled, _tracer
    _otel_enabled = False
    _tracer = None


def emit_guard_decision(decision: "Decision", tool_kind: str = "") -> None:
    """Emit a guard decision as an event on the current span. No-op if disabled."""
    if not _otel_enabled or _tracer is None:
        return
    try:
        from opentelemetry import trace

        current_span = trace.get_current_span()
        if current_span is not None:
            verdict = decision.verdict
            reason = decision.stderr or (decision.payload.reason if decision.payload else "")
            current_span.add_event(
                name=f"agentic_guard.decision.{decision.decision.value}",
                attributes={
                    "agentic_guard.decision": decision.decision.value,
                    "agentic_guard.exit_code": decision.exit_code,
                    "agentic_guard.tool_kind": tool_kind,
                    "agentic_guard.verdict": verdict.kind.value,
                    "agentic_guard.threat_type": verdict.threat_type or "",
                    "agentic_guard.capabilities": verdict.capability_string,
                    "agentic_guard.reason": reason[:500],
                },
            )
    except Exception as exc:
        logger.debug("OTel emit_guard_decision failed: %s", exc)
