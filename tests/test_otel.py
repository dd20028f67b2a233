"""Tests for OpenTelemetry decision events."""
from __future__ import annotations

import pytest

from agentic_guard.config import Mode
from agentic_guard.engine import GuardEngine
from agentic_guard.otel import (
    disable_otel,
    emit_guard_decision,
    enable_otel_with_tracer,
    is_otel_enabled,
)
from agentic_guard.renderer import deny
from agentic_guard.toolcall import ToolCall


@pytest.fixture(autouse=True)
def reset_otel():
    disable_otel()
    yield
    disable_otel()


def _setup_test_otel():
    """Create an in-memory OTel tracer for testing."""
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import SimpleSpanProcessor
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    tracer = provider.get_tracer("test")
    enable_otel_with_tracer(tracer)
    return exporter, tracer


# ---------------------------------------------------------------------------
# Basic enable/disable
# ---------------------------------------------------------------------------


def test_otel_disabled_by_default():
    assert is_otel_enabled() is False


def test_public_helpers_documented():
    assert is_otel_enabled.__doc__


def test_enable_with_tracer():
    enable_otel_with_tracer(object())
    assert is_otel_enabled() is True


def test_disable_otel():
    enable_otel_with_tracer(object())
    disable_otel()
    assert is_otel_enabled() is False


def test_emit_noop_when_disabled():
    emit_guard_decision(deny("Blocked: x"))


# ---------------------------------------------------------------------------
# Span events
# ---------------------------------------------------------------------------


def test_engine_emits_deny_event():
    pytest.importorskip("opentelemetry.sdk")
    exporter, tracer = _setup_test_otel()

    with tracer.start_as_current_span("tool-call"):
        GuardEngine(mode=Mode.BLOCK).evaluate(
            ToolCall("Bash", {"command": "kubectl apply -f prod-deploy.yaml"})
        )

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    events = spans[0].events
    assert len(events) == 1
    event = events[0]
    assert event.name == "agentic_guard.decision.deny"
    attrs = dict(event.attributes)
    assert attrs["agentic_guard.decision"] == "deny"
    assert attrs["agentic_guard.exit_code"] == 2
    assert attrs["agentic_guard.tool_kind"] == "shell_command"
    assert attrs["agentic_guard.verdict"] == "risky"
    assert attrs["agentic_guard.capabilities"] == "B+C"
    assert attrs["agentic_guard.threat_type"] == ""


def test_engine_emits_allow_event():
    pytest.importorskip("opentelemetry.sdk")
    exporter, tracer = _setup_test_otel()

    with tracer.start_as_current_span("tool-call"):
        GuardEngine().evaluate(ToolCall("Bash", {"command": "ls"}))

    event = exporter.get_finished_spans()[0].events[0]
    assert event.name == "agentic_guard.decision.allow"
    assert dict(event.attributes)["agentic_guard.reason"] == ""


def test_critical_threat_type_exported():
    pytest.importorskip("opentelemetry.sdk")
    exporter, tracer = _setup_test_otel()

    with tracer.start_as_current_span("tool-call"):
        GuardEngine().evaluate(ToolCall("Write", {"file_path": "CLAUDE.md", "content": "secret plan"}))

    attrs = dict(exporter.get_finished_spans()[0].events[0].attributes)
    assert attrs["agentic_guard.threat_type"] == "agent_config_write"
    assert "secret plan" not in attrs["agentic_guard.reason"]


def test_reason_truncated():
    pytest.importorskip("opentelemetry.sdk")
    exporter, tracer = _setup_test_otel()

    with tracer.start_as_current_span("tool-call"):
        emit_guard_decision(deny("Blocked: " + "x" * 1000))

    attrs = dict(exporter.get_finished_spans()[0].events[0].attributes)
    assert len(attrs["agentic_guard.reason"]) == 500
