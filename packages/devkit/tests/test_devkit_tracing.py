from __future__ import annotations

import pytest
from opentelemetry.context import Context
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode, format_span_id, format_trace_id

from devkit.tracing import TracePropagator, trace_id_of
from shared.weather import NotFound


def build_propagator() -> tuple[TracePropagator, InMemorySpanExporter]:
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return TracePropagator.for_service("test", provider), exporter


def test_start_span_without_parent_is_a_root() -> None:
    propagator, exporter = build_propagator()
    context, handle = propagator.start_span("root")
    propagator.end_span(handle)

    (span,) = exporter.get_finished_spans()
    assert span.parent is None
    assert trace_id_of(context) == format_trace_id(span.context.trace_id)


def test_child_span_nests_under_explicit_parent() -> None:
    propagator, exporter = build_propagator()
    root_context, root = propagator.start_span("root")
    _, child = propagator.start_span("child", root_context)
    propagator.end_span(child)
    propagator.end_span(root)

    finished = {span.name: span for span in exporter.get_finished_spans()}
    assert finished["child"].parent.span_id == finished["root"].context.span_id
    assert finished["child"].context.trace_id == finished["root"].context.trace_id


def test_end_span_is_idempotent() -> None:
    propagator, exporter = build_propagator()
    _, handle = propagator.start_span("once")
    propagator.end_span(handle)
    propagator.end_span(handle)

    assert handle.ended is True
    assert len(exporter.get_finished_spans()) == 1


def test_span_scope_ends_and_marks_failure_on_exception() -> None:
    propagator, exporter = build_propagator()
    with pytest.raises(NotFound):
        with propagator.span("lookup"):
            raise NotFound()

    (span,) = exporter.get_finished_spans()
    assert span.status.status_code is StatusCode.ERROR
    assert span.attributes["error.code"] == "NOT_FOUND"


def test_inject_then_extract_preserves_trace_and_parent() -> None:
    propagator, exporter = build_propagator()
    context, handle = propagator.start_span("gateway")
    headers = propagator.inject(context)
    remote_context = propagator.extract(headers)
    _, remote = propagator.start_span("resolver", remote_context)
    propagator.end_span(remote)
    propagator.end_span(handle)

    assert "traceparent" in headers
    finished = {span.name: span for span in exporter.get_finished_spans()}
    assert trace_id_of(remote_context) == trace_id_of(context)
    assert finished["resolver"].parent.span_id == finished["gateway"].context.span_id
    assert headers["traceparent"].split("-")[2] == format_span_id(finished["gateway"].context.span_id)


def test_extract_without_headers_yields_empty_context() -> None:
    propagator, _ = build_propagator()
    assert trace_id_of(propagator.extract({})) == ""
    assert trace_id_of(Context()) == ""
