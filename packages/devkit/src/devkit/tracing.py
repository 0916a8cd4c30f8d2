"""Explicit trace-context passing.

Every operation that opens a span receives its parent context as an argument
and hands the child context on. Nothing here reads or writes the ambient
"current span"; W3C traceparent headers carry the context between services.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import Span, Status, StatusCode, format_trace_id
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator


@dataclass
class SpanHandle:
    span: Span
    ended: bool = False


class TracePropagator:
    def __init__(self, tracer: trace.Tracer) -> None:
        self._tracer = tracer
        self._wire_format = TraceContextTextMapPropagator()

    @classmethod
    def for_service(
        cls,
        service_name: str,
        tracer_provider: trace.TracerProvider | None = None,
    ) -> TracePropagator:
        provider = tracer_provider or trace.get_tracer_provider()
        return cls(provider.get_tracer(service_name))

    def start_span(
        self,
        name: str,
        parent: Context | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> tuple[Context, SpanHandle]:
        # An empty Context makes a root span instead of falling back to the ambient one.
        parent_context = parent if parent is not None else Context()
        span = self._tracer.start_span(name, context=parent_context, attributes=attributes)
        return trace.set_span_in_context(span, parent_context), SpanHandle(span=span)

    def end_span(self, handle: SpanHandle) -> None:
        if handle.ended:
            return
        handle.span.end()
        handle.ended = True

    def inject(self, context: Context) -> dict[str, str]:
        carrier: dict[str, str] = {}
        self._wire_format.inject(carrier, context=context)
        return carrier

    def extract(self, headers: Mapping[str, str]) -> Context:
        return self._wire_format.extract(headers, context=Context())

    @contextmanager
    def span(
        self,
        name: str,
        parent: Context | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> Iterator[tuple[Context, Span]]:
        context, handle = self.start_span(name, parent, attributes)
        try:
            yield context, handle.span
        except Exception as exc:
            mark_failed(handle.span, exc)
            raise
        finally:
            self.end_span(handle)


def mark_failed(span: Span, exc: BaseException) -> None:
    code = getattr(exc, "code", None)
    if isinstance(code, str):
        span.set_attribute("error.code", code)
    span.set_status(Status(StatusCode.ERROR, str(code or type(exc).__name__)))


def trace_id_of(context: Context) -> str:
    span_context = trace.get_current_span(context).get_span_context()
    if not span_context.is_valid:
        return ""
    return format_trace_id(span_context.trace_id)
