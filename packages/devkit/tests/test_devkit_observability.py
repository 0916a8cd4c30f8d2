from __future__ import annotations

import logging

from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from devkit import observability
from devkit.observability import _ProbeAccessLogFilter, build_tracer_provider, init_telemetry


def _access_record(path: str, status: int) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/%s" %d',
        args=("127.0.0.1:12345", "GET", path, "1.1", status),
        exc_info=None,
    )


def test_probe_access_log_filter_ignores_probe_200() -> None:
    probe_filter = _ProbeAccessLogFilter(ignored_paths=("/healthz", "/readyz"))
    assert probe_filter.filter(_access_record("/healthz", 200)) is False
    assert probe_filter.filter(_access_record("/readyz/", 200)) is False


def test_probe_access_log_filter_keeps_lookups_and_failures() -> None:
    probe_filter = _ProbeAccessLogFilter(ignored_paths=("/healthz", "/readyz"))
    assert probe_filter.filter(_access_record("/healthz", 503)) is True
    assert probe_filter.filter(_access_record("/?cep=01310100", 200)) is True


def test_init_telemetry_installs_provider_once() -> None:
    first = init_telemetry("cep-gateway")
    second = init_telemetry("weather-service")

    assert callable(first)
    assert first is second


def test_tracer_provider_batches_spans_to_collector(monkeypatch) -> None:
    exporter = InMemorySpanExporter()
    endpoints: list[str] = []

    def fake_exporter(collector_endpoint: str) -> InMemorySpanExporter:
        endpoints.append(collector_endpoint)
        return exporter

    monkeypatch.setattr(observability, "_build_exporter", fake_exporter)
    provider = build_tracer_provider("weather-service", "otel-collector:4317")

    provider.get_tracer("test").start_span("lookup_directory").end()
    assert provider.force_flush() is True

    (span,) = exporter.get_finished_spans()
    assert endpoints == ["otel-collector:4317"]
    assert span.name == "lookup_directory"
    assert span.resource.attributes["service.name"] == "weather-service"
    provider.shutdown()


def test_tracer_provider_without_collector_exports_nothing(monkeypatch) -> None:
    def unexpected_exporter(_: str) -> InMemorySpanExporter:
        raise AssertionError("no exporter expected without a collector endpoint")

    monkeypatch.setattr(observability, "_build_exporter", unexpected_exporter)
    provider = build_tracer_provider("cep-gateway", None)

    provider.get_tracer("test").start_span("validate_cep_and_forward").end()
    assert provider.force_flush() is True


def test_collector_exporter_speaks_otlp_grpc() -> None:
    exporter = observability._build_exporter("localhost:4317")
    try:
        assert isinstance(exporter, OTLPSpanExporter)
    finally:
        exporter.shutdown()
