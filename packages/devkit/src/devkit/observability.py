from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

logger = logging.getLogger(__name__)

_shutdown: Callable[[], None] | None = None
_probe_filter_configured = False


class _ProbeAccessLogFilter(logging.Filter):
    def __init__(self, ignored_paths: tuple[str, ...]) -> None:
        super().__init__()
        self._ignored_paths = {self._normalize_path(path) for path in ignored_paths}

    @staticmethod
    def _normalize_path(path: str) -> str:
        base = path.split("?", 1)[0]
        if base != "/" and base.endswith("/"):
            return base[:-1]
        return base

    @classmethod
    def _extract_path_and_status(cls, record: logging.LogRecord) -> tuple[str | None, int | None]:
        # uvicorn.access args: (client_addr, method, path, http_version, status_code)
        args: Any = getattr(record, "args", ())
        if not isinstance(args, tuple) or len(args) < 5:
            return None, None
        path = args[2] if isinstance(args[2], str) else None
        try:
            status = int(args[4])
        except (TypeError, ValueError):
            status = None
        return path, status

    def filter(self, record: logging.LogRecord) -> bool:
        path, status = self._extract_path_and_status(record)
        if path is None or status is None:
            return True
        return not (status == 200 and self._normalize_path(path) in self._ignored_paths)


def _build_exporter(collector_endpoint: str):
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    return OTLPSpanExporter(endpoint=collector_endpoint, insecure=True)


def build_tracer_provider(service_name: str, collector_endpoint: str | None = None) -> TracerProvider:
    """Always-on sampling; spans are batched to the collector when one is given.

    Without a collector endpoint spans are still created and propagated but
    nothing is exported.
    """
    provider = TracerProvider(
        resource=Resource.create({"service.name": service_name}),
        sampler=ALWAYS_ON,
    )
    if collector_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_build_exporter(collector_endpoint)))
        logger.info(
            "telemetry_exporter_configured",
            extra={"service_name": service_name, "collector_endpoint": collector_endpoint},
        )
    return provider


def init_telemetry(service_name: str, collector_endpoint: str | None = None) -> Callable[[], None]:
    """Install the process-wide tracer provider and return its shutdown hook.

    Calling this more than once returns the hook of the provider installed first.
    """
    global _shutdown
    if _shutdown is not None:
        return _shutdown
    provider = build_tracer_provider(service_name, collector_endpoint)
    trace.set_tracer_provider(provider)
    _shutdown = provider.shutdown
    return _shutdown


def configure_probe_access_log_filter(ignored_paths: tuple[str, ...] = ("/healthz", "/readyz")) -> None:
    global _probe_filter_configured
    if _probe_filter_configured:
        return
    logging.getLogger("uvicorn.access").addFilter(_ProbeAccessLogFilter(ignored_paths=ignored_paths))
    _probe_filter_configured = True
