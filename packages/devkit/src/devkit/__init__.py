"""Common runtime devkit for service infrastructure concerns."""

from devkit.config import (
    GatewaySettings,
    ResolverSettings,
    ServiceSettings,
    load_gateway_settings,
    load_resolver_settings,
)
from devkit.metrics import (
    CompositeRequestMetricsCollector,
    InMemoryRequestMetricsCollector,
    PrometheusRequestMetricsCollector,
    RequestMetric,
)
from devkit.middleware import ObservabilityMiddleware
from devkit.observability import build_tracer_provider, configure_probe_access_log_filter, init_telemetry
from devkit.tracing import SpanHandle, TracePropagator, trace_id_of

__all__ = [
    "CompositeRequestMetricsCollector",
    "GatewaySettings",
    "InMemoryRequestMetricsCollector",
    "ObservabilityMiddleware",
    "PrometheusRequestMetricsCollector",
    "RequestMetric",
    "ResolverSettings",
    "ServiceSettings",
    "SpanHandle",
    "TracePropagator",
    "build_tracer_provider",
    "configure_probe_access_log_filter",
    "init_telemetry",
    "load_gateway_settings",
    "load_resolver_settings",
    "trace_id_of",
]
