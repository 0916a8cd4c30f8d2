from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from typing import Protocol

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


@dataclass(frozen=True)
class RequestMetric:
    method: str
    path: str
    status_code: int
    duration_ms: float
    trace_id: str


class RequestMetricCollector(Protocol):
    def observe(self, metric: RequestMetric) -> None: ...


class InMemoryRequestMetricsCollector(RequestMetricCollector):
    """Keeps the most recent ``max_entries`` metrics only."""

    def __init__(self, max_entries: int = 1000) -> None:
        self._metrics: deque[RequestMetric] = deque(maxlen=max_entries)

    def observe(self, metric: RequestMetric) -> None:
        self._metrics.append(metric)

    def snapshot(self) -> list[dict]:
        return [asdict(item) for item in self._metrics]


class PrometheusRequestMetricsCollector(RequestMetricCollector):
    def __init__(self, namespace: str) -> None:
        self._registry = CollectorRegistry()
        self._request_counter = Counter(
            f"{namespace}_http_requests_total",
            "Total HTTP requests",
            labelnames=("method", "path", "status_code"),
            registry=self._registry,
        )
        self._latency_histogram = Histogram(
            f"{namespace}_http_request_duration_ms",
            "HTTP request latency in milliseconds",
            labelnames=("method", "path"),
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 3000),
            registry=self._registry,
        )

    def observe(self, metric: RequestMetric) -> None:
        self._request_counter.labels(metric.method, metric.path, str(metric.status_code)).inc()
        self._latency_histogram.labels(metric.method, metric.path).observe(metric.duration_ms)

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")


class CompositeRequestMetricsCollector(RequestMetricCollector):
    def __init__(self, collectors: list[RequestMetricCollector]) -> None:
        self._collectors = collectors

    def observe(self, metric: RequestMetric) -> None:
        for collector in self._collectors:
            collector.observe(metric)
