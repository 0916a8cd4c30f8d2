from __future__ import annotations

from time import perf_counter

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from devkit.metrics import RequestMetric, RequestMetricCollector
from devkit.tracing import TracePropagator, trace_id_of

UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    # Route templates keep label cardinality bounded; unknown paths share one label.
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else UNMATCHED_ROUTE


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Ingress span plus request metrics.

    The span is parented on the trace context extracted from the inbound
    headers, and its child context is left on ``request.state.trace_context``
    for the endpoint to open its own spans under.
    """

    def __init__(
        self,
        app,
        propagator: TracePropagator,
        collector: RequestMetricCollector,
        service_name: str,
    ) -> None:
        super().__init__(app)
        self._propagator = propagator
        self._collector = collector
        self._service_name = service_name

    async def dispatch(self, request: Request, call_next) -> Response:
        started = perf_counter()
        parent = self._propagator.extract(request.headers)
        attributes = {"http.method": request.method, "http.route": request.url.path}
        with self._propagator.span(f"{self._service_name} {request.method}", parent, attributes) as (context, span):
            request.state.trace_context = context
            trace_id = trace_id_of(context)
            try:
                response = await call_next(request)
            except Exception:
                span.set_attribute("http.status_code", 500)
                self._observe(request, 500, started, trace_id)
                raise
            span.set_attribute("http.status_code", response.status_code)

        response.headers["x-trace-id"] = trace_id
        self._observe(request, response.status_code, started, trace_id)
        return response

    def _observe(self, request: Request, status_code: int, started: float, trace_id: str) -> None:
        self._collector.observe(
            RequestMetric(
                method=request.method,
                path=route_label(request),
                status_code=status_code,
                duration_ms=(perf_counter() - started) * 1000.0,
                trace_id=trace_id,
            )
        )
