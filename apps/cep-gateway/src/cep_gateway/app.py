from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import Response
from opentelemetry.trace import TracerProvider
from starlette.exceptions import HTTPException as StarletteHTTPException

from devkit.config import GatewaySettings, load_gateway_settings
from devkit.metrics import (
    CompositeRequestMetricsCollector,
    InMemoryRequestMetricsCollector,
    PrometheusRequestMetricsCollector,
)
from devkit.middleware import ObservabilityMiddleware
from devkit.observability import configure_probe_access_log_filter, init_telemetry
from devkit.tracing import TracePropagator
from shared.weather import LookupFailure, handle_http_exception, handle_lookup_failure

from cep_gateway.forwarder import ResolverForwarder
from cep_gateway.gateway import CepGateway


def create_app(
    settings: GatewaySettings | None = None,
    tracer_provider: TracerProvider | None = None,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> FastAPI:
    settings = settings or load_gateway_settings()
    shutdown_telemetry = None
    if tracer_provider is None:
        shutdown_telemetry = init_telemetry(settings.telemetry_service_name, settings.OTEL_EXPORTER_OTLP_ENDPOINT)
    configure_probe_access_log_filter()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if shutdown_telemetry is not None:
            shutdown_telemetry()

    app = FastAPI(title="CEP Gateway", version="0.1.0", lifespan=lifespan)
    propagator = TracePropagator.for_service(settings.telemetry_service_name, tracer_provider)
    gateway = CepGateway(
        forwarder=ResolverForwarder(
            base_url=settings.WEATHER_SERVICE_BASE_URL,
            timeout_seconds=settings.GATEWAY_FORWARD_TIMEOUT_SECONDS,
            client_factory=client_factory,
        ),
        propagator=propagator,
        relay_upstream_status=settings.GATEWAY_RELAY_UPSTREAM_STATUS,
    )

    app.state.api_metrics = InMemoryRequestMetricsCollector()
    app.state.prom_metrics = PrometheusRequestMetricsCollector(namespace="cep_gateway")
    app.state.composite_metrics = CompositeRequestMetricsCollector([app.state.api_metrics, app.state.prom_metrics])
    app.add_middleware(
        ObservabilityMiddleware,
        propagator=propagator,
        collector=app.state.composite_metrics,
        service_name=settings.telemetry_service_name,
    )

    @app.get("/")
    async def validate_cep_and_forward(request: Request, cep: str | None = None) -> Response:
        relayed = await gateway.handle(cep, getattr(request.state, "trace_context", None))
        return Response(content=relayed.body, status_code=relayed.status_code, media_type="application/json")

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/readyz")
    async def readyz() -> dict[str, str]:
        return {"status": "ready"}

    @app.get("/metrics")
    async def metrics() -> Response:
        return Response(content=app.state.prom_metrics.render(), media_type="text/plain; version=0.0.4")

    app.add_exception_handler(LookupFailure, handle_lookup_failure)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    return app


app = create_app()
