from __future__ import annotations

import httpx
import pytest

from shared.weather import InternalError

from weather_service.clients.weather_client import WeatherClient


def build_client(handler) -> WeatherClient:
    transport = httpx.MockTransport(handler)
    return WeatherClient(
        base_url="https://weather.example",
        api_key="test-key",
        client_factory=lambda: httpx.AsyncClient(transport=transport, timeout=5.0),
    )


@pytest.mark.asyncio
async def test_weather_client_sends_locality_and_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/current.json"
        assert request.url.params["q"] == "São Paulo"
        assert request.url.params["key"] == "test-key"
        return httpx.Response(
            200,
            json={"location": {"name": "Sao Paulo"}, "current": {"temp_c": 25.0, "temp_f": 77.0, "humidity": 40}},
        )

    record = await build_client(handler).current("São Paulo")

    assert record.location.name == "Sao Paulo"
    assert record.current.temp_c == 25.0
    assert record.current.temp_f == 77.0


@pytest.mark.asyncio
async def test_weather_client_collapses_unreachable_to_internal_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(InternalError):
        await build_client(handler).current("Recife")


@pytest.mark.asyncio
async def test_weather_client_collapses_http_error_to_internal_error() -> None:
    client = build_client(lambda _: httpx.Response(403, json={"error": {"code": 2008, "message": "key disabled"}}))
    with pytest.raises(InternalError):
        await client.current("Recife")


@pytest.mark.asyncio
async def test_weather_client_collapses_malformed_payload_to_internal_error() -> None:
    client = build_client(lambda _: httpx.Response(200, json={"location": {"name": "Recife"}}))
    with pytest.raises(InternalError) as exc_info:
        await client.current("Recife")

    assert exc_info.value.message == "internal error"


@pytest.mark.asyncio
async def test_weather_client_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/current.json":
            location = f"https://weather.example/v2/current.json?{request.url.query.decode()}"
            return httpx.Response(302, headers={"location": location})
        assert request.url.params["q"] == "Recife"
        return httpx.Response(
            200,
            json={"location": {"name": "Recife"}, "current": {"temp_c": 30.0, "temp_f": 86.0}},
        )

    record = await build_client(handler).current("Recife")

    assert record.current.temp_c == 30.0
