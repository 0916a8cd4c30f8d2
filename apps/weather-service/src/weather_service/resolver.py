from __future__ import annotations

from opentelemetry.context import Context

from devkit.tracing import TracePropagator
from shared.weather import MissingInput, NormalizedWeatherResponse, normalize

from weather_service.clients.directory_client import DirectoryClient
from weather_service.clients.weather_client import WeatherClient


class TemperatureResolver:
    """Chains the directory and weather lookups for one CEP.

    Each stage runs in its own child span under the caller's context; the
    first failure is raised as a ``LookupFailure`` and ends the request.
    """

    def __init__(
        self,
        directory: DirectoryClient,
        weather: WeatherClient,
        propagator: TracePropagator,
    ) -> None:
        self._directory = directory
        self._weather = weather
        self._propagator = propagator

    async def resolve(self, cep: str | None, parent: Context | None) -> NormalizedWeatherResponse:
        with self._propagator.span("show_temperature_by_cep", parent) as (context, span):
            if not cep:
                raise MissingInput()
            span.set_attribute("cep", cep)

            with self._propagator.span("lookup_directory", context, {"cep": cep}):
                directory = await self._directory.lookup(cep)

            with self._propagator.span("lookup_weather", context, {"locality": directory.localidade}):
                weather = await self._weather.current(directory.localidade)

            return normalize(directory, weather)
