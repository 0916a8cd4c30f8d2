from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "service"
    OTEL_SERVICE_NAME: str | None = None
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None

    @property
    def telemetry_service_name(self) -> str:
        return self.OTEL_SERVICE_NAME or self.SERVICE_NAME


class GatewaySettings(ServiceSettings):
    SERVICE_NAME: str = "cep-gateway"
    WEATHER_SERVICE_BASE_URL: str = "http://weather-service:8080"
    GATEWAY_FORWARD_TIMEOUT_SECONDS: float = 5.0
    # Off reproduces the historical behaviour of answering 200 for any relayed body.
    GATEWAY_RELAY_UPSTREAM_STATUS: bool = False


class ResolverSettings(ServiceSettings):
    SERVICE_NAME: str = "weather-service"
    DIRECTORY_BASE_URL: str = "http://viacep.com.br"
    WEATHER_API_BASE_URL: str = "https://api.weatherapi.com"
    WEATHER_API_KEY: str = ""
    LOOKUP_TIMEOUT_SECONDS: float = 5.0


def load_gateway_settings() -> GatewaySettings:
    return GatewaySettings()


def load_resolver_settings() -> ResolverSettings:
    return ResolverSettings()
