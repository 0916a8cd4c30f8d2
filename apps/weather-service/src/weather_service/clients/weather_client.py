from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from shared.weather import InternalError, WeatherRecord

logger = logging.getLogger(__name__)


class WeatherClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 5.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    async def current(self, locality: str) -> WeatherRecord:
        # Every failure collapses to InternalError; the log line keeps the sub-cause.
        params = {"q": locality, "key": self._api_key}
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.get(f"{self._base_url}/v1/current.json", params=params, follow_redirects=True)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "weather_lookup_http_error",
                extra={"locality": locality, "status_code": exc.response.status_code},
            )
            raise InternalError() from exc
        except httpx.HTTPError as exc:
            logger.warning("weather_lookup_unreachable", extra={"locality": locality, "reason": type(exc).__name__})
            raise InternalError() from exc

        try:
            return WeatherRecord.model_validate_json(response.content)
        except ValidationError as exc:
            logger.warning("weather_lookup_undecodable", extra={"locality": locality})
            raise InternalError() from exc
