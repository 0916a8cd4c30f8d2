from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from shared.weather import (
    DecodeError,
    DirectoryRecord,
    InvalidFormat,
    LookupTransportError,
    NotFound,
)

logger = logging.getLogger(__name__)


class DirectoryClient:
    """Resolves a CEP to a locality through the ViaCEP contract."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    async def lookup(self, cep: str) -> DirectoryRecord:
        url = f"{self._base_url}/ws/{quote(cep, safe='')}/json/"
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            logger.warning("directory_lookup_unreachable", extra={"cep": cep, "reason": type(exc).__name__})
            raise LookupTransportError() from exc

        if response.status_code == httpx.codes.BAD_REQUEST:
            raise InvalidFormat()
        if response.is_error:
            logger.warning("directory_lookup_http_error", extra={"cep": cep, "status_code": response.status_code})
            raise LookupTransportError()

        try:
            record = DirectoryRecord.model_validate_json(response.content)
        except ValidationError as exc:
            logger.warning("directory_lookup_undecodable", extra={"cep": cep})
            raise DecodeError() from exc

        if record.not_found:
            raise NotFound()
        return record
