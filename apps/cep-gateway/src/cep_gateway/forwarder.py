from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping

import httpx

from shared.weather import ForwardingSetupError, ForwardingTransportError

logger = logging.getLogger(__name__)

_HOSTNAME = re.compile(r"^[A-Za-z0-9._-]+$")
_IPV6_HOST = re.compile(r"^[0-9A-Fa-f:.]+$")


def _is_valid_base_url(base_url: str) -> bool:
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, ValueError):
        return False
    if url.scheme not in ("http", "https"):
        return False
    host = url.host
    if ":" in host:
        return bool(_IPV6_HOST.match(host))
    return bool(_HOSTNAME.match(host))


class ResolverForwarder:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    async def forward(self, cep: str, headers: Mapping[str, str]) -> httpx.Response:
        if not self._base_url:
            logger.error("resolver_url_not_configured")
            raise ForwardingSetupError()
        if not _is_valid_base_url(self._base_url):
            logger.error("resolver_url_invalid", extra={"base_url": self._base_url})
            raise ForwardingSetupError()
        factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
        async with factory() as client:
            try:
                request = client.build_request("GET", f"{self._base_url}/", params={"cep": cep}, headers=dict(headers))
                return await client.send(request, follow_redirects=True)
            except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
                logger.error("resolver_request_invalid", extra={"base_url": self._base_url, "reason": str(exc)})
                raise ForwardingSetupError() from exc
            except httpx.HTTPError as exc:
                logger.warning("resolver_unreachable", extra={"base_url": self._base_url, "reason": type(exc).__name__})
                raise ForwardingTransportError() from exc
