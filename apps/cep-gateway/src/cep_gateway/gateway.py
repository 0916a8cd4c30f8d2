from __future__ import annotations

from dataclasses import dataclass

from opentelemetry.context import Context

from devkit.tracing import TracePropagator
from shared.weather import InvalidFormat, MissingInput, is_valid_cep

from cep_gateway.forwarder import ResolverForwarder


@dataclass(frozen=True)
class RelayedResponse:
    body: bytes
    status_code: int


class CepGateway:
    """Validates the CEP and relays the weather service's answer.

    The relayed status is 200 for any completed round trip unless
    ``relay_upstream_status`` is set, in which case the weather service's own
    status code is passed through.
    """

    def __init__(
        self,
        forwarder: ResolverForwarder,
        propagator: TracePropagator,
        relay_upstream_status: bool = False,
    ) -> None:
        self._forwarder = forwarder
        self._propagator = propagator
        self._relay_upstream_status = relay_upstream_status

    async def handle(self, cep: str | None, parent: Context | None) -> RelayedResponse:
        with self._propagator.span("validate_cep_and_forward", parent) as (context, span):
            if not cep:
                raise MissingInput()
            if not is_valid_cep(cep):
                raise InvalidFormat()
            span.set_attribute("cep", cep)

            upstream = await self._forwarder.forward(cep, self._propagator.inject(context))
            span.set_attribute("http.upstream_status_code", upstream.status_code)

        status_code = upstream.status_code if self._relay_upstream_status else 200
        return RelayedResponse(body=upstream.content, status_code=status_code)
