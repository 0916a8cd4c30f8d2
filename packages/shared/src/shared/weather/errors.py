from __future__ import annotations

from dataclasses import dataclass

INTERNAL_ERROR_MESSAGE = "internal error"


@dataclass
class LookupFailure(Exception):
    code: str
    message: str
    status_code: int


class MissingInput(LookupFailure):
    def __init__(self) -> None:
        super().__init__("MISSING_INPUT", "cep not informed", 400)


class InvalidFormat(LookupFailure):
    def __init__(self) -> None:
        super().__init__("INVALID_FORMAT", "invalid zipcode", 422)


class NotFound(LookupFailure):
    def __init__(self) -> None:
        super().__init__("NOT_FOUND", "can not find zipcode", 404)


class LookupTransportError(LookupFailure):
    def __init__(self) -> None:
        super().__init__("LOOKUP_TRANSPORT_ERROR", INTERNAL_ERROR_MESSAGE, 500)


class DecodeError(LookupFailure):
    def __init__(self) -> None:
        super().__init__("DECODE_ERROR", INTERNAL_ERROR_MESSAGE, 500)


class InternalError(LookupFailure):
    def __init__(self) -> None:
        super().__init__("INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE, 500)


class ForwardingSetupError(LookupFailure):
    def __init__(self) -> None:
        super().__init__("FORWARDING_SETUP_ERROR", "could not build request to weather service", 500)


class ForwardingTransportError(LookupFailure):
    def __init__(self) -> None:
        super().__init__("FORWARDING_TRANSPORT_ERROR", "could not send request to weather service", 500)
