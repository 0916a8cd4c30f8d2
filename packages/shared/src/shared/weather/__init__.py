from shared.weather.errors import (
    DecodeError,
    ForwardingSetupError,
    ForwardingTransportError,
    InternalError,
    InvalidFormat,
    LookupFailure,
    LookupTransportError,
    MissingInput,
    NotFound,
)
from shared.weather.postal_code import CEP_LENGTH, is_valid_cep
from shared.weather.response import error_response, handle_http_exception, handle_lookup_failure
from shared.weather.schemas import (
    KELVIN_OFFSET,
    DirectoryRecord,
    NormalizedWeatherResponse,
    WeatherRecord,
    normalize,
)

__all__ = [
    "CEP_LENGTH",
    "DecodeError",
    "DirectoryRecord",
    "ForwardingSetupError",
    "ForwardingTransportError",
    "InternalError",
    "InvalidFormat",
    "KELVIN_OFFSET",
    "LookupFailure",
    "LookupTransportError",
    "MissingInput",
    "NormalizedWeatherResponse",
    "NotFound",
    "WeatherRecord",
    "error_response",
    "handle_http_exception",
    "handle_lookup_failure",
    "is_valid_cep",
    "normalize",
]
