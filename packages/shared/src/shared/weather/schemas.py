from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Offset-only Kelvin conversion; consumers rely on the integer offset.
KELVIN_OFFSET = 273


class DirectoryRecord(BaseModel):
    """ViaCEP payload. ``erro`` is set instead of a locality for unknown codes."""

    model_config = ConfigDict(extra="ignore")

    cep: str = ""
    localidade: str = ""
    erro: Any = None

    @property
    def not_found(self) -> bool:
        return self.erro not in (None, False, "")

    @model_validator(mode="after")
    def _locality_or_error(self) -> DirectoryRecord:
        if not self.not_found and not self.localidade.strip():
            raise ValueError("directory record carries neither a locality nor an error indicator")
        return self


class WeatherLocation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class WeatherCurrent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    temp_c: float
    temp_f: float


class WeatherRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    location: WeatherLocation
    current: WeatherCurrent


class NormalizedWeatherResponse(BaseModel):
    city: str = Field(serialization_alias="City")
    temp_c: float = Field(serialization_alias="Temp_C")
    temp_f: float = Field(serialization_alias="Temp_F")
    temp_k: float = Field(serialization_alias="Temp_K")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def normalize(directory: DirectoryRecord, weather: WeatherRecord) -> NormalizedWeatherResponse:
    return NormalizedWeatherResponse(
        city=weather.location.name or directory.localidade,
        temp_c=weather.current.temp_c,
        temp_f=weather.current.temp_f,
        temp_k=weather.current.temp_c + KELVIN_OFFSET,
    )
