"""Typed payload schemas for the remote providers.

Only the fields the tool reads are modelled; everything else the providers
send is ignored. Optional fields default explicitly so callers can tell
"absent" from "present but empty".
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "CurrentWeatherPayload",
    "IPInfoPayload",
    "MainBlock",
    "SunBlock",
    "WeatherCondition",
]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class WeatherCondition(_Payload):
    description: Optional[str] = None


class MainBlock(_Payload):
    temp: float = Field(allow_inf_nan=False)


class SunBlock(_Payload):
    sunrise: int
    sunset: int


class CurrentWeatherPayload(_Payload):
    """Subset of the OpenWeather ``/data/2.5/weather`` response."""

    name: Optional[str] = None
    weather: List[WeatherCondition] = Field(default_factory=list)
    main: MainBlock
    sys: SunBlock

    @field_validator("weather", mode="before")
    @classmethod
    def _null_weather(cls, value):
        return [] if value is None else value

    def first_description(self) -> Optional[str]:
        if not self.weather:
            return None
        description = self.weather[0].description
        if description is None or not description.strip():
            return None
        return description


class IPInfoPayload(_Payload):
    """Subset of the ipinfo.io ``/json`` response."""

    loc: Optional[str] = None
