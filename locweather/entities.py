from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


UNKNOWN_LOCALE = "unknown locale"


class InvalidCoordinate(ValueError):
    """Raised when a latitude/longitude pair cannot be read as numbers."""


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: Optional[str], longitude: Optional[str]) -> "Coordinate":
        return cls(
            latitude=_parse_degrees(latitude, "latitude"),
            longitude=_parse_degrees(longitude, "longitude"),
        )


@dataclass(frozen=True)
class WeatherSnapshot:
    """Normalized current weather for one coordinate.

    Temperatures are kept in both scales so the presentation layer never has
    to convert:
    - ``temperature_c`` as reported by the provider
    - ``temperature_f`` rounded to the nearest whole degree
    Sunrise and sunset are timezone-aware datetimes in the local zone.
    """

    location_name: str
    condition: str
    temperature_c: float
    temperature_f: float
    sunrise: datetime
    sunset: datetime
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ProviderCredentials:
    weather_api_key: str = ""
    geolocation_api_key: str = ""


def _parse_degrees(value: Optional[object], label: str) -> float:
    if value is None:
        raise InvalidCoordinate(f"{label} is required")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            raise InvalidCoordinate(f"{label} is required")
        try:
            number = float(text)
        except ValueError as exc:
            raise InvalidCoordinate(f"{label} {text!r} is not a number") from exc
    if not math.isfinite(number):
        raise InvalidCoordinate(f"{label} must be a finite number")
    return number


__all__ = [
    "Coordinate",
    "InvalidCoordinate",
    "ProviderCredentials",
    "UNKNOWN_LOCALE",
    "WeatherSnapshot",
]
