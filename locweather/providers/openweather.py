"""OpenWeather current weather provider."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from .base import HttpProvider, ParseError
from .schemas import CurrentWeatherPayload
from ..entities import UNKNOWN_LOCALE, Coordinate, WeatherSnapshot


def celsius_to_fahrenheit(value: float) -> float:
    return float(round(value * 9 / 5 + 32))


def title_case(text: str) -> str:
    """Lower-case ``text`` then capitalize the first letter of every word."""
    return " ".join(word[:1].upper() + word[1:] for word in text.lower().split(" "))


def to_local_time(epoch_seconds: int) -> datetime:
    return datetime.fromtimestamp(int(epoch_seconds), tz=timezone.utc).astimezone()


class OpenWeatherProvider(HttpProvider):
    """Integration with the OpenWeather current weather endpoint."""

    base_url = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(self, api_key: str, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(api_key, **kwargs)
        self.base_url = base_url or self.base_url

    def current(self, coordinate: Coordinate) -> WeatherSnapshot:
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "appid": self._require_key(),
            "units": "metric",
        }
        response = self._request("GET", self.base_url, params=params)
        payload = self._parse(self._json(response))

        description = payload.first_description()
        if description is None:
            raise ParseError("missing weather description")

        celsius = payload.main.temp
        try:
            fahrenheit = celsius_to_fahrenheit(celsius)
            sunrise = to_local_time(payload.sys.sunrise)
            sunset = to_local_time(payload.sys.sunset)
        except (OverflowError, OSError, ValueError) as exc:
            self._log.error("Weather payload values out of range: %s", exc)
            raise ParseError("weather payload values out of range") from exc

        return WeatherSnapshot(
            location_name=payload.name or UNKNOWN_LOCALE,
            condition=title_case(description),
            temperature_c=celsius,
            temperature_f=fahrenheit,
            sunrise=sunrise,
            sunset=sunset,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
        )

    def _parse(self, data: object) -> CurrentWeatherPayload:
        try:
            return CurrentWeatherPayload.model_validate(data)
        except ValidationError as exc:
            self._log.error("Unexpected weather payload: %s", exc)
            raise ParseError("unexpected weather payload") from exc


__all__ = ["OpenWeatherProvider", "celsius_to_fahrenheit", "title_case", "to_local_time"]
