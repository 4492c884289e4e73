"""Console rendering for weather snapshots."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from .entities import WeatherSnapshot


NO_DATA_MESSAGE = "No weather data available."


def format_short_time(value: datetime) -> str:
    """Render ``value`` as ``h:mm AM``, whatever the process locale is."""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_latitude(value: float) -> str:
    return f"{abs(value):.4f} {'N' if value >= 0 else 'S'}"


def format_longitude(value: float) -> str:
    return f"{abs(value):.4f} {'E' if value >= 0 else 'W'}"


def format_coordinate(latitude: float, longitude: float) -> str:
    return f"{format_latitude(latitude)}, {format_longitude(longitude)}"


def format_snapshot(snapshot: Optional[WeatherSnapshot], show_coordinates: bool = True) -> str:
    if snapshot is None:
        return NO_DATA_MESSAGE

    lines = [
        "",
        f"Weather for {snapshot.location_name}",
        "",
        f"\tWeather: {snapshot.condition}",
        f"\tTemperature: {int(snapshot.temperature_f)}°F",
        "",
        f"\tSunrise: {format_short_time(snapshot.sunrise)}",
        f"\tSunset: {format_short_time(snapshot.sunset)}",
    ]
    if show_coordinates:
        lines.extend(["", f"\tCoordinates: {format_coordinate(snapshot.latitude, snapshot.longitude)}"])
    lines.append("")
    return "\n".join(lines)


__all__ = [
    "NO_DATA_MESSAGE",
    "format_coordinate",
    "format_latitude",
    "format_longitude",
    "format_short_time",
    "format_snapshot",
]
