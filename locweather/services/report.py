from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from .location import CoordinateResolver, ResolvedLocation
from ..entities import InvalidCoordinate, WeatherSnapshot
from ..formatting import NO_DATA_MESSAGE, format_coordinate, format_snapshot
from ..providers.base import ProviderError


class LocationIntent(str, Enum):
    EXPLICIT = "explicit"
    STORED = "stored"
    RANDOM = "random"
    AUTO = "auto"


@dataclass(frozen=True)
class LocationRequest:
    """What the caller asked for, already parsed from the command line."""

    intent: LocationIntent = LocationIntent.AUTO
    explicit: Optional[Tuple[Optional[str], Optional[str]]] = None
    stored: Optional[Tuple[Optional[str], Optional[str]]] = None
    show_coordinates: bool = True


@dataclass(frozen=True)
class ReportResult:
    text: str
    ok: bool
    snapshot: Optional[WeatherSnapshot] = None


class WeatherReportService:
    """Resolve a coordinate, fetch its weather and render it for the console."""

    def __init__(
        self,
        *,
        resolver: CoordinateResolver,
        weather_provider: Any,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.resolver = resolver
        self.weather = weather_provider
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def report(self, request: LocationRequest) -> ReportResult:
        try:
            resolved = self._resolve(request)
        except InvalidCoordinate as exc:
            self._log.error("Invalid coordinate: %s", exc)
            return ReportResult(text=f"Invalid coordinate: {exc}", ok=False)

        coordinate = resolved.coordinate
        self._log.info(
            "Fetching %s weather data for %s",
            resolved.source,
            format_coordinate(coordinate.latitude, coordinate.longitude),
        )
        try:
            snapshot = self.weather.current(coordinate)
        except ProviderError as exc:
            self._log.error("Weather provider %s failed: %s", self.weather.__class__.__name__, exc)
            return ReportResult(text=NO_DATA_MESSAGE, ok=False)

        return ReportResult(
            text=format_snapshot(snapshot, show_coordinates=request.show_coordinates),
            ok=True,
            snapshot=snapshot,
        )

    def _resolve(self, request: LocationRequest) -> ResolvedLocation:
        intent = request.intent
        if intent is LocationIntent.EXPLICIT:
            if request.explicit is None:
                raise InvalidCoordinate("an explicit latitude and longitude are required")
            return self.resolver.resolve_with_source(explicit=request.explicit)
        if intent is LocationIntent.STORED:
            return self.resolver.resolve_with_source(stored=request.stored or (None, None))
        if intent is LocationIntent.RANDOM:
            return self.resolver.resolve_with_source(allow_network_lookup=False)
        return self.resolver.resolve_with_source(allow_network_lookup=True)


__all__ = ["LocationIntent", "LocationRequest", "ReportResult", "WeatherReportService"]
