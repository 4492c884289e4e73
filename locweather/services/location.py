from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, Union

from ..entities import Coordinate, InvalidCoordinate
from ..providers.base import ProviderError


CoordinateInput = Union[Coordinate, Tuple[Optional[str], Optional[str]]]

SOURCE_EXPLICIT = "explicit"
SOURCE_STORED = "stored"
SOURCE_GEOLOCATION = "geolocation"
SOURCE_RANDOM = "random"


class Locator(Protocol):
    def locate(self) -> Coordinate:
        ...


@dataclass(frozen=True)
class ResolvedLocation:
    coordinate: Coordinate
    source: str


def random_coordinate(rng: Optional[random.Random] = None) -> Coordinate:
    """Uniform point with latitude in [-90, 90) and longitude in [-180, 180)."""
    rng = rng or random.Random()
    return Coordinate(
        latitude=rng.random() * 180 - 90,
        longitude=rng.random() * 360 - 180,
    )


class CoordinateResolver:
    """Pick the coordinate for one run.

    Sources are tried in order: explicit input, stored configuration, IP
    geolocation, random. The first one that yields a coordinate wins and no
    later source is consulted. Only explicit input can fail the run; every
    other source falls through, ending at the random generator which cannot
    fail.
    """

    def __init__(
        self,
        locator: Optional[Locator] = None,
        *,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.locator = locator
        self.rng = rng or random.Random()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def resolve(
        self,
        explicit: Optional[CoordinateInput] = None,
        stored: Optional[CoordinateInput] = None,
        allow_network_lookup: bool = True,
    ) -> Coordinate:
        return self.resolve_with_source(explicit, stored, allow_network_lookup).coordinate

    def resolve_with_source(
        self,
        explicit: Optional[CoordinateInput] = None,
        stored: Optional[CoordinateInput] = None,
        allow_network_lookup: bool = True,
    ) -> ResolvedLocation:
        if explicit is not None:
            return ResolvedLocation(_coerce(explicit), SOURCE_EXPLICIT)

        if stored is not None:
            coordinate = self._try_stored(stored)
            if coordinate is not None:
                return ResolvedLocation(coordinate, SOURCE_STORED)

        if allow_network_lookup:
            coordinate = self._try_locator()
            if coordinate is not None:
                return ResolvedLocation(coordinate, SOURCE_GEOLOCATION)

        return ResolvedLocation(random_coordinate(self.rng), SOURCE_RANDOM)

    # Helpers ------------------------------------------------------------
    def _try_stored(self, stored: CoordinateInput) -> Optional[Coordinate]:
        if isinstance(stored, Coordinate):
            return stored
        latitude, longitude = stored
        if not _present(latitude) or not _present(longitude):
            self._log.info("Stored coordinate is incomplete, falling through")
            return None
        try:
            return Coordinate.parse(latitude, longitude)
        except InvalidCoordinate as exc:
            self._log.warning("Ignoring stored coordinate: %s", exc)
            return None

    def _try_locator(self) -> Optional[Coordinate]:
        if self.locator is None:
            return None
        try:
            return self.locator.locate()
        except ProviderError as exc:
            self._log.warning("Geolocation failed (%s): %s", exc.__class__.__name__, exc)
            return None


def _coerce(value: CoordinateInput) -> Coordinate:
    if isinstance(value, Coordinate):
        return value
    latitude, longitude = value
    return Coordinate.parse(latitude, longitude)


def _present(value: Optional[str]) -> bool:
    return value is not None and bool(str(value).strip())


__all__ = [
    "CoordinateResolver",
    "Locator",
    "ResolvedLocation",
    "SOURCE_EXPLICIT",
    "SOURCE_GEOLOCATION",
    "SOURCE_RANDOM",
    "SOURCE_STORED",
    "random_coordinate",
]
