from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from .base import HttpProvider, ParseError
from .schemas import IPInfoPayload
from ..entities import Coordinate, InvalidCoordinate


class IPInfoLocator(HttpProvider):
    """Infer the caller's coordinate from its public IP address via ipinfo.io."""

    base_url = "https://ipinfo.io/json"

    def __init__(self, api_key: str, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(api_key, **kwargs)
        self.base_url = base_url or self.base_url

    def locate(self) -> Coordinate:
        token = self._require_key()
        response = self._request("GET", self.base_url, params={"token": token})
        data = self._json(response)
        try:
            payload = IPInfoPayload.model_validate(data)
        except ValidationError as exc:
            raise ParseError("unexpected geolocation payload") from exc
        if not payload.loc:
            raise ParseError("missing loc in response")
        return self._parse_loc(payload.loc)

    def _parse_loc(self, loc: str) -> Coordinate:
        parts = loc.split(",")
        if len(parts) != 2:
            raise ParseError(f"malformed loc {loc!r}")
        try:
            coordinate = Coordinate.parse(parts[0], parts[1])
        except InvalidCoordinate as exc:
            raise ParseError(f"malformed loc {loc!r}") from exc
        self._log.debug("Geolocation resolved to %s", loc)
        return coordinate


__all__ = ["IPInfoLocator"]
