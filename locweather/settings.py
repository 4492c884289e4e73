"""Settings for the weather tool.

Values come from a JSON settings file (``appsettings.json`` by default) and
can be overridden through environment variables. The core never writes
settings itself; ``update_stored_location`` and ``update_api_keys`` are only
called from the command line.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .entities import Coordinate, ProviderCredentials


logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "appsettings.json"
SECTION = "OpenWeatherService"

DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_GEOLOCATION_URL = "https://ipinfo.io/json"
DEFAULT_TIMEOUT = 10.0


class ImproperlyConfigured(RuntimeError):
    """Raised when the settings file or environment cannot be used."""


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Fetch environment variables, treating blank values as unset."""

    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value


@dataclass(frozen=True)
class Settings:
    credentials: ProviderCredentials
    stored_latitude: Optional[str] = None
    stored_longitude: Optional[str] = None
    weather_url: str = DEFAULT_WEATHER_URL
    geolocation_url: str = DEFAULT_GEOLOCATION_URL
    timeout: float = DEFAULT_TIMEOUT
    path: Optional[Path] = None

    @property
    def stored_location(self) -> Tuple[Optional[str], Optional[str]]:
        return self.stored_latitude, self.stored_longitude


def settings_path(path: Optional[os.PathLike] = None) -> Path:
    if path is not None:
        return Path(path)
    return Path(env("LOCWEATHER_SETTINGS", DEFAULT_SETTINGS_FILE))


def load_settings(path: Optional[os.PathLike] = None) -> Settings:
    resolved = settings_path(path)
    section = _read_section(_read_document(resolved), resolved)

    credentials = ProviderCredentials(
        weather_api_key=env("OPENWEATHER_API_KEY", _text(section.get("OpenWeatherApiKey"))),
        geolocation_api_key=env("IPINFO_API_KEY", _text(section.get("IPInfoApiKey"))),
    )
    return Settings(
        credentials=credentials,
        stored_latitude=env("LOCWEATHER_LATITUDE", _text(section.get("Latitude")) or None),
        stored_longitude=env("LOCWEATHER_LONGITUDE", _text(section.get("Longitude")) or None),
        weather_url=env("LOCWEATHER_WEATHER_URL", DEFAULT_WEATHER_URL),
        geolocation_url=env("LOCWEATHER_GEOLOCATION_URL", DEFAULT_GEOLOCATION_URL),
        timeout=_timeout(env("LOCWEATHER_TIMEOUT")),
        path=resolved,
    )


def update_stored_location(latitude: str, longitude: str, path: Optional[os.PathLike] = None) -> Coordinate:
    """Persist a new stored coordinate, keeping the rest of the file intact."""

    coordinate = Coordinate.parse(latitude, longitude)
    _update_section(settings_path(path), {"Latitude": latitude.strip(), "Longitude": longitude.strip()})
    return coordinate


def update_api_keys(
    path: Optional[os.PathLike] = None,
    *,
    weather_api_key: Optional[str] = None,
    geolocation_api_key: Optional[str] = None,
) -> None:
    updates: Dict[str, str] = {}
    if weather_api_key is not None:
        updates["OpenWeatherApiKey"] = weather_api_key
    if geolocation_api_key is not None:
        updates["IPInfoApiKey"] = geolocation_api_key
    if not updates:
        return
    _update_section(settings_path(path), updates)


# Helpers ------------------------------------------------------------
def _read_document(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug("Settings file %s not found, using environment only", path)
        return {}
    try:
        document = json.loads(path.read_text(encoding="utf-8") or "{}")
    except (OSError, ValueError) as exc:
        raise ImproperlyConfigured(f"Cannot read settings file {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ImproperlyConfigured(f"Settings file {path} must contain a JSON object")
    return document


def _read_section(document: Dict[str, Any], path: Path) -> Dict[str, Any]:
    section = document.get(SECTION) or {}
    if not isinstance(section, dict):
        raise ImproperlyConfigured(f"{SECTION} in {path} must be a JSON object")
    return section


def _update_section(path: Path, updates: Dict[str, str]) -> None:
    document = _read_document(path)
    section = dict(_read_section(document, path))
    section.update(updates)
    document[SECTION] = section
    try:
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ImproperlyConfigured(f"Cannot write settings file {path}: {exc}") from exc
    logger.info("Updated %s in %s", ", ".join(sorted(updates)), path)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _timeout(value: Optional[str]) -> float:
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ImproperlyConfigured(f"LOCWEATHER_TIMEOUT must be a number, got {value!r}") from exc
    if timeout <= 0:
        raise ImproperlyConfigured("LOCWEATHER_TIMEOUT must be positive")
    return timeout


__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "ImproperlyConfigured",
    "Settings",
    "env",
    "load_settings",
    "settings_path",
    "update_api_keys",
    "update_stored_location",
]
