"""Command line entry point: fetch current weather for a resolved location."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, List, Optional, TextIO

import requests

from .entities import InvalidCoordinate
from .providers.base import RequestConfig
from .providers.ipinfo import IPInfoLocator
from .providers.openweather import OpenWeatherProvider
from .services.location import CoordinateResolver
from .services.report import LocationIntent, LocationRequest, WeatherReportService
from .settings import ImproperlyConfigured, Settings, load_settings, update_api_keys, update_stored_location


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CommandError(Exception):
    """A problem the user has to fix; reported without a traceback."""


class Command:
    help = "Fetch current weather for explicit, stored, IP-based or random coordinates"

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> None:
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog="locweather", description=self.help)
        self.add_arguments(parser)
        return parser

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        intent = parser.add_mutually_exclusive_group()
        intent.add_argument("--location", nargs=2, metavar=("LAT", "LON"), help="Use an explicit coordinate")
        intent.add_argument("--config", action="store_true", help="Use the coordinate stored in the settings file")
        intent.add_argument("--random", action="store_true", help="Use a random coordinate")
        intent.add_argument(
            "--update-lat-long",
            nargs=2,
            metavar=("LAT", "LON"),
            help="Store a coordinate in the settings file and exit",
        )
        intent.add_argument("--set-weather-key", metavar="KEY", help="Store the OpenWeather API key and exit")
        intent.add_argument("--set-geolocation-key", metavar="KEY", help="Store the ipinfo.io API key and exit")
        parser.add_argument("--settings", metavar="PATH", help="Settings file (default: appsettings.json)")
        parser.add_argument("--hide-coordinates", action="store_true", help="Do not print the coordinate")
        parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeat for debug)")

    def handle(self, **options: Any) -> int:
        path = options.get("settings")

        if options.get("update_lat_long"):
            latitude, longitude = options["update_lat_long"]
            try:
                update_stored_location(latitude, longitude, path)
            except InvalidCoordinate as exc:
                raise CommandError(f"Invalid coordinate: {exc}") from exc
            self.stdout.write(f"Updated settings with Latitude: {latitude}, Longitude: {longitude}\n")
            return 0

        if options.get("set_weather_key") is not None or options.get("set_geolocation_key") is not None:
            update_api_keys(
                path,
                weather_api_key=options.get("set_weather_key"),
                geolocation_api_key=options.get("set_geolocation_key"),
            )
            self.stdout.write("Updated API keys\n")
            return 0

        settings = load_settings(path)
        with requests.Session() as session:
            result = build_service(settings, session).report(build_request(settings, options))
        self.stdout.write(result.text + "\n")
        return 0 if result.ok else 1

    def run(self, argv: Optional[List[str]] = None) -> int:
        options = vars(self.create_parser().parse_args(argv))
        configure_logging(options.get("verbose", 0))
        try:
            return self.handle(**options)
        except (CommandError, ImproperlyConfigured) as exc:
            self.stderr.write(f"{exc}\n")
            return 1


def build_request(settings: Settings, options: dict) -> LocationRequest:
    if options.get("location"):
        intent = LocationIntent.EXPLICIT
    elif options.get("config"):
        intent = LocationIntent.STORED
    elif options.get("random"):
        intent = LocationIntent.RANDOM
    else:
        intent = LocationIntent.AUTO
    explicit = tuple(options["location"]) if options.get("location") else None
    return LocationRequest(
        intent=intent,
        explicit=explicit,
        stored=settings.stored_location,
        show_coordinates=not options.get("hide_coordinates", False),
    )


def build_service(settings: Settings, session: requests.Session) -> WeatherReportService:
    request_config = RequestConfig(timeout=settings.timeout)
    locator = IPInfoLocator(
        settings.credentials.geolocation_api_key,
        base_url=settings.geolocation_url,
        session=session,
        request_config=request_config,
    )
    weather = OpenWeatherProvider(
        settings.credentials.weather_api_key,
        base_url=settings.weather_url,
        session=session,
        request_config=request_config,
    )
    return WeatherReportService(resolver=CoordinateResolver(locator), weather_provider=weather)


def configure_logging(verbosity: int = 0) -> None:
    level_name = os.environ.get("LOCWEATHER_LOG_LEVEL")
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    elif level_name:
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    return Command().run(argv)


__all__ = ["Command", "CommandError", "build_request", "build_service", "main"]
