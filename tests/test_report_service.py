from __future__ import annotations

from datetime import datetime, timezone

import pytest
import requests

from locweather.formatting import NO_DATA_MESSAGE, format_short_time
from locweather.providers.ipinfo import IPInfoLocator
from locweather.providers.openweather import OpenWeatherProvider
from locweather.services.location import CoordinateResolver
from locweather.services.report import LocationIntent, LocationRequest, WeatherReportService


WEATHER_URL = "https://weather.test/data/2.5/weather"
GEOLOCATION_URL = "https://geo.test/json"


def make_service(rng=None, weather_key: str = "secret", geolocation_key: str = "token") -> WeatherReportService:
    locator = IPInfoLocator(api_key=geolocation_key, base_url=GEOLOCATION_URL)
    weather = OpenWeatherProvider(api_key=weather_key, base_url=WEATHER_URL)
    return WeatherReportService(resolver=CoordinateResolver(locator, rng=rng), weather_provider=weather)


def test_explicit_new_york_report(requests_mock, make_weather_payload):
    requests_mock.get(WEATHER_URL, json=make_weather_payload())
    service = make_service()

    result = service.report(LocationRequest(intent=LocationIntent.EXPLICIT, explicit=("40.7128", "-74.0060")))

    sunrise = datetime.fromtimestamp(1700000000, tz=timezone.utc).astimezone()
    sunset = datetime.fromtimestamp(1700040000, tz=timezone.utc).astimezone()
    assert result.ok
    assert "New York" in result.text
    assert "Clear Sky" in result.text
    assert "68°F" in result.text
    assert f"Sunrise: {format_short_time(sunrise)}" in result.text
    assert f"Sunset: {format_short_time(sunset)}" in result.text
    assert "40.7128 N, 74.0060 W" in result.text
    assert result.snapshot.sunrise == sunrise
    assert requests_mock.call_count == 1
    assert requests_mock.last_request.qs["lat"] == ["40.7128"]


def test_geolocation_timeout_uses_random_coordinate(requests_mock, make_weather_payload, sequence_random):
    requests_mock.get(GEOLOCATION_URL, exc=requests.exceptions.ConnectTimeout)
    requests_mock.get(WEATHER_URL, json=make_weather_payload(name=""))
    service = make_service(rng=sequence_random(0.25, 0.75))

    result = service.report(LocationRequest())

    assert result.ok
    assert "Weather for unknown locale" in result.text
    assert "45.0000 S, 90.0000 E" in result.text
    assert (result.snapshot.latitude, result.snapshot.longitude) == (-45.0, 90.0)
    assert requests_mock.call_count == 2
    assert requests_mock.request_history[0].url.startswith(GEOLOCATION_URL)
    assert requests_mock.request_history[1].qs["lat"] == ["-45.0"]


def test_auto_report_uses_geolocation(requests_mock, make_weather_payload):
    requests_mock.get(GEOLOCATION_URL, json={"loc": "51.5074,-0.1278"})
    requests_mock.get(WEATHER_URL, json=make_weather_payload(name="London"))

    result = make_service().report(LocationRequest(intent=LocationIntent.AUTO))

    assert result.ok
    assert "51.5074 N, 0.1278 W" in result.text


def test_stored_report_uses_stored_coordinate(requests_mock, make_weather_payload):
    requests_mock.get(WEATHER_URL, json=make_weather_payload(name="Paris"))

    result = make_service().report(
        LocationRequest(intent=LocationIntent.STORED, stored=("48.8566", "2.3522"))
    )

    assert result.ok
    assert "48.8566 N, 2.3522 E" in result.text
    assert requests_mock.call_count == 1


def test_random_report_never_calls_geolocation(requests_mock, make_weather_payload, sequence_random):
    requests_mock.get(WEATHER_URL, json=make_weather_payload())

    result = make_service(rng=sequence_random(0.5, 0.5)).report(LocationRequest(intent=LocationIntent.RANDOM))

    assert result.ok
    assert "0.0000 N, 0.0000 E" in result.text
    assert requests_mock.call_count == 1


def test_invalid_explicit_coordinate_fails_without_fallback(requests_mock):
    result = make_service().report(LocationRequest(intent=LocationIntent.EXPLICIT, explicit=("forty", "-74")))

    assert not result.ok
    assert result.text.startswith("Invalid coordinate")
    assert result.snapshot is None
    assert requests_mock.call_count == 0


def test_weather_failure_renders_no_data(requests_mock):
    requests_mock.get(WEATHER_URL, status_code=503, text="service unavailable")

    result = make_service().report(LocationRequest(intent=LocationIntent.EXPLICIT, explicit=("1", "2")))

    assert not result.ok
    assert result.text == NO_DATA_MESSAGE
    assert requests_mock.call_count == 1


@pytest.mark.parametrize(
    "body",
    [
        '{"weather": [{"description": "clear sky"}], "main": {"temp": NaN}, "sys": {"sunrise": 1700000000, "sunset": 1700040000}}',
        '{"weather": [{"description": "clear sky"}], "main": {"temp": Infinity}, "sys": {"sunrise": 1700000000, "sunset": 1700040000}}',
        '{"weather": [{"description": "clear sky"}], "main": {"temp": 20.0}, "sys": {"sunrise": 1e20, "sunset": 1700040000}}',
    ],
)
def test_unusable_weather_values_render_no_data(requests_mock, body):
    requests_mock.get(WEATHER_URL, text=body)

    result = make_service().report(LocationRequest(intent=LocationIntent.EXPLICIT, explicit=("1", "2")))

    assert not result.ok
    assert result.text == NO_DATA_MESSAGE
    assert result.snapshot is None


def test_missing_weather_key_is_fatal(requests_mock):
    result = make_service(weather_key="").report(LocationRequest(intent=LocationIntent.EXPLICIT, explicit=("1", "2")))

    assert not result.ok
    assert result.text == NO_DATA_MESSAGE
    assert requests_mock.call_count == 0


def test_missing_geolocation_key_still_reports(requests_mock, make_weather_payload, sequence_random):
    requests_mock.get(WEATHER_URL, json=make_weather_payload())

    result = make_service(rng=sequence_random(0.5, 0.5), geolocation_key="").report(LocationRequest())

    assert result.ok
    assert requests_mock.call_count == 1
