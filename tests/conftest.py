from __future__ import annotations

import pytest

from requests_mock import Mocker


class _SequenceRandom:
    """Stand-in for ``random.Random`` that replays fixed draws."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


def _weather_payload(**overrides) -> dict:
    payload = {
        "coord": {"lon": -74.006, "lat": 40.7128},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "main": {"temp": 20.0, "feels_like": 19.5, "pressure": 1015, "humidity": 60},
        "sys": {"country": "US", "sunrise": 1700000000, "sunset": 1700040000},
        "name": "New York",
        "cod": 200,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def requests_mock():
    with Mocker() as mock:
        yield mock


@pytest.fixture
def make_weather_payload():
    return _weather_payload


@pytest.fixture
def weather_payload() -> dict:
    return _weather_payload()


@pytest.fixture
def sequence_random():
    return _SequenceRandom
