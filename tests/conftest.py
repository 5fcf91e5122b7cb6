import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from weather_sdk.models import Sys, Temperature, Weather, WeatherData, Wind  # noqa: E402

SETTINGS_ENV = (
    "OPENWEATHER_BASE_URL",
    "WEATHER_CACHE_MAX_SIZE",
    "WEATHER_CACHE_EXPIRATION_TIME",
    "WEATHER_POLL_INTERVAL",
    "WEATHER_REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
    yield
    # load_dotenv writes straight into os.environ
    for name in SETTINGS_ENV:
        os.environ.pop(name, None)


@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return

    import httpx

    def _boom(*args, **kwargs):
        raise RuntimeError(
            "Network is blocked in unit tests. "
            "Use httpx.MockTransport or mark the test with @pytest.mark.network"
        )

    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _boom, raising=True)
    monkeypatch.setattr(httpx.AsyncHTTPTransport, "handle_async_request", _boom, raising=True)


def make_weather_data(name: str = "London", temp: float = 281.5) -> WeatherData:
    return WeatherData(
        weather=Weather(main="Clouds", description="scattered clouds"),
        temperature=Temperature(temp=temp, feels_like=temp - 2.0),
        visibility=10000,
        wind=Wind(speed=4.1),
        datetime=1675744800,
        sys=Sys(sunrise=1675751262, sunset=1675787560),
        timezone=0,
        name=name,
    )


class FakeWeatherClient:
    """Stands in for WeatherClient and counts calls per city."""

    def __init__(self, failing: Optional[Dict[str, Exception]] = None):
        self.failing = failing or {}
        self.calls: List[str] = []
        self._temps: Dict[str, float] = {}

    async def fetch_weather(self, city: str) -> WeatherData:
        self.calls.append(city)
        if city in self.failing:
            raise self.failing[city]
        temp = self._temps.get(city, 280.0) + 1.0
        self._temps[city] = temp
        return make_weather_data(city, temp)


@pytest.fixture
def weather_data_factory():
    return make_weather_data


@pytest.fixture
def fake_client():
    return FakeWeatherClient()


@pytest.fixture
def failing_client():
    def _make(**failing: Exception) -> FakeWeatherClient:
        return FakeWeatherClient(failing=failing)
    return _make
