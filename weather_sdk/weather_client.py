import logging
from typing import Any, Dict, Optional

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT
from .errors import (
    CityNotFoundError,
    InvalidAPIKeyError,
    WeatherAPIConnectionError,
    WeatherAPIError,
    WeatherDataError,
)
from .models import WeatherData

logger = logging.getLogger(__name__)

# path -> error message
REQUIRED_FIELDS = {
    "weather[0].main": "Missing 'main' in 'weather' field",
    "weather[0].description": "Missing 'description' in 'weather' field",
    "main.temp": "Missing 'temp' in 'main' field",
    "main.feels_like": "Missing 'feels_like' in 'main' field",
    "wind.speed": "Missing 'speed' in 'wind' field",
    "sys.sunrise": "Missing 'sunrise' in 'sys' field",
    "sys.sunset": "Missing 'sunset' in 'sys' field",
    "name": "Missing 'name' field",
}


def _get_by_path(data: Any, path: str) -> Any:
    node = data
    for part in path.split("."):
        index = None
        if "[" in part:
            part, _, rest = part.partition("[")
            index = int(rest.rstrip("]"))
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if index is not None:
            if not isinstance(node, list) or len(node) <= index:
                return None
            node = node[index]
    return node


def validate_payload(data: Dict[str, Any]) -> None:
    for path, message in REQUIRED_FIELDS.items():
        value = _get_by_path(data, path)
        if value is None or value == "":
            logger.error("%s: %s", message, data)
            raise WeatherDataError(message)


class WeatherClient:
    """Fetches current weather for a city from the OpenWeather API.

    Safe to call concurrently. Pass ``client`` to reuse one
    ``httpx.AsyncClient``; otherwise a client is opened per request.
    """

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def fetch_raw(self, city: str) -> Dict[str, Any]:
        params = {"q": city, "appid": self.api_key}
        url = f"{self.base_url}/weather"

        async def _fetch(c: httpx.AsyncClient) -> httpx.Response:
            return await c.get(url, params=params, timeout=self.timeout)

        try:
            if self._client is None:
                async with httpx.AsyncClient() as local_client:
                    resp = await _fetch(local_client)
            else:
                resp = await _fetch(self._client)
        except httpx.RequestError as e:
            logger.error("Error communicating with the weather API for '%s': %s", city, e)
            raise WeatherAPIConnectionError(f"Network error while fetching weather for '{city}': {e}") from e

        if resp.status_code == 401:
            logger.warning("Unauthorized access")
            raise InvalidAPIKeyError("Invalid API key")
        if resp.status_code == 404:
            raise CityNotFoundError(f"City '{city}' not found")
        if resp.status_code != 200:
            logger.warning("Unexpected response code: %s", resp.status_code)
            raise WeatherAPIError(f"Weather API returned {resp.status_code}: {resp.text}")

        if not resp.content:
            logger.warning("Response body is empty")
            raise WeatherDataError("Received empty response from API")
        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Failed to parse weather data due to JSON issue: %s", e)
            raise WeatherDataError(f"Failed to parse weather data: {e}") from e
        if not isinstance(data, dict):
            raise WeatherDataError("Unexpected weather payload")
        return data

    async def fetch_weather(self, city: str) -> WeatherData:
        data = await self.fetch_raw(city)
        validate_payload(data)
        try:
            return WeatherData.from_payload(data)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Failed to parse weather data: %s", e)
            raise WeatherDataError(f"Failed to parse weather data: {e}") from e
