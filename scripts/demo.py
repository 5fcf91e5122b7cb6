import asyncio
import logging
import os

from weather_sdk import InstanceRegistry, Mode, WeatherAPIError, configure_logging

logger = logging.getLogger(__name__)


async def main():
    configure_logging()
    key = os.environ.get("OPENWEATHER_API_KEY")
    if not key:
        raise SystemExit("OPENWEATHER_API_KEY is not set")

    cities = ["London", "Moscow", "New York", "Moscow", "London"]
    async with InstanceRegistry() as registry:
        sdk = await registry.get_or_create(key, Mode.ON_DEMAND)
        for city in cities:
            try:
                data = await sdk.get_weather(city)
            except WeatherAPIError as e:
                logger.error("%s: %s", city, e)
                continue
            print(f"{city}: {data.weather.description}, {data.temperature.temp}K")


if __name__ == "__main__":
    asyncio.run(main())
