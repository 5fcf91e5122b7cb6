import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .cache import TTLCache
from .config import Settings, get_settings
from .errors import SDKShutdownError, WeatherAPIError, WeatherSDKError
from .models import Mode, WeatherData
from .validators import validate_api_key, validate_city_name, validate_mode
from .weather_client import WeatherClient

logger = logging.getLogger(__name__)

POLL_JOB_ID = "weather_poll_job"


class WeatherSDK:
    """Weather lookups for one API key, backed by a bounded TTL cache.

    In ``Mode.POLLING`` an interval job refreshes every cached city, the
    first run happening right after construction. Polling instances have to
    be created from inside a running event loop.

    ``client`` and ``cache`` can be injected, mostly for tests.
    """

    def __init__(self, api_key: str, mode: Mode, *, settings: Optional[Settings] = None,
                 client: Optional[WeatherClient] = None, cache: Optional[TTLCache] = None):
        validate_api_key(api_key)
        self._mode = validate_mode(mode)
        self._api_key = api_key
        self._settings = settings if settings is not None else get_settings()
        self._cache = cache if cache is not None else TTLCache.from_settings(self._settings)
        self._client = client if client is not None else WeatherClient(
            api_key,
            base_url=self._settings.base_url,
            timeout=self._settings.request_timeout,
        )
        self._shutdown = False
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._job = None

        if self._mode is Mode.POLLING:
            self._start_polling()
        logger.info("WeatherSDK created in %s mode", self._mode.value)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    @property
    def is_polling(self) -> bool:
        return self._job is not None

    async def get_weather(self, city: str) -> WeatherData:
        if self._shutdown:
            raise SDKShutdownError("SDK is shut down")
        validate_city_name(city)

        data = await self._cache.get(city)
        if data is None:
            data = await self._client.fetch_weather(city)
            await self._cache.put(city, data)
        return data

    async def get_weather_json(self, city: str) -> str:
        data = await self.get_weather(city)
        return json.dumps(data.to_dict())

    async def refresh_cached(self) -> int:
        """Re-fetch every cached city and overwrite its entry.

        A failure for one city is logged and the sweep moves on. Returns
        the number of cities refreshed.
        """
        if self._shutdown:
            raise SDKShutdownError("SDK is shut down")

        refreshed = 0
        for city in await self._cache.keys():
            if self._shutdown:
                break
            try:
                data = await self._client.fetch_weather(city)
            except WeatherAPIError as e:
                logger.error("Failed to update weather for %s: %s", city, e)
                continue
            except Exception as e:
                logger.exception("Unexpected error while updating weather for %s: %s", city, e)
                continue
            await self._cache.put(city, data)
            refreshed += 1
            logger.info("Updated weather data for city: %s", city)
        return refreshed

    async def _poll(self) -> None:
        if self._shutdown:
            return
        await self.refresh_cached()

    def _start_polling(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise WeatherSDKError("Polling mode requires a running event loop") from e

        self._scheduler = AsyncIOScheduler(event_loop=loop, timezone="UTC")
        self._job = self._scheduler.add_job(
            self._poll,
            "interval",
            seconds=self._settings.poll_interval,
            next_run_time=datetime.now(timezone.utc),
            id=POLL_JOB_ID,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.debug("Polling every %s seconds", self._settings.poll_interval)

    def shutdown(self) -> None:
        """Stop polling and reject further lookups. Safe to call twice.

        The job is removed before returning; a sweep already running may
        finish its current city.
        """
        if self._shutdown:
            return
        self._shutdown = True
        if self._scheduler is not None:
            if self._job is not None:
                self._job.remove()
                self._job = None
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
        logger.info("WeatherSDK shut down")
