import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from .config import Settings, load_settings
from .errors import InstanceNotFoundError
from .models import Mode, WeatherData
from .sdk import WeatherSDK
from .validators import validate_api_key, validate_mode

logger = logging.getLogger(__name__)


class InstanceRegistry:
    """Keeps at most one live WeatherSDK per API key.

    Creation and deletion are serialized by a lock, so concurrent first
    calls for the same key end up with the same instance. The mode passed
    to ``get_or_create`` only matters for the call that creates the
    instance; later calls get the existing one whatever mode they ask for.

    Use ``teardown()`` (or ``async with``) to shut every instance down.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 factory: Optional[Callable[..., WeatherSDK]] = None):
        self._settings = settings if settings is not None else load_settings()
        self._factory = factory if factory is not None else WeatherSDK
        self._instances: Dict[str, WeatherSDK] = {}
        self._lock = asyncio.Lock()

    @property
    def settings(self) -> Settings:
        return self._settings

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, api_key: object) -> bool:
        return api_key in self._instances

    def get(self, api_key: str) -> Optional[WeatherSDK]:
        return self._instances.get(api_key)

    async def get_or_create(self, api_key: str, mode: Any, **kwargs: Any) -> WeatherSDK:
        validate_api_key(api_key)
        mode = validate_mode(mode)

        async with self._lock:
            instance = self._instances.get(api_key)
            if instance is not None:
                if instance.mode is not mode:
                    logger.debug("Instance already exists in %s mode, ignoring requested %s mode",
                                 instance.mode.value, mode.value)
                return instance
            instance = self._factory(api_key, mode, settings=self._settings, **kwargs)
            self._instances[api_key] = instance
            logger.info("Registered WeatherSDK instance (%d live)", len(self._instances))
            return instance

    async def delete(self, api_key: str) -> None:
        async with self._lock:
            instance = self._instances.pop(api_key, None)
        if instance is not None:
            instance.shutdown()
            logger.info("Deleted WeatherSDK instance (%d live)", len(self._instances))

    async def lookup(self, api_key: str, city: str) -> WeatherData:
        instance = self._instances.get(api_key)
        if instance is None:
            raise InstanceNotFoundError("No SDK instance registered for this API key")
        return await instance.get_weather(city)

    async def teardown(self) -> None:
        async with self._lock:
            instances = list(self._instances.values())
            self._instances.clear()
        for instance in instances:
            instance.shutdown()
        logger.info("Registry torn down, %d instance(s) shut down", len(instances))

    async def __aenter__(self) -> "InstanceRegistry":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.teardown()
