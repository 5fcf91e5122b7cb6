from .cache import TTLCache
from .config import Settings, configure_logging, get_settings, load_settings
from .errors import (
    CacheInitializationError,
    CityNotFoundError,
    ConfigurationError,
    InstanceNotFoundError,
    InvalidAPIKeyError,
    SDKShutdownError,
    ValidationError,
    WeatherAPIConnectionError,
    WeatherAPIError,
    WeatherDataError,
    WeatherSDKError,
)
from .models import Mode, Sys, Temperature, Weather, WeatherData, Wind
from .registry import InstanceRegistry
from .sdk import WeatherSDK
from .weather_client import WeatherClient

__version__ = "0.1.0"

__all__ = [
    "CacheInitializationError",
    "CityNotFoundError",
    "ConfigurationError",
    "InstanceNotFoundError",
    "InstanceRegistry",
    "InvalidAPIKeyError",
    "Mode",
    "SDKShutdownError",
    "Settings",
    "Sys",
    "TTLCache",
    "Temperature",
    "ValidationError",
    "Weather",
    "WeatherAPIConnectionError",
    "WeatherAPIError",
    "WeatherClient",
    "WeatherData",
    "WeatherDataError",
    "WeatherSDK",
    "WeatherSDKError",
    "Wind",
    "configure_logging",
    "get_settings",
    "load_settings",
]
