import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from dotenv import find_dotenv, load_dotenv

from .errors import CacheInitializationError, ConfigurationError

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"
MAX_CACHE_SIZE = 10
DEFAULT_CACHE_TTL = 600.0  # seconds
DEFAULT_POLL_INTERVAL = 600.0  # seconds
DEFAULT_REQUEST_TIMEOUT = 5.0  # seconds

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    cache_capacity: int = MAX_CACHE_SIZE
    cache_ttl: float = DEFAULT_CACHE_TTL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def _parse(name: str, default: str, convert: Callable[[str], Union[int, float]],
           error: type = ConfigurationError, allow_zero: bool = True) -> Union[int, float]:
    raw = os.getenv(name, default)
    try:
        value = convert(raw)
    except (TypeError, ValueError) as e:
        raise error(f"{name} must be a number, got {raw!r}") from e
    if not math.isfinite(value) or value < 0 or (value == 0 and not allow_zero):
        raise error(f"{name} is out of range: {raw!r}")
    return value


def get_settings() -> Settings:
    return Settings(
        base_url=os.getenv("OPENWEATHER_BASE_URL", DEFAULT_BASE_URL),
        cache_capacity=_parse("WEATHER_CACHE_MAX_SIZE", str(MAX_CACHE_SIZE), int,
                              CacheInitializationError, allow_zero=False),
        cache_ttl=_parse("WEATHER_CACHE_EXPIRATION_TIME", str(DEFAULT_CACHE_TTL), float, CacheInitializationError),
        poll_interval=_parse("WEATHER_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL), float, allow_zero=False),
        request_timeout=_parse("WEATHER_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT), float,
                               allow_zero=False),
    )


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """Read settings from the environment, after loading a .env file.

    An explicitly named env file has to exist; the implicit lookup of a
    .env file in the working directory is optional. Values already set in
    the environment win over the file.
    """
    if env_file is not None:
        path = Path(env_file)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        load_dotenv(path)
    else:
        load_dotenv(find_dotenv(usecwd=True))
    return get_settings()


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
