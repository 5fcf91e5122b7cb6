import re
from typing import Any

from .errors import ValidationError
from .models import Mode

_API_KEY_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_CITY_RE = re.compile(r"^[a-zA-Z\s.'-]+$")


def validate_api_key(api_key: Any) -> str:
    if not isinstance(api_key, str) or not api_key.strip():
        raise ValidationError("API key cannot be empty")
    if not _API_KEY_RE.match(api_key.strip()):
        raise ValidationError("API key contains invalid characters")
    return api_key


def validate_city_name(city: Any) -> str:
    if not isinstance(city, str) or not city.strip():
        raise ValidationError("City name cannot be empty")
    if not _CITY_RE.match(city.strip()):
        raise ValidationError("City name contains invalid characters")
    return city


def validate_mode(mode: Any) -> Mode:
    if mode is None:
        raise ValidationError("Mode cannot be None")
    if isinstance(mode, Mode):
        return mode
    try:
        return Mode(mode)
    except ValueError as e:
        raise ValidationError(
            f"Invalid mode {mode!r}, must be one of: {', '.join(m.value for m in Mode)}"
        ) from e
