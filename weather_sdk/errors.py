class WeatherSDKError(Exception):
    pass


class ConfigurationError(WeatherSDKError):
    pass


class CacheInitializationError(ConfigurationError):
    pass


class ValidationError(WeatherSDKError, ValueError):
    pass


class SDKShutdownError(WeatherSDKError):
    pass


class InstanceNotFoundError(WeatherSDKError, LookupError):
    pass


class WeatherAPIError(WeatherSDKError):
    pass


class InvalidAPIKeyError(WeatherAPIError):
    pass


class CityNotFoundError(WeatherAPIError):
    pass


class WeatherAPIConnectionError(WeatherAPIError):
    pass


class WeatherDataError(WeatherAPIError):
    pass
