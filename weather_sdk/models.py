from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class Mode(str, Enum):
    ON_DEMAND = "on_demand"
    POLLING = "polling"


@dataclass(frozen=True)
class Weather:
    main: str
    description: str


@dataclass(frozen=True)
class Temperature:
    temp: float
    feels_like: float


@dataclass(frozen=True)
class Wind:
    speed: float


@dataclass(frozen=True)
class Sys:
    sunrise: int
    sunset: int


@dataclass(frozen=True)
class WeatherData:
    weather: Weather
    temperature: Temperature
    visibility: int
    wind: Wind
    datetime: int
    sys: Sys
    timezone: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "WeatherData":
        """Build a snapshot from an OpenWeather /weather response body.

        Required fields must already be checked; visibility, dt and
        timezone fall back to 0 and name to "Unknown".
        """
        weather = data["weather"][0]
        main = data["main"]
        return cls(
            weather=Weather(main=str(weather["main"]), description=str(weather["description"])),
            temperature=Temperature(temp=float(main["temp"]), feels_like=float(main["feels_like"])),
            visibility=int(data.get("visibility", 0)),
            wind=Wind(speed=float(data["wind"]["speed"])),
            datetime=int(data.get("dt", 0)),
            sys=Sys(sunrise=int(data["sys"]["sunrise"]), sunset=int(data["sys"]["sunset"])),
            timezone=int(data.get("timezone", 0)),
            name=str(data.get("name", "Unknown")),
        )
