"""Weather and air-quality domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Coordinates:
    """Geographic position in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class ForecastSlot:
    """One three-hour forecast step."""

    timestamp: datetime
    temp: float
    feels_like: float
    icon: str
    description: str


@dataclass(frozen=True)
class WeatherReport:
    """Current conditions plus the near-term forecast for a place."""

    location: str
    country: str | None
    temperature: float
    feels_like: float
    description: str
    icon: str
    humidity: float
    wind_speed: float
    pressure: float
    sunrise: datetime
    sunset: datetime
    forecast: list[ForecastSlot]


@dataclass(frozen=True)
class PollutantLevels:
    """Pollutant concentrations in micrograms per cubic metre."""

    co: float
    no: float
    no2: float
    o3: float
    so2: float
    pm2_5: float
    pm10: float
    nh3: float


@dataclass(frozen=True)
class AirQualityReading:
    """Air quality index and components for a location."""

    aqi: int
    location: str
    components: PollutantLevels
    measured_at: datetime
