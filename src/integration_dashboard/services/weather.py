"""Weather service backed by OpenWeatherMap."""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

from integration_dashboard.config import OPENWEATHER_API_KEY, require_credential
from integration_dashboard.domain.errors import FetchError, MissingCredentialError
from integration_dashboard.domain.weather import (
    Coordinates,
    ForecastSlot,
    WeatherReport,
)
from integration_dashboard.services.fetcher import CachedFetcher

OPENWEATHER_BASE_URL = "https://api.openweathermap.org"

# Key published in OpenWeatherMap's documentation; it never works for real calls.
_SAMPLE_KEY = "b6907d289e10d714a6e88b30761fae22"
_FORECAST_SLOTS = 8
_UNAUTHORIZED = 401

Units = Literal["metric", "imperial"]


class _Condition(BaseModel):
    description: str
    icon: str


class _CurrentReadings(BaseModel):
    temp: float
    feels_like: float
    humidity: float
    pressure: float


class _Sun(BaseModel):
    country: str | None = None
    sunrise: int
    sunset: int


class _Wind(BaseModel):
    speed: float


class _CurrentWeather(BaseModel):
    name: str
    sys: _Sun
    main: _CurrentReadings
    weather: list[_Condition] = Field(min_length=1)
    wind: _Wind


class _SlotReadings(BaseModel):
    temp: float
    feels_like: float


class _ForecastItem(BaseModel):
    dt: int
    main: _SlotReadings
    weather: list[_Condition] = Field(min_length=1)


class _Forecast(BaseModel):
    items: list[_ForecastItem] = Field(default_factory=list, alias="list")


def openweather_api_key(credentials: Mapping[str, str] | None = None) -> str:
    """Return the OpenWeatherMap key, rejecting missing or sample keys."""
    api_key = require_credential(OPENWEATHER_API_KEY, credentials)
    if api_key == _SAMPLE_KEY:
        raise MissingCredentialError(
            OPENWEATHER_API_KEY,
            "You are using the sample OpenWeatherMap API key from their "
            "documentation. This key will not work for actual API calls. "
            "Please sign up for a free API key at "
            "https://home.openweathermap.org/users/sign_up",
        )
    return api_key


def explain_unauthorized(exc: FetchError) -> FetchError:
    """Attach the key-activation hint to a 401 from OpenWeatherMap."""
    if exc.status_code != _UNAUTHORIZED:
        return exc
    return FetchError(
        replace(
            exc.error,
            hint=(
                "New OpenWeatherMap API keys can take up to 2 hours to activate. "
                "Please check your API key or wait for activation."
            ),
        )
    )


@dataclass
class WeatherService:
    """Current conditions and forecast lookups."""

    fetcher: CachedFetcher
    credentials: Mapping[str, str] | None = None
    base_url: str = OPENWEATHER_BASE_URL

    async def by_city(self, city: str, units: Units = "metric") -> WeatherReport:
        """Return the weather for a city name."""
        return await self._report({"q": city}, units)

    async def by_coordinates(
        self, coordinates: Coordinates, units: Units = "metric"
    ) -> WeatherReport:
        """Return the weather for a latitude/longitude pair."""
        return await self._report(
            {"lat": coordinates.lat, "lon": coordinates.lon}, units
        )

    async def _report(self, query: dict[str, object], units: Units) -> WeatherReport:
        api_key = openweather_api_key(self.credentials)
        params = {**query, "units": units, "appid": api_key}
        try:
            current = await self.fetcher.request_as(
                _CurrentWeather, f"{self.base_url}/data/2.5/weather", params
            )
            forecast = await self.fetcher.request_as(
                _Forecast, f"{self.base_url}/data/2.5/forecast", params
            )
        except FetchError as exc:
            explained = explain_unauthorized(exc)
            if explained is exc:
                raise
            raise explained from exc
        return _format_report(current, forecast)


def _format_report(current: _CurrentWeather, forecast: _Forecast) -> WeatherReport:
    """Map OpenWeatherMap payloads onto a WeatherReport."""
    condition = current.weather[0]
    slots = [
        ForecastSlot(
            timestamp=datetime.fromtimestamp(item.dt, tz=UTC),
            temp=item.main.temp,
            feels_like=item.main.feels_like,
            icon=item.weather[0].icon,
            description=item.weather[0].description,
        )
        for item in forecast.items[:_FORECAST_SLOTS]
    ]
    return WeatherReport(
        location=current.name,
        country=current.sys.country,
        temperature=current.main.temp,
        feels_like=current.main.feels_like,
        description=condition.description,
        icon=condition.icon,
        humidity=current.main.humidity,
        wind_speed=current.wind.speed,
        pressure=current.main.pressure,
        sunrise=datetime.fromtimestamp(current.sys.sunrise, tz=UTC),
        sunset=datetime.fromtimestamp(current.sys.sunset, tz=UTC),
        forecast=slots,
    )
