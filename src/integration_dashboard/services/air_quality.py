"""Air quality service backed by OpenWeatherMap."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from integration_dashboard.domain.errors import (
    DashboardError,
    FetchError,
    NotFoundError,
    ProviderError,
)
from integration_dashboard.domain.weather import (
    AirQualityReading,
    Coordinates,
    PollutantLevels,
)
from integration_dashboard.services.fetcher import CachedFetcher
from integration_dashboard.services.weather import (
    OPENWEATHER_BASE_URL,
    explain_unauthorized,
    openweather_api_key,
)

_logger = logging.getLogger(__name__)


class _AirIndex(BaseModel):
    aqi: int


class _AirSample(BaseModel):
    dt: int
    main: _AirIndex
    components: PollutantLevels


class _AirPollution(BaseModel):
    samples: list[_AirSample] = Field(default_factory=list, alias="list")


class _Place(BaseModel):
    name: str


@dataclass
class AirQualityService:
    """Air pollution readings and location lookups."""

    fetcher: CachedFetcher
    credentials: Mapping[str, str] | None = None
    base_url: str = OPENWEATHER_BASE_URL

    async def by_coordinates(self, coordinates: Coordinates) -> AirQualityReading:
        """Return the current air quality at a position."""
        api_key = openweather_api_key(self.credentials)
        try:
            pollution = await self.fetcher.request_as(
                _AirPollution,
                f"{self.base_url}/data/2.5/air_pollution",
                {"lat": coordinates.lat, "lon": coordinates.lon, "appid": api_key},
            )
        except FetchError as exc:
            explained = explain_unauthorized(exc)
            if explained is exc:
                raise
            raise explained from exc

        if not pollution.samples:
            raise ProviderError("Invalid air quality data received from API")
        sample = pollution.samples[0]

        # The place name is a label only; the reading stands without it.
        location = "Current Location"
        try:
            location = await self.location_name(coordinates)
        except DashboardError as exc:
            # The chained transport error carries the keyed URL; keep it out.
            _logger.error("Error fetching location name: %s", exc)

        return AirQualityReading(
            aqi=sample.main.aqi,
            location=location,
            components=sample.components,
            measured_at=datetime.fromtimestamp(sample.dt, tz=UTC),
        )

    async def location_name(self, coordinates: Coordinates) -> str:
        """Reverse-geocode a position to a place name."""
        api_key = openweather_api_key(self.credentials)
        places = await self.fetcher.request_as(
            list[_Place],
            f"{self.base_url}/geo/1.0/reverse",
            {
                "lat": coordinates.lat,
                "lon": coordinates.lon,
                "limit": 1,
                "appid": api_key,
            },
        )
        if places:
            return places[0].name
        return "Unknown Location"

    async def search_location(self, query: str) -> Coordinates:
        """Resolve a place name to coordinates."""
        api_key = openweather_api_key(self.credentials)
        places = await self.fetcher.request_as(
            list[Coordinates],
            f"{self.base_url}/geo/1.0/direct",
            {"q": query, "limit": 1, "appid": api_key},
        )
        if not places:
            raise NotFoundError(
                f'Location "{query}" not found. '
                "Please check the spelling and try again."
            )
        return places[0]
