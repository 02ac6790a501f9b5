"""Epidemiological statistics service backed by disease.sh."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from urllib.parse import quote

from pydantic import BaseModel, Field

from integration_dashboard.domain.epidemics import (
    CaseSummary,
    CountryOption,
    DailyCounts,
)
from integration_dashboard.services.fetcher import CachedFetcher

DISEASE_SH_URL = "https://disease.sh/v3/covid-19"

# Upstream aggregates are refreshed a few times a day.
STATS_FRESHNESS = timedelta(minutes=30)


class _CountryInfo(BaseModel):
    iso2: str | None = None
    flag: str | None = None


class _CountryEntry(BaseModel):
    country: str
    country_info: _CountryInfo | None = Field(default=None, alias="countryInfo")


class _Totals(BaseModel):
    country: str | None = None
    cases: int
    today_cases: int = Field(default=0, alias="todayCases")
    deaths: int
    today_deaths: int = Field(default=0, alias="todayDeaths")
    recovered: int = 0
    active: int = 0
    tests: int = 0
    updated: int = 0


class _Timeline(BaseModel):
    cases: dict[str, int]
    deaths: dict[str, int] | None = None
    recovered: dict[str, int] | None = None


class _CountryHistory(BaseModel):
    timeline: _Timeline


@dataclass
class EpidemicStatsService:
    """Case totals and histories, worldwide or per country."""

    fetcher: CachedFetcher
    base_url: str = DISEASE_SH_URL

    async def countries(self) -> list[CountryOption]:
        """Return the countries the provider has data for."""
        entries = await self.fetcher.request_as(
            list[_CountryEntry], f"{self.base_url}/countries", freshness=STATS_FRESHNESS
        )
        return [
            CountryOption(
                name=entry.country,
                iso2=entry.country_info.iso2 if entry.country_info else None,
                flag=entry.country_info.flag if entry.country_info else None,
            )
            for entry in entries
        ]

    async def summary(self, country: str | None = None) -> CaseSummary:
        """Return current totals for a country, or worldwide when omitted."""
        if country:
            url = f"{self.base_url}/countries/{quote(country, safe='')}"
        else:
            url = f"{self.base_url}/all"
        totals = await self.fetcher.request_as(_Totals, url, freshness=STATS_FRESHNESS)
        return CaseSummary(
            region=totals.country or "Global",
            cases=totals.cases,
            today_cases=totals.today_cases,
            deaths=totals.deaths,
            today_deaths=totals.today_deaths,
            recovered=totals.recovered,
            active=totals.active,
            tests=totals.tests,
            updated_at=totals.updated,
        )

    async def history(
        self, country: str | None = None, days: int = 30
    ) -> list[DailyCounts]:
        """Return cumulative daily totals for the last ``days`` days."""
        region = quote(country, safe="") if country else "all"
        url = f"{self.base_url}/historical/{region}"
        params = {"lastdays": days}
        if country:
            history = await self.fetcher.request_as(
                _CountryHistory, url, params, freshness=STATS_FRESHNESS
            )
            timeline = history.timeline
        else:
            timeline = await self.fetcher.request_as(
                _Timeline, url, params, freshness=STATS_FRESHNESS
            )
        deaths = timeline.deaths or {}
        recovered = timeline.recovered or {}
        return [
            DailyCounts(
                day=datetime.strptime(day, "%m/%d/%y").date(),  # noqa: DTZ007
                cases=total,
                deaths=deaths.get(day, 0),
                recovered=recovered.get(day),
            )
            for day, total in timeline.cases.items()
        ]
