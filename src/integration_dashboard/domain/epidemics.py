"""Epidemiological statistics domain models."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CountryOption:
    """Country available for statistics lookups."""

    name: str
    iso2: str | None
    flag: str | None


@dataclass(frozen=True)
class CaseSummary:
    """Cumulative and daily case counts for a region."""

    region: str
    cases: int
    today_cases: int
    deaths: int
    today_deaths: int
    recovered: int
    active: int
    tests: int
    updated_at: int


@dataclass(frozen=True)
class DailyCounts:
    """Cumulative totals on one day."""

    day: date
    cases: int
    deaths: int
    recovered: int | None
