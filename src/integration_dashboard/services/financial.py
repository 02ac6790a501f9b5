"""Stock market service backed by Alpha Vantage."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, timedelta

from pydantic import BaseModel, Field

from integration_dashboard.config import ALPHAVANTAGE_API_KEY, require_credential
from integration_dashboard.domain.errors import ProviderError
from integration_dashboard.domain.markets import StockMatch, StockPoint
from integration_dashboard.services.fetcher import CachedFetcher

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"

# Daily series move slowly; keep them longer than the default window.
DAILY_SERIES_FRESHNESS = timedelta(minutes=30)
_SERIES_DAYS = 30


class _DailyBar(BaseModel):
    close: float = Field(alias="4. close")


class _SymbolMatch(BaseModel):
    symbol: str = Field(alias="1. symbol")
    name: str = Field(alias="2. name")


class _AlphaVantageReply(BaseModel):
    """Alpha Vantage reports errors and throttling inside 200 responses."""

    error_message: str | None = Field(default=None, alias="Error Message")
    note: str | None = Field(default=None, alias="Note")
    information: str | None = Field(default=None, alias="Information")
    daily_series: dict[date, _DailyBar] | None = Field(
        default=None, alias="Time Series (Daily)"
    )
    best_matches: list[_SymbolMatch] | None = Field(default=None, alias="bestMatches")

    def raise_for_provider_error(self) -> None:
        if self.error_message:
            raise ProviderError(f"API Error: {self.error_message}")
        if self.note:
            raise ProviderError(f"API Limit Reached: {self.note}")
        if self.information:
            raise ProviderError(f"API Limit Reached: {self.information}")


@dataclass
class FinancialService:
    """Daily price series and symbol search."""

    fetcher: CachedFetcher
    credentials: Mapping[str, str] | None = None
    url: str = ALPHAVANTAGE_URL

    async def daily_series(self, symbol: str) -> list[StockPoint]:
        """Return the last 30 daily closes for a symbol, oldest first."""
        api_key = require_credential(ALPHAVANTAGE_API_KEY, self.credentials)
        reply = await self.fetcher.request_as(
            _AlphaVantageReply,
            self.url,
            {"function": "TIME_SERIES_DAILY", "symbol": symbol, "apikey": api_key},
            freshness=DAILY_SERIES_FRESHNESS,
        )
        reply.raise_for_provider_error()
        series = reply.daily_series
        if not series:
            raise ProviderError("Invalid API response: Time Series data not found")

        recent = sorted(series, reverse=True)[:_SERIES_DAYS]
        return [
            StockPoint(day=day, close=series[day].close) for day in reversed(recent)
        ]

    async def search(self, query: str) -> list[StockMatch]:
        """Search symbols by keyword."""
        api_key = require_credential(ALPHAVANTAGE_API_KEY, self.credentials)
        if not query.strip():
            return []
        reply = await self.fetcher.request_as(
            _AlphaVantageReply,
            self.url,
            {"function": "SYMBOL_SEARCH", "keywords": query, "apikey": api_key},
        )
        reply.raise_for_provider_error()
        if reply.best_matches is None:
            raise ProviderError("Invalid API response: search results not found")
        return [
            StockMatch(symbol=match.symbol, name=match.name)
            for match in reply.best_matches
        ]
