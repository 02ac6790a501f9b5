"""Cryptocurrency market service backed by CoinGecko."""

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel

from integration_dashboard.domain.markets import CoinQuote, PricePoint
from integration_dashboard.services.fetcher import CachedFetcher

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"


class _MarketChart(BaseModel):
    prices: list[tuple[float, float]]


@dataclass
class CryptoService:
    """Coin market snapshots and price history."""

    fetcher: CachedFetcher
    base_url: str = COINGECKO_BASE_URL

    async def markets(
        self, vs_currency: str = "usd", per_page: int = 10
    ) -> list[CoinQuote]:
        """Return the top coins by market cap."""
        return await self.fetcher.request_as(
            list[CoinQuote],
            f"{self.base_url}/coins/markets",
            {
                "vs_currency": vs_currency,
                "order": "market_cap_desc",
                "per_page": per_page,
                "page": 1,
                "sparkline": "false",
            },
        )

    async def price_history(
        self, coin_id: str, days: int = 14, vs_currency: str = "usd"
    ) -> list[PricePoint]:
        """Return daily prices for a coin, oldest first."""
        chart = await self.fetcher.request_as(
            _MarketChart,
            f"{self.base_url}/coins/{coin_id}/market_chart",
            {"vs_currency": vs_currency, "days": days, "interval": "daily"},
        )
        points = [
            PricePoint(
                timestamp=datetime.fromtimestamp(millis / 1000, tz=UTC),
                price=price,
            )
            for millis, price in chart.prices
        ]
        return sorted(points, key=lambda point: point.timestamp)
