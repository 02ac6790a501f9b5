"""Stock and crypto market domain models."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class StockPoint:
    """Daily closing price for a stock."""

    day: date
    close: float


@dataclass(frozen=True)
class StockMatch:
    """Symbol search result."""

    symbol: str
    name: str


@dataclass(frozen=True)
class CoinQuote:
    """Market snapshot for a single coin."""

    id: str
    symbol: str
    name: str
    current_price: float
    market_cap: float | None
    price_change_percentage_24h: float | None
    image: str | None


@dataclass(frozen=True)
class PricePoint:
    """Historical coin price sample."""

    timestamp: datetime
    price: float
