"""Tests for the stock market service."""

import asyncio
from datetime import date, timedelta

import pytest

from integration_dashboard.domain.errors import (
    ErrorKind,
    FetchError,
    MissingCredentialError,
    ProviderError,
)
from integration_dashboard.domain.markets import StockMatch
from integration_dashboard.services.fetcher import CachedFetcher
from integration_dashboard.services.financial import FinancialService
from tests.conftest import FakeClock, RecordingHandler

ALPHA = "www.alphavantage.co/query"


def _daily_series(days: int) -> dict[str, object]:
    start = date(2024, 1, 1)
    return {
        "Meta Data": {"2. Symbol": "IBM"},
        "Time Series (Daily)": {
            (start + timedelta(days=offset)).isoformat(): {
                "4. close": f"{100 + offset}.5"
            }
            for offset in range(days)
        },
    }


def test_daily_series_returns_last_thirty_oldest_first(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
) -> None:
    handler.routes[ALPHA] = _daily_series(40)
    service = FinancialService(fetcher, credentials)

    points = asyncio.run(service.daily_series("IBM"))

    assert len(points) == 30
    assert points[0].day == date(2024, 1, 11)
    assert points[-1].day == date(2024, 2, 9)
    assert points[-1].close == 139.5
    params = handler.requests[0].url.params
    assert params["function"] == "TIME_SERIES_DAILY"
    assert params["apikey"] == "av-key"


def test_daily_series_cached_for_thirty_minutes(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
    clock: FakeClock,
) -> None:
    handler.routes[ALPHA] = _daily_series(5)
    service = FinancialService(fetcher, credentials)

    asyncio.run(service.daily_series("IBM"))
    clock.advance(timedelta(minutes=20))
    asyncio.run(service.daily_series("IBM"))
    assert len(handler.requests) == 1

    clock.advance(timedelta(minutes=10))
    asyncio.run(service.daily_series("IBM"))
    assert len(handler.requests) == 2


def test_throttle_note_is_provider_error(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
) -> None:
    handler.routes[ALPHA] = {"Note": "Thank you for using Alpha Vantage!"}
    service = FinancialService(fetcher, credentials)

    with pytest.raises(ProviderError, match="API Limit Reached"):
        asyncio.run(service.daily_series("IBM"))


def test_error_message_is_provider_error(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
) -> None:
    handler.routes[ALPHA] = {"Error Message": "Invalid API call."}
    service = FinancialService(fetcher, credentials)

    with pytest.raises(ProviderError, match="Invalid API call"):
        asyncio.run(service.daily_series("NOPE"))


def test_missing_series_is_provider_error(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
) -> None:
    handler.routes[ALPHA] = {"Meta Data": {}}
    service = FinancialService(fetcher, credentials)

    with pytest.raises(ProviderError, match="Time Series"):
        asyncio.run(service.daily_series("IBM"))


def test_search_maps_matches(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
) -> None:
    handler.routes[ALPHA] = {
        "bestMatches": [
            {"1. symbol": "TSCO.LON", "2. name": "Tesco PLC"},
            {"1. symbol": "TSCDY", "2. name": "Tesco PLC ADR"},
        ]
    }
    service = FinancialService(fetcher, credentials)

    matches = asyncio.run(service.search("tesco"))

    assert matches[0] == StockMatch(symbol="TSCO.LON", name="Tesco PLC")
    assert handler.requests[0].url.params["keywords"] == "tesco"


def test_blank_search_skips_network(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
) -> None:
    service = FinancialService(fetcher, credentials)

    assert asyncio.run(service.search("   ")) == []
    assert handler.requests == []


def test_missing_alpha_vantage_key(
    fetcher: CachedFetcher, handler: RecordingHandler
) -> None:
    service = FinancialService(fetcher, credentials={"ALPHAVANTAGE_API_KEY": ""})

    with pytest.raises(MissingCredentialError, match="ALPHAVANTAGE_API_KEY"):
        asyncio.run(service.daily_series("IBM"))

    assert handler.requests == []



def test_series_without_closes_is_upstream_error_and_not_cached(
    fetcher: CachedFetcher,
    handler: RecordingHandler,
    credentials: dict[str, str],
) -> None:
    handler.routes[ALPHA] = {"Time Series (Daily)": {"2024-03-01": {"1. open": "1"}}}
    service = FinancialService(fetcher, credentials)

    with pytest.raises(FetchError) as exc_info:
        asyncio.run(service.daily_series("IBM"))

    assert exc_info.value.error.kind is ErrorKind.UPSTREAM_RESPONSE
    assert exc_info.value.status_code == 200
    assert len(fetcher.cache) == 0
