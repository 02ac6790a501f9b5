"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from integration_dashboard.api.admin import router as admin_router
from integration_dashboard.app_logging import configure_logging
from integration_dashboard.containers import AppContainer
from integration_dashboard.domain.epidemics import (
    CaseSummary,
    CountryOption,
    DailyCounts,
)
from integration_dashboard.domain.errors import (
    ErrorKind,
    FetchError,
    MissingCredentialError,
    NotFoundError,
    ProviderError,
)
from integration_dashboard.domain.markets import (
    CoinQuote,
    PricePoint,
    StockMatch,
    StockPoint,
)
from integration_dashboard.domain.news import Story
from integration_dashboard.domain.weather import (
    AirQualityReading,
    Coordinates,
    WeatherReport,
)

_PASSTHROUGH_STATUSES = {status.HTTP_404_NOT_FOUND, status.HTTP_429_TOO_MANY_REQUESTS}
_KIND_STATUSES = {
    ErrorKind.UPSTREAM_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.NO_RESPONSE: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.SETUP: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.MISSING_CONFIGURATION: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(FetchError)
    async def fetch_error_handler(request: Request, exc: FetchError) -> JSONResponse:
        error = exc.error
        status_code = _KIND_STATUSES[error.kind]
        if (
            error.kind is ErrorKind.UPSTREAM_RESPONSE
            and error.status_code in _PASSTHROUGH_STATUSES
        ):
            status_code = error.status_code
        return JSONResponse(status_code=status_code, content={"error": error.as_dict()})

    @app.exception_handler(MissingCredentialError)
    async def missing_credential_handler(
        request: Request, exc: MissingCredentialError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": exc.error.as_dict()},
        )

    @app.exception_handler(ProviderError)
    async def provider_error_handler(
        request: Request, exc: ProviderError
    ) -> JSONResponse:
        logger.warning("Provider reported an error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error": {
                    "kind": ErrorKind.UPSTREAM_RESPONSE.value,
                    "status_code": None,
                    "message": str(exc),
                }
            },
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": {"kind": "not_found", "status_code": None, "message": str(exc)}
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/weather")
    async def weather(
        request: Request,
        city: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
        units: Literal["metric", "imperial"] = "metric",
    ) -> WeatherReport:
        """Current weather and forecast by city or coordinates."""
        service = _container(request).weather_service
        if city:
            return await service.by_city(city, units)
        if lat is None or lon is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Provide either city or both lat and lon.",
            )
        return await service.by_coordinates(Coordinates(lat=lat, lon=lon), units)

    @app.get("/air-quality")
    async def air_quality(
        request: Request, lat: float, lon: float
    ) -> AirQualityReading:
        """Current air quality at a position."""
        return await _container(request).air_quality_service.by_coordinates(
            Coordinates(lat=lat, lon=lon)
        )

    @app.get("/locations/search")
    async def search_location(request: Request, q: str) -> Coordinates:
        """Resolve a place name to coordinates."""
        return await _container(request).air_quality_service.search_location(q)

    @app.get("/stocks/search")
    async def search_stocks(request: Request, q: str = "") -> list[StockMatch]:
        """Search stock symbols."""
        return await _container(request).financial_service.search(q)

    @app.get("/stocks/{symbol}")
    async def stock_series(request: Request, symbol: str) -> list[StockPoint]:
        """Daily closing prices for a symbol."""
        return await _container(request).financial_service.daily_series(symbol)

    @app.get("/crypto/markets")
    async def crypto_markets(
        request: Request,
        vs_currency: str = "usd",
        per_page: int = Query(default=10, ge=1, le=250),
    ) -> list[CoinQuote]:
        """Top coins by market cap."""
        return await _container(request).crypto_service.markets(vs_currency, per_page)

    @app.get("/crypto/{coin_id}/history")
    async def crypto_history(
        request: Request, coin_id: str, days: int = Query(default=14, ge=1, le=365)
    ) -> list[PricePoint]:
        """Daily price history for a coin."""
        return await _container(request).crypto_service.price_history(coin_id, days)

    @app.get("/news/top")
    async def top_news(
        request: Request, limit: int = Query(default=10, ge=1, le=50)
    ) -> list[Story]:
        """Current top stories."""
        return await _container(request).news_service.top_stories(limit)

    @app.get("/news/search")
    async def search_news(
        request: Request, q: str = "", limit: int = Query(default=10, ge=1, le=50)
    ) -> list[Story]:
        """Search stories."""
        return await _container(request).news_service.search(q, limit)

    @app.get("/covid/countries")
    async def covid_countries(request: Request) -> list[CountryOption]:
        """Countries with available statistics."""
        return await _container(request).epidemic_stats_service.countries()

    @app.get("/covid/summary")
    async def covid_summary(
        request: Request, country: str | None = None
    ) -> CaseSummary:
        """Current totals, worldwide or per country."""
        return await _container(request).epidemic_stats_service.summary(country)

    @app.get("/covid/history")
    async def covid_history(
        request: Request,
        country: str | None = None,
        days: int = Query(default=30, ge=1, le=365),
    ) -> list[DailyCounts]:
        """Daily cumulative totals."""
        return await _container(request).epidemic_stats_service.history(country, days)

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container
