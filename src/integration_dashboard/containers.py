"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import timedelta

from integration_dashboard.config import Settings
from integration_dashboard.services.air_quality import AirQualityService
from integration_dashboard.services.crypto import CryptoService
from integration_dashboard.services.epidemics import EpidemicStatsService
from integration_dashboard.services.fetcher import CachedFetcher
from integration_dashboard.services.financial import FinancialService
from integration_dashboard.services.news import NewsService
from integration_dashboard.services.weather import WeatherService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    fetcher: CachedFetcher
    weather_service: WeatherService
    air_quality_service: AirQualityService
    financial_service: FinancialService
    crypto_service: CryptoService
    news_service: NewsService
    epidemic_stats_service: EpidemicStatsService
    close_resources: Callable[[], Awaitable[None]]


def build_services(
    settings: Settings,
    fetcher: CachedFetcher,
    credentials: Mapping[str, str] | None = None,
) -> AppContainer:
    """Wire every feed service around a shared fetcher."""

    async def close_resources() -> None:
        await fetcher.close()

    return AppContainer(
        settings=settings,
        fetcher=fetcher,
        weather_service=WeatherService(fetcher, credentials),
        air_quality_service=AirQualityService(fetcher, credentials),
        financial_service=FinancialService(fetcher, credentials),
        crypto_service=CryptoService(fetcher),
        news_service=NewsService(fetcher),
        epidemic_stats_service=EpidemicStatsService(fetcher),
        close_resources=close_resources,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    fetcher = CachedFetcher.create(
        timeout=resolved_settings.http_timeout_seconds,
        default_freshness=timedelta(seconds=resolved_settings.cache_ttl_seconds),
    )
    return build_services(resolved_settings, fetcher)
