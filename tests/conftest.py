"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from integration_dashboard.config import Settings
from integration_dashboard.containers import AppContainer, build_services
from integration_dashboard.services.cache import ResponseCache
from integration_dashboard.services.fetcher import CachedFetcher


@dataclass
class FakeClock:
    """Manually advanced clock for freshness checks."""

    now: datetime = field(default_factory=lambda: datetime(2024, 3, 1, 12, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@dataclass
class RecordingHandler:
    """MockTransport handler that serves JSON per host+path and records requests."""

    routes: dict[str, object] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(f"{request.url.host}{request.url.path}")
        if route is None:
            return httpx.Response(404, json={"message": "not found"})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]


def make_fetcher(handler: RecordingHandler, clock: FakeClock) -> CachedFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CachedFetcher(http_client=client, cache=ResponseCache(clock=clock))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def fetcher(handler: RecordingHandler, clock: FakeClock) -> CachedFetcher:
    return make_fetcher(handler, clock)


@pytest.fixture
def credentials() -> dict[str, str]:
    return {
        "OPENWEATHER_API_KEY": "ow-key",
        "ALPHAVANTAGE_API_KEY": "av-key",
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_token="admin-token")


@pytest.fixture
def container(
    settings: Settings, fetcher: CachedFetcher, credentials: dict[str, str]
) -> AppContainer:
    return build_services(settings, fetcher, credentials)
