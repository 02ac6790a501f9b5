"""Tests for container wiring."""

import asyncio
from datetime import timedelta

from integration_dashboard.config import Settings
from integration_dashboard.containers import build_container


def test_build_container_creates_services() -> None:
    settings = Settings(admin_token="admin-token", cache_ttl_seconds=60)
    container = build_container(settings)

    assert container.weather_service.fetcher is container.fetcher
    assert container.news_service.fetcher is container.fetcher
    assert container.fetcher.default_freshness == timedelta(seconds=60)
    asyncio.run(container.close_resources())


def test_asgi_module_builds_app(monkeypatch) -> None:
    monkeypatch.setenv("ADMIN_TOKEN", "env-token")

    from integration_dashboard.api import asgi

    assert asgi.app.state.container.settings.admin_token == "env-token"
