"""Tests for admin endpoints."""

import asyncio

from fastapi.testclient import TestClient

from integration_dashboard.api.app import create_app
from tests.conftest import RecordingHandler

URL = "https://api.example/x"


def test_admin_requires_token(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/admin/health").status_code == 401
    response = client.post("/admin/cache/clear", headers={"X-Admin-Token": "wrong"})
    assert response.status_code == 401


def test_admin_clears_whole_cache(container, handler: RecordingHandler) -> None:
    handler.routes["api.example/x"] = {"v": 1}
    asyncio.run(container.fetcher.request(URL, {"q": "a"}))
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/cache/clear", headers={"X-Admin-Token": "admin-token"}
    )

    assert response.status_code == 200
    assert response.json() == {"status": "cleared"}
    assert len(container.fetcher.cache) == 0


def test_admin_clears_single_entry(container, handler: RecordingHandler) -> None:
    handler.routes["api.example/x"] = {"v": 1}
    asyncio.run(container.fetcher.request(URL, {"q": "a"}))
    asyncio.run(container.fetcher.request(URL, {"q": "b"}))
    client = TestClient(create_app(container))

    response = client.post(
        "/admin/cache/clear-one",
        headers={"X-Admin-Token": "admin-token"},
        json={"url": URL, "params": {"q": "a"}},
    )

    assert response.status_code == 200
    assert len(container.fetcher.cache) == 1
    asyncio.run(container.fetcher.request(URL, {"q": "b"}))
    assert len(handler.requests) == 2
