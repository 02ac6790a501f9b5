"""Tests for configuration and credential lookup."""

import pytest

from integration_dashboard.config import (
    Settings,
    get_configured_credential,
    require_credential,
)
from integration_dashboard.domain.errors import ErrorKind, MissingCredentialError


def test_credential_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWS_API_KEY", "news-key")

    assert get_configured_credential("NEWS_API_KEY") == "news-key"

    monkeypatch.setenv("NEWS_API_KEY", "rotated")
    assert get_configured_credential("NEWS_API_KEY") == "rotated"


def test_missing_or_blank_credential_is_empty() -> None:
    assert get_configured_credential("OPENWEATHER_API_KEY", {}) == ""
    blank = {"OPENWEATHER_API_KEY": "  "}
    assert get_configured_credential("OPENWEATHER_API_KEY", blank) == ""


def test_require_credential_raises() -> None:
    with pytest.raises(MissingCredentialError) as exc_info:
        require_credential("ALPHAVANTAGE_API_KEY", {})

    assert exc_info.value.name == "ALPHAVANTAGE_API_KEY"
    assert exc_info.value.error.kind is ErrorKind.MISSING_CONFIGURATION
    assert "ALPHAVANTAGE_API_KEY" in exc_info.value.error.user_message


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CACHE_TTL_SECONDS", raising=False)

    settings = Settings(admin_token="token")

    assert settings.cache_ttl_seconds == 300
    assert settings.http_timeout_seconds == 15.0
