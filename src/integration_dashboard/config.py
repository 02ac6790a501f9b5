"""Application configuration."""

import logging
import os
from collections.abc import Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict

from integration_dashboard.domain.errors import MissingCredentialError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

OPENWEATHER_API_KEY = "OPENWEATHER_API_KEY"
ALPHAVANTAGE_API_KEY = "ALPHAVANTAGE_API_KEY"
NEWS_API_KEY = "NEWS_API_KEY"

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    admin_token: str
    cache_ttl_seconds: int = 300
    http_timeout_seconds: float = 15.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def get_configured_credential(
    name: str, environ: Mapping[str, str] | None = None
) -> str:
    """Look up a named credential at call time.

    Returns an empty string when the value is absent or blank. No default
    credential is ever substituted; callers that need the value must check
    for the empty result and fail.
    """
    source = os.environ if environ is None else environ
    value = (source.get(name) or "").strip()
    if not value:
        _logger.error("Credential %s is not set or is empty", name)
        return ""
    return value


def require_credential(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Return a credential or raise MissingCredentialError."""
    value = get_configured_credential(name, environ)
    if not value:
        raise MissingCredentialError(name)
    return value
