"""Logging configuration helpers."""

import logging
from collections.abc import Mapping

_SECRET_PARAM_NAMES = frozenset({"appid", "apikey", "api_key", "token", "key"})


def configure_logging(level: str = "INFO") -> None:
    """Configure dashboard logging with a single stream handler."""
    logger = logging.getLogger("integration_dashboard")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def redact_params(params: Mapping[str, object] | None) -> dict[str, object]:
    """Return query params with credential values masked for logging."""
    if not params:
        return {}
    return {
        name: "***" if name.lower() in _SECRET_PARAM_NAMES else value
        for name, value in params.items()
    }
