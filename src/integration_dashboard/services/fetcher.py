"""Cached HTTP GET layer shared by every dashboard feed."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter

from integration_dashboard.app_logging import redact_params
from integration_dashboard.domain.errors import ErrorKind, FetchError, NormalizedError
from integration_dashboard.services.cache import (
    DEFAULT_FRESHNESS,
    ResponseCache,
    make_cache_key,
)

T = TypeVar("T")

_BODY_LIMIT = 2000

_PROVIDER_HINTS: dict[str, dict[int, str]] = {
    "openweathermap.org": {
        401: (
            "OpenWeatherMap API key is invalid or not activated yet; "
            "new keys can take up to 2 hours to become active"
        ),
        404: "City or location not found",
        429: "OpenWeatherMap free accounts are limited to 60 calls per minute",
    },
    "alphavantage.co": {
        429: "Alpha Vantage free tier allows 25 requests per day",
    },
    "coingecko.com": {
        429: "CoinGecko public API allows roughly 30 calls per minute",
    },
}

_logger = logging.getLogger(__name__)

Params = Mapping[str, Any]


@dataclass
class CachedFetcher:
    """Issue GET requests and serve fresh cached payloads without network I/O."""

    http_client: httpx.AsyncClient
    cache: ResponseCache = field(default_factory=ResponseCache)
    default_freshness: timedelta = DEFAULT_FRESHNESS

    @classmethod
    def create(
        cls,
        timeout: float | None = 15.0,
        default_freshness: timedelta = DEFAULT_FRESHNESS,
    ) -> "CachedFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(timeout=timeout),
            default_freshness=default_freshness,
        )

    async def request(
        self,
        url: str,
        params: Params | None = None,
        *,
        freshness: timedelta | None = None,
        timeout: float | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and return the decoded JSON payload, cached per request."""
        return await self._request(
            url, params, None, freshness=freshness, timeout=timeout, headers=headers
        )

    async def request_as(  # noqa: PLR0913
        self,
        model: type[T],
        url: str,
        params: Params | None = None,
        *,
        freshness: timedelta | None = None,
        timeout: float | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> T:
        """Like ``request`` but validate the payload against ``model``."""
        return await self._request(
            url,
            params,
            TypeAdapter(model),
            freshness=freshness,
            timeout=timeout,
            headers=headers,
        )

    def clear_all(self) -> None:
        """Drop every cached payload."""
        self.cache.clear()
        _logger.info("Response cache cleared")

    def clear_one(self, url: str, params: Params | None = None) -> None:
        """Drop the cached payload for one request, if present."""
        self.cache.discard(make_cache_key(url, params))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(  # noqa: PLR0913
        self,
        url: str,
        params: Params | None,
        adapter: TypeAdapter | None,
        *,
        freshness: timedelta | None,
        timeout: float | None,
        headers: Mapping[str, str] | None,
    ) -> Any:
        if freshness is None:
            freshness = self.default_freshness
        if freshness <= timedelta(0):
            raise ValueError("freshness must be a positive duration")
        if not url or not url.strip():
            error = NormalizedError(kind=ErrorKind.SETUP, message="URL is empty")
            log_error(error)
            raise FetchError(error)

        cache_key = make_cache_key(url, params)
        hit, cached = self.cache.get_fresh(cache_key, freshness)
        if hit:
            _logger.debug("Cache hit for %s", url)
            if adapter is None:
                return cached
            try:
                return adapter.validate_python(cached)
            except ValueError as exc:
                error = NormalizedError(
                    kind=ErrorKind.UPSTREAM_RESPONSE,
                    message=f"Cached payload does not match expected shape: {exc}",
                    url=url,
                )
                log_error(error)
                raise FetchError(error) from exc

        _logger.info("Fetching %s params=%s", url, redact_params(params))
        try:
            response = await self.http_client.get(
                url,
                params=dict(params) if params else None,
                headers=dict(headers) if headers else None,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
            response.raise_for_status()
        except Exception as exc:
            error = normalize_error(exc, url)
            log_error(error)
            raise FetchError(error) from exc

        try:
            payload = response.json()
            result = adapter.validate_python(payload) if adapter else payload
        except ValueError as exc:
            error = _from_response(
                response, url, f"Malformed response payload: {exc}"
            )
            log_error(error)
            raise FetchError(error) from exc

        self.cache.store(cache_key, payload)
        return result


def normalize_error(exc: Exception, url: str | None = None) -> NormalizedError:
    """Classify a failure raised while requesting ``url``."""
    if isinstance(exc, httpx.HTTPStatusError):
        status_line = f"{exc.response.status_code} {exc.response.reason_phrase}"
        return _from_response(
            exc.response, url, f"Upstream responded with {status_line}"
        )
    if isinstance(
        exc, (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)
    ):
        return NormalizedError(kind=ErrorKind.SETUP, message=str(exc), url=url)
    if isinstance(exc, httpx.TransportError):
        return NormalizedError(
            kind=ErrorKind.NO_RESPONSE,
            message=str(exc) or type(exc).__name__,
            url=url,
        )
    return NormalizedError(
        kind=ErrorKind.SETUP, message=str(exc) or type(exc).__name__, url=url
    )


def log_error(error: NormalizedError) -> None:
    """Emit diagnostics for a normalized failure."""
    if error.kind is ErrorKind.UPSTREAM_RESPONSE:
        _logger.error(
            "API error response: url=%s status=%s %s body=%s",
            error.url,
            error.status_code,
            error.status_text,
            error.body,
        )
        if error.rate_limited:
            _logger.error(
                "API rate limit exceeded for %s; reduce request frequency",
                error.url,
            )
        hint = _provider_hint(error)
        if hint:
            _logger.warning("%s (%s)", hint, error.url)
    elif error.kind is ErrorKind.NO_RESPONSE:
        _logger.error(
            "API no response: url=%s error=%s; this could indicate a network "
            "issue, a blocked request or service downtime",
            error.url,
            error.message,
        )
    else:
        _logger.error("API request setup error: url=%s %s", error.url, error.message)


def _from_response(
    response: httpx.Response, url: str | None, message: str
) -> NormalizedError:
    return NormalizedError(
        kind=ErrorKind.UPSTREAM_RESPONSE,
        message=message,
        url=url,
        status_code=response.status_code,
        status_text=response.reason_phrase,
        body=response.text[:_BODY_LIMIT],
    )


def _provider_hint(error: NormalizedError) -> str | None:
    if error.url is None or error.status_code is None:
        return None
    host = httpx.URL(error.url).host
    for domain, hints in _PROVIDER_HINTS.items():
        if host == domain or host.endswith(f".{domain}"):
            return hints.get(error.status_code)
    return None
