"""Error taxonomy shared by the request layer and its consumers."""

from dataclasses import dataclass
from enum import Enum

RATE_LIMIT_STATUS = 429


class ErrorKind(str, Enum):
    """Classes of failure a feed request can end in."""

    UPSTREAM_RESPONSE = "upstream_response"
    NO_RESPONSE = "no_response"
    SETUP = "setup"
    MISSING_CONFIGURATION = "missing_configuration"


@dataclass(frozen=True)
class NormalizedError:
    """Transport-independent description of a failed request."""

    kind: ErrorKind
    message: str
    url: str | None = None
    status_code: int | None = None
    status_text: str | None = None
    body: str | None = None
    hint: str | None = None

    @property
    def rate_limited(self) -> bool:
        """Whether the upstream rejected the call for exceeding its rate limit."""
        return self.status_code == RATE_LIMIT_STATUS

    @property
    def user_message(self) -> str:
        """Specific, human-readable summary suitable for display."""
        base = self._base_message()
        return f"{base} {self.hint}" if self.hint else base

    def _base_message(self) -> str:
        if self.kind is ErrorKind.MISSING_CONFIGURATION:
            return self.message
        if self.kind is ErrorKind.NO_RESPONSE:
            return (
                "No response from the data provider. This could indicate a "
                "network issue, a blocked request or service downtime."
            )
        if self.kind is ErrorKind.SETUP:
            return f"The request could not be sent: {self.message}"
        if self.rate_limited:
            return "The data provider's rate limit was exceeded. Try again later."
        if self.status_code == 401:  # noqa: PLR2004
            return "The data provider rejected the API key."
        if self.status_code == 404:  # noqa: PLR2004
            return "The requested resource was not found."
        if self.status_code is not None:
            reason = f" {self.status_text}" if self.status_text else ""
            return f"The data provider returned {self.status_code}{reason}."
        return self.message

    def as_dict(self) -> dict[str, object]:
        """Serialize for JSON error responses."""
        return {
            "kind": self.kind.value,
            "status_code": self.status_code,
            "message": self.user_message,
            "rate_limited": self.rate_limited,
        }


class DashboardError(Exception):
    """Base class for dashboard failures."""


class FetchError(DashboardError):
    """A request through the cached fetcher failed."""

    def __init__(self, error: NormalizedError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def status_code(self) -> int | None:
        """Upstream status code, if a response was received."""
        return self.error.status_code


class MissingCredentialError(DashboardError):
    """A required credential is absent from the configuration."""

    def __init__(self, name: str, message: str | None = None) -> None:
        text = message or (
            f"Credential {name} is missing. Please check your environment variables."
        )
        super().__init__(text)
        self.name = name
        self.error = NormalizedError(
            kind=ErrorKind.MISSING_CONFIGURATION, message=text
        )


class ProviderError(DashboardError):
    """A well-formed upstream response that reports an application error."""


class NotFoundError(DashboardError):
    """A lookup succeeded upstream but matched nothing."""
