"""
Exception types raised by the Carthooks client.

HTTP-producing calls report failures through ``Result`` instead of raising;
these exceptions cover the non-HTTP paths (token freshness checks, typed
extraction from a Result, transport internals and the change watcher).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from carthooks.schemas.result import Result


# Local error codes carried by Results that never reached the API.
TRANSPORT_ERROR = "TRANSPORT_ERROR"
CONFIGURATION_MISSING = "CONFIGURATION_MISSING"
NO_REFRESH_TOKEN = "NO_REFRESH_TOKEN"
TOKEN_REFRESH_FAILED = "TOKEN_REFRESH_FAILED"


class CarthooksError(Exception):
    """Base class for every error raised by this package."""


class TransportError(CarthooksError):
    """Raised when a request cannot be completed (timeout, connection failure)."""


class LifecycleError(CarthooksError):
    """Raised by token lifecycle operations that are not themselves HTTP calls."""


class ConfigurationMissingError(LifecycleError):
    """Raised when an OAuth operation runs without an OAuth configuration."""

    def __init__(self, message: str = "OAuth configuration not provided") -> None:
        super().__init__(message)


class NoRefreshTokenError(LifecycleError):
    """Raised when a refresh is attempted and no refresh token is available."""

    def __init__(self, message: str = "No refresh token available") -> None:
        super().__init__(message)


class TokenRefreshError(LifecycleError):
    """Raised when an on-demand refresh fails; keeps the failed Result."""

    def __init__(self, result: "Result") -> None:
        self.result = result
        super().__init__(f"failed to refresh token: {result.error_message}")

    @property
    def trace_id(self) -> Optional[str]:
        return self.result.trace_id


class ExtractionError(CarthooksError):
    """Raised when a successful Result cannot be read as the requested shape."""


class NotSuccessfulError(ExtractionError):
    def __init__(self, error_message: str) -> None:
        self.error_message = error_message
        super().__init__(f"result is not successful: {error_message}")


class NoDataError(ExtractionError):
    def __init__(self) -> None:
        super().__init__("no data in result")


class DecodeMismatchError(ExtractionError):
    """The payload does not fit the requested model."""


class WrongScalarTypeError(ExtractionError):
    def __init__(self, expected: str) -> None:
        self.expected = expected
        super().__init__(f"data is not a {expected}")


class WatcherError(CarthooksError):
    """Raised when the change watcher cannot subscribe or is misused."""


__all__ = [
    "CONFIGURATION_MISSING",
    "CarthooksError",
    "ConfigurationMissingError",
    "DecodeMismatchError",
    "ExtractionError",
    "LifecycleError",
    "NO_REFRESH_TOKEN",
    "NoDataError",
    "NoRefreshTokenError",
    "NotSuccessfulError",
    "TOKEN_REFRESH_FAILED",
    "TRANSPORT_ERROR",
    "TokenRefreshError",
    "TransportError",
    "WatcherError",
    "WrongScalarTypeError",
]
