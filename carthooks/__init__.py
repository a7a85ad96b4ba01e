"""Async Python client for the Carthooks API.

Exposes the API client, the uniform ``Result`` type, OAuth configuration and
the SQS-backed change watcher.
"""

from carthooks.clients import CarthooksClient
from carthooks.core.errors import (
    CarthooksError,
    ConfigurationMissingError,
    DecodeMismatchError,
    ExtractionError,
    LifecycleError,
    NoDataError,
    NoRefreshTokenError,
    NotSuccessfulError,
    TokenRefreshError,
    TransportError,
    WatcherError,
    WrongScalarTypeError,
)
from carthooks.models.oauth import OAuthConfig, StoredCredentials
from carthooks.schemas import PaginationMeta, Record, Result
from carthooks.services import TokenFreshness, Watcher, WatcherConfig

__version__ = "1.0.0"

__all__ = [
    "CarthooksClient",
    "CarthooksError",
    "ConfigurationMissingError",
    "DecodeMismatchError",
    "ExtractionError",
    "LifecycleError",
    "NoDataError",
    "NoRefreshTokenError",
    "NotSuccessfulError",
    "OAuthConfig",
    "PaginationMeta",
    "Record",
    "Result",
    "StoredCredentials",
    "TokenFreshness",
    "TokenRefreshError",
    "TransportError",
    "Watcher",
    "WatcherConfig",
    "WrongScalarTypeError",
]
