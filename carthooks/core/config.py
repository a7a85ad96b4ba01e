"""
Client configuration models and helpers.

Centralizes settings management so the API client, the change watcher and the
command-line tool share a consistent configuration surface. Every value can be
supplied through the environment (or a ``.env`` file); explicit constructor
arguments on the client always win over the environment.
"""

from functools import lru_cache
from typing import Dict, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from carthooks.models.oauth import OAuthConfig

DEFAULT_BASE_URL = "https://api.carthooks.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


class OAuthSettings(BaseSettings):
    """OAuth client registration used for the token endpoint."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    client_id: Optional[str] = Field(None, validation_alias="CARTHOOKS_CLIENT_ID")
    client_secret: Optional[str] = Field(None, validation_alias="CARTHOOKS_CLIENT_SECRET")
    refresh_token: Optional[str] = Field(
        None,
        validation_alias="CARTHOOKS_REFRESH_TOKEN",
        description="Optional pre-seeded refresh token.",
    )
    auto_refresh: Optional[bool] = Field(None, validation_alias="CARTHOOKS_AUTO_REFRESH")

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def to_config(self) -> Optional[OAuthConfig]:
        """Return an ``OAuthConfig`` when both client id and secret are set."""
        if not self.configured:
            return None
        return OAuthConfig(
            client_id=self.client_id,
            client_secret=self.client_secret,
            refresh_token=self.refresh_token,
            auto_refresh=self.auto_refresh,
        )


class WatcherSettings(BaseSettings):
    """Settings for the SQS-backed change watcher."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    sqs_queue_url: Optional[str] = Field(None, validation_alias="CARTHOOKS_SQS_QUEUE_URL")
    region_name: str = Field(
        "ap-southeast-1",
        validation_alias=AliasChoices("CARTHOOKS_AWS_REGION", "AWS_REGION"),
    )
    max_messages: int = Field(5, validation_alias="CARTHOOKS_WATCHER_BATCH_SIZE")
    visibility_timeout: int = Field(300, validation_alias="CARTHOOKS_WATCHER_VISIBILITY_TIMEOUT")
    wait_time_seconds: int = Field(20, validation_alias="CARTHOOKS_WATCHER_WAIT_SECONDS")
    idle_sleep_seconds: float = 1.0
    error_backoff_seconds: float = 5.0
    subscription_age_seconds: int = Field(
        432000,
        description="How long the server keeps the watch alive (5 days).",
    )


class ClientSettings(BaseSettings):
    """Root settings object for the API client."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    base_url: str = Field(DEFAULT_BASE_URL, validation_alias="CARTHOOKS_API_URL")
    access_token: Optional[str] = Field(None, validation_alias="CARTHOOKS_ACCESS_TOKEN")
    timeout: float = Field(DEFAULT_TIMEOUT_SECONDS, validation_alias="CARTHOOKS_TIMEOUT")
    debug: bool = Field(False, validation_alias="CARTHOOKS_SDK_DEBUG")
    log_level: str = Field("INFO", validation_alias="CARTHOOKS_LOG_LEVEL")
    headers: Dict[str, str] = Field(
        default_factory=dict,
        validation_alias="CARTHOOKS_HEADERS",
        description="Extra headers sent with every request (JSON object).",
    )
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)

    @field_validator("base_url")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") or DEFAULT_BASE_URL

    @field_validator("timeout")
    def _positive_timeout(cls, value: float) -> float:
        """Zero or negative timeouts fall back to the default."""
        if value <= 0:
            return DEFAULT_TIMEOUT_SECONDS
        return value


@lru_cache()
def get_settings() -> ClientSettings:
    """Return a cached settings object."""
    return ClientSettings()


__all__ = [
    "ClientSettings",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "OAuthSettings",
    "WatcherSettings",
    "get_settings",
]
