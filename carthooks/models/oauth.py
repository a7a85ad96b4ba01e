"""
Domain models for OAuth configuration and stored credentials.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OAuthConfig(BaseModel):
    """Durable OAuth intent supplied by the caller.

    ``auto_refresh`` defaults to on when a seed refresh token is provided and
    the caller did not choose explicitly.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    refresh_token: Optional[str] = None
    auto_refresh: bool = False

    @model_validator(mode="before")
    @classmethod
    def _default_auto_refresh(cls, values: Any) -> Any:
        if isinstance(values, dict) and values.get("auto_refresh") is None:
            values = dict(values)
            values["auto_refresh"] = bool(values.get("refresh_token"))
        return values


class StoredCredentials(BaseModel):
    """Runtime credentials derived from the most recent successful exchange."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None

    @classmethod
    def issue(
        cls,
        *,
        access_token: str,
        token_type: Optional[str] = None,
        expires_in: Optional[int] = None,
        refresh_token: Optional[str] = None,
        scope: Optional[str] = None,
        issued_at: Optional[datetime] = None,
    ) -> "StoredCredentials":
        """Build credentials, deriving ``expires_at`` only when ``expires_in > 0``."""
        issued_at = issued_at or datetime.now(timezone.utc)
        expires_in = int(expires_in or 0)
        expires_at = issued_at + timedelta(seconds=expires_in) if expires_in > 0 else None
        return cls(
            access_token=access_token,
            token_type=token_type or "Bearer",
            expires_in=expires_in,
            refresh_token=refresh_token or None,
            scope=scope,
            issued_at=issued_at,
            expires_at=expires_at,
        )


__all__ = ["OAuthConfig", "StoredCredentials"]
