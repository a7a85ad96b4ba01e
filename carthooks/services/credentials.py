"""
In-memory holder for the active bearer token and OAuth state of one client.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from carthooks.models.oauth import OAuthConfig, StoredCredentials
from carthooks.schemas.oauth import OAuthTokens
from carthooks.utils.http import HTTPTransport

logger = logging.getLogger(__name__)


class CredentialStore:
    """Owns the token state for a single client instance.

    Not synchronized on its own; the token lifecycle manager serializes the
    refresh path that reads and rewrites the refresh token.
    """

    def __init__(
        self,
        transport: HTTPTransport,
        *,
        access_token: Optional[str] = None,
        oauth_config: Optional[OAuthConfig] = None,
    ) -> None:
        self._transport = transport
        self._access_token: Optional[str] = None
        self._credentials: Optional[StoredCredentials] = None
        self._config = oauth_config
        if access_token:
            self.set_token(access_token)

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def expires_at(self) -> Optional[datetime]:
        if self._credentials is None:
            return None
        return self._credentials.expires_at

    def set_token(self, access_token: str) -> None:
        """Replace the bearer token without touching expiry or refresh state."""
        self._access_token = access_token
        self._transport.set_bearer_token(access_token)

    def record_exchange_result(
        self, tokens: OAuthTokens, *, issued_at: Optional[datetime] = None
    ) -> StoredCredentials:
        """Store a successful token exchange and start using its access token.

        A refresh token missing from the response keeps the one already held,
        since servers that do not rotate refresh tokens omit it on refresh.
        """
        refresh_token = tokens.refresh_token
        if not refresh_token and self._credentials is not None:
            refresh_token = self._credentials.refresh_token

        self._credentials = StoredCredentials.issue(
            access_token=tokens.access_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            refresh_token=refresh_token,
            scope=tokens.scope,
            issued_at=issued_at,
        )
        self.set_token(tokens.access_token)
        logger.info(
            "Stored OAuth tokens",
            extra={
                "expires_in": self._credentials.expires_in,
                "has_refresh_token": bool(self._credentials.refresh_token),
            },
        )
        return self._credentials

    def current_tokens(self) -> Optional[StoredCredentials]:
        return self._credentials

    def current_config(self) -> Optional[OAuthConfig]:
        return self._config

    def replace_config(self, config: Optional[OAuthConfig]) -> None:
        """Swap the OAuth configuration wholesale; nothing is merged."""
        self._config = config


__all__ = ["CredentialStore"]
