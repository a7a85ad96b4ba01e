"""
OAuth token acquisition and on-demand refresh.

Freshness is observed lazily: nothing runs in the background. ``ensure_fresh``
compares the stored expiry against a five minute horizon and refreshes once
when the token is inside it. Failures are surfaced and never retried.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from pydantic import ValidationError

from carthooks.core.errors import (
    CONFIGURATION_MISSING,
    NO_REFRESH_TOKEN,
    TRANSPORT_ERROR,
    ConfigurationMissingError,
    NoRefreshTokenError,
    TokenRefreshError,
    TransportError,
)
from carthooks.models.oauth import OAuthConfig
from carthooks.schemas.envelope import parse_envelope
from carthooks.schemas.oauth import GrantType, OAuthTokenRequest, OAuthTokens
from carthooks.schemas.result import Result
from carthooks.services.credentials import CredentialStore
from carthooks.utils.http import HTTPTransport

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenFreshness(str, Enum):
    UNINITIALIZED = "uninitialized"
    FRESH = "fresh"
    NEAR_EXPIRY = "near_expiry"
    EXPIRED_OR_UNKNOWN = "expired_or_unknown"


class TokenLifecycleManager:
    """Runs the three grant flows and keeps the stored token usable."""

    _REFRESH_WINDOW = timedelta(minutes=5)

    def __init__(
        self,
        transport: HTTPTransport,
        store: CredentialStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._transport = transport
        self._store = store
        self._clock = clock
        self._refresh_lock = asyncio.Lock()
        self._last_refresh_failed = False

    async def request_token(self, request: OAuthTokenRequest) -> Result:
        """POST a form-encoded grant to the token endpoint.

        Tokens are stored only when the request was made for the configured
        client; exchanges on behalf of other clients are passed through.
        """
        try:
            response = await self._transport.send_form("POST", TOKEN_PATH, request.to_form())
        except TransportError as exc:
            return Result.failure(str(exc), code=TRANSPORT_ERROR)

        result = parse_envelope(response.content, response.status_code)
        config = self._store.current_config()
        if result.success and config is not None and request.client_id == config.client_id:
            self._record(result, issued_at=self._clock())
        elif not result.success:
            logger.warning(
                "Token exchange failed",
                extra={"grant_type": request.grant_type.value, "trace_id": result.trace_id},
            )
        return result

    def _record(self, result: Result, *, issued_at: datetime) -> None:
        try:
            tokens = OAuthTokens.model_validate(result.data)
        except ValidationError:
            logger.warning("Token endpoint returned an unexpected payload; tokens not stored")
            return
        if not tokens.access_token:
            logger.warning("Token endpoint returned no access token; tokens not stored")
            return
        self._store.record_exchange_result(tokens, issued_at=issued_at)
        self._last_refresh_failed = False

    def _require_config(self) -> OAuthConfig:
        config = self._store.current_config()
        if config is None:
            raise ConfigurationMissingError()
        return config

    async def exchange_client_credentials(
        self, user_access_token: Optional[str] = None
    ) -> Result:
        """Obtain a token for the configured client, optionally acting as a user."""
        try:
            config = self._require_config()
        except ConfigurationMissingError as exc:
            return Result.failure(str(exc), code=CONFIGURATION_MISSING)

        logger.info(
            "Requesting client credentials token",
            extra={"user_context": bool(user_access_token)},
        )
        return await self.request_token(
            OAuthTokenRequest(
                grant_type=GrantType.CLIENT_CREDENTIALS,
                client_id=config.client_id,
                client_secret=config.client_secret,
                user_access_token=user_access_token or None,
            )
        )

    async def exchange_authorization_code(self, code: str, redirect_uri: str) -> Result:
        try:
            config = self._require_config()
        except ConfigurationMissingError as exc:
            return Result.failure(str(exc), code=CONFIGURATION_MISSING)

        logger.info("Exchanging authorization code")
        return await self.request_token(
            OAuthTokenRequest(
                grant_type=GrantType.AUTHORIZATION_CODE,
                client_id=config.client_id,
                client_secret=config.client_secret,
                code=code,
                redirect_uri=redirect_uri,
            )
        )

    def _select_refresh_token(self, config: OAuthConfig, explicit: Optional[str]) -> str:
        """Explicit argument, then configured token, then the stored one."""
        stored = self._store.current_tokens()
        for candidate in (
            explicit,
            config.refresh_token,
            stored.refresh_token if stored is not None else None,
        ):
            if candidate:
                return candidate
        raise NoRefreshTokenError()

    async def refresh(self, refresh_token: Optional[str] = None) -> Result:
        async with self._refresh_lock:
            return await self._refresh(refresh_token)

    async def _refresh(self, refresh_token: Optional[str] = None) -> Result:
        try:
            config = self._require_config()
            token = self._select_refresh_token(config, refresh_token)
        except ConfigurationMissingError as exc:
            return Result.failure(str(exc), code=CONFIGURATION_MISSING)
        except NoRefreshTokenError as exc:
            return Result.failure(str(exc), code=NO_REFRESH_TOKEN)

        logger.info("Refreshing access token")
        result = await self.request_token(
            OAuthTokenRequest(
                grant_type=GrantType.REFRESH_TOKEN,
                client_id=config.client_id,
                client_secret=config.client_secret,
                refresh_token=token,
            )
        )
        if not result.success:
            self._last_refresh_failed = True
        return result

    def freshness(self) -> TokenFreshness:
        """Report the current state without touching the network."""
        tokens = self._store.current_tokens()
        if tokens is None:
            return TokenFreshness.UNINITIALIZED
        if self._last_refresh_failed:
            return TokenFreshness.EXPIRED_OR_UNKNOWN
        if tokens.expires_at is None:
            return TokenFreshness.FRESH
        now = self._clock()
        if tokens.expires_at > now + self._REFRESH_WINDOW:
            return TokenFreshness.FRESH
        if tokens.expires_at > now:
            return TokenFreshness.NEAR_EXPIRY
        return TokenFreshness.EXPIRED_OR_UNKNOWN

    def _needs_refresh(self) -> bool:
        config = self._store.current_config()
        expires_at = self._store.expires_at
        if config is None or not config.auto_refresh or expires_at is None:
            return False
        return expires_at <= self._clock() + self._REFRESH_WINDOW

    async def ensure_fresh(self) -> bool:
        """Refresh the token if it expires within five minutes.

        Returns True when a refresh was performed. Concurrent callers share a
        single refresh: the check is repeated once the lock is held.

        Raises:
            NoRefreshTokenError: no refresh token is available.
            TokenRefreshError: the token endpoint rejected the refresh.
        """
        if not self._needs_refresh():
            return False

        async with self._refresh_lock:
            if not self._needs_refresh():
                return False
            result = await self._refresh()

        if result.success:
            return True
        if result.error_code == NO_REFRESH_TOKEN:
            raise NoRefreshTokenError(result.error_message)
        raise TokenRefreshError(result)


__all__ = ["TOKEN_PATH", "TokenFreshness", "TokenLifecycleManager"]
