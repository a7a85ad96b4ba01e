"""
Async client for the Carthooks API.

Every HTTP-producing method returns a ``Result``; callers never need to catch
an exception to learn that a call failed. Protected calls first make sure the
OAuth token is fresh when auto-refresh is enabled.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from carthooks.core.config import ClientSettings, get_settings
from carthooks.core.errors import (
    TOKEN_REFRESH_FAILED,
    TRANSPORT_ERROR,
    LifecycleError,
    TokenRefreshError,
    TransportError,
)
from carthooks.models.oauth import OAuthConfig, StoredCredentials
from carthooks.schemas.envelope import parse_envelope
from carthooks.schemas.oauth import OAuthAuthorizeCodeRequest, OAuthTokenRequest
from carthooks.schemas.records import (
    CreateConnectionLogRequest,
    CreateConnectionRequest,
    CreateConnectionUsageRequest,
    LockOptions,
    QueryOptions,
    SubmissionTokenOptions,
    UpdateConnectionRequest,
    UpdateTokenOptions,
    WatchDataOptions,
)
from carthooks.schemas.result import Result
from carthooks.services.credentials import CredentialStore
from carthooks.services.token_lifecycle import TokenFreshness, TokenLifecycleManager
from carthooks.utils.http import HTTPTransport

logger = logging.getLogger(__name__)

Body = Union[BaseModel, Mapping[str, Any], None]


def _to_body(body: Body) -> Any:
    if body is None:
        return None
    if hasattr(body, "to_body"):
        return body.to_body()
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(body)


class CarthooksClient:
    """Carthooks API client.

    Explicit arguments override the matching ``CARTHOOKS_*`` settings. Use as
    ``async with CarthooksClient(...) as client:`` or call ``aclose()``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        headers: Optional[Mapping[str, str]] = None,
        debug: Optional[bool] = None,
        oauth: Optional[OAuthConfig] = None,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        settings = settings or get_settings()
        merged_headers: Dict[str, str] = dict(settings.headers)
        merged_headers.update(headers or {})

        self._transport = HTTPTransport(
            (base_url or settings.base_url),
            timeout=timeout if timeout and timeout > 0 else settings.timeout,
            headers=merged_headers,
            debug=settings.debug if debug is None else debug,
            transport=transport,
        )
        self._store = CredentialStore(
            self._transport,
            access_token=access_token or settings.access_token,
            oauth_config=oauth or settings.oauth.to_config(),
        )
        lifecycle_kwargs = {"clock": clock} if clock is not None else {}
        self._tokens = TokenLifecycleManager(self._transport, self._store, **lifecycle_kwargs)

    async def __aenter__(self) -> "CarthooksClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    @property
    def base_url(self) -> str:
        return self._transport.base_url

    @property
    def tokens(self) -> TokenLifecycleManager:
        return self._tokens

    def set_access_token(self, token: str) -> None:
        self._store.set_token(token)

    @property
    def current_tokens(self) -> Optional[StoredCredentials]:
        return self._store.current_tokens()

    @property
    def oauth_config(self) -> Optional[OAuthConfig]:
        return self._store.current_config()

    def set_oauth_config(self, config: Optional[OAuthConfig]) -> None:
        self._store.replace_config(config)

    def freshness(self) -> TokenFreshness:
        return self._tokens.freshness()

    async def _call(
        self,
        method: str,
        path: str,
        body: Body = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        try:
            await self._tokens.ensure_fresh()
        except TokenRefreshError as exc:
            return Result.failure(str(exc), code=TOKEN_REFRESH_FAILED, trace_id=exc.trace_id)
        except LifecycleError as exc:
            return Result.failure(f"failed to refresh token: {exc}", code=TOKEN_REFRESH_FAILED)

        try:
            response = await self._transport.send(method, path, _to_body(body), params)
        except TransportError as exc:
            logger.warning("Request failed", extra={"method": method, "path": path})
            return Result.failure(str(exc), code=TRANSPORT_ERROR)
        return parse_envelope(response.content, response.status_code)

    # OAuth

    async def get_oauth_token(self, request: OAuthTokenRequest) -> Result:
        return await self._tokens.request_token(request)

    async def initialize_oauth(self, user_access_token: Optional[str] = None) -> Result:
        """Client-credentials grant, optionally in the context of an end user."""
        return await self._tokens.exchange_client_credentials(user_access_token)

    async def exchange_authorization_code(self, code: str, redirect_uri: str) -> Result:
        return await self._tokens.exchange_authorization_code(code, redirect_uri)

    async def refresh_oauth_token(self, refresh_token: Optional[str] = None) -> Result:
        return await self._tokens.refresh(refresh_token)

    async def ensure_valid_token(self) -> bool:
        return await self._tokens.ensure_fresh()

    async def get_oauth_authorize_code(self, request: OAuthAuthorizeCodeRequest) -> Result:
        return await self._call("POST", "/oauth/get-authorize-code", request)

    async def get_current_user(self) -> Result:
        return await self._call("GET", "/v1/me")

    # Items

    @staticmethod
    def _items_path(app_id: int, collection_id: int) -> str:
        return f"/v1/apps/{app_id}/collections/{collection_id}/items"

    async def get_items(
        self,
        app_id: int,
        collection_id: int,
        limit: int = 20,
        start: int = 0,
        options: Optional[Mapping[str, str]] = None,
    ) -> Result:
        params: Dict[str, Any] = {"pagination[start]": start, "pagination[limit]": limit}
        params.update(options or {})
        return await self._call("GET", self._items_path(app_id, collection_id), params=params)

    async def get_item_by_id(
        self,
        app_id: int,
        collection_id: int,
        item_id: int,
        fields: Optional[Iterable[str]] = None,
    ) -> Result:
        fields = list(fields or [])
        params = {"fields": ",".join(fields)} if fields else None
        path = f"{self._items_path(app_id, collection_id)}/{item_id}"
        return await self._call("GET", path, params=params)

    async def query_items(
        self, app_id: int, collection_id: int, options: Optional[QueryOptions] = None
    ) -> Result:
        path = f"{self._items_path(app_id, collection_id)}/query"
        return await self._call("POST", path, options or QueryOptions())

    async def create_item(
        self, app_id: int, collection_id: int, data: Mapping[str, Any]
    ) -> Result:
        return await self._call(
            "POST", self._items_path(app_id, collection_id), {"data": dict(data)}
        )

    async def update_item(
        self, app_id: int, collection_id: int, item_id: int, data: Mapping[str, Any]
    ) -> Result:
        path = f"{self._items_path(app_id, collection_id)}/{item_id}"
        return await self._call("PUT", path, {"data": dict(data)})

    async def delete_item(self, app_id: int, collection_id: int, item_id: int) -> Result:
        path = f"{self._items_path(app_id, collection_id)}/{item_id}"
        return await self._call("DELETE", path)

    async def lock_item(
        self,
        app_id: int,
        collection_id: int,
        item_id: int,
        options: Optional[LockOptions] = None,
    ) -> Result:
        path = f"{self._items_path(app_id, collection_id)}/{item_id}/lock"
        return await self._call("POST", path, options.to_body() if options else {})

    async def unlock_item(
        self, app_id: int, collection_id: int, item_id: int, lock_id: Optional[str] = None
    ) -> Result:
        path = f"{self._items_path(app_id, collection_id)}/{item_id}/unlock"
        return await self._call("POST", path, {"lockId": lock_id} if lock_id else {})

    # Sub-items (subform fields)

    async def create_sub_item(
        self,
        app_id: int,
        collection_id: int,
        item_id: int,
        field_id: int,
        data: Mapping[str, Any],
    ) -> Result:
        path = f"{self._items_path(app_id, collection_id)}/{item_id}/subform/{field_id}"
        return await self._call("POST", path, {"data": dict(data)})

    async def update_sub_item(
        self,
        app_id: int,
        collection_id: int,
        item_id: int,
        field_id: int,
        sub_item_id: int,
        data: Mapping[str, Any],
    ) -> Result:
        path = (
            f"{self._items_path(app_id, collection_id)}/{item_id}"
            f"/subform/{field_id}/items/{sub_item_id}"
        )
        return await self._call("PUT", path, {"data": dict(data)})

    async def delete_sub_item(
        self,
        app_id: int,
        collection_id: int,
        item_id: int,
        field_id: int,
        sub_item_id: int,
    ) -> Result:
        path = (
            f"{self._items_path(app_id, collection_id)}/{item_id}"
            f"/subform/{field_id}/items/{sub_item_id}"
        )
        return await self._call("DELETE", path)

    # Connections

    async def create_connection(self, app_id: int, request: CreateConnectionRequest) -> Result:
        return await self._call("POST", f"/v1/apps/{app_id}/connections", request)

    async def update_connection(
        self, app_id: int, connection_id: int, request: UpdateConnectionRequest
    ) -> Result:
        return await self._call(
            "PUT", f"/v1/apps/{app_id}/connections/{connection_id}", request
        )

    async def get_connection(self, app_id: int, connection_id: int) -> Result:
        return await self._call("GET", f"/v1/apps/{app_id}/connections/{connection_id}")

    async def delete_connection(self, app_id: int, connection_id: int) -> Result:
        return await self._call("DELETE", f"/v1/apps/{app_id}/connections/{connection_id}")

    async def create_connection_log(
        self, app_id: int, connection_id: int, request: CreateConnectionLogRequest
    ) -> Result:
        return await self._call(
            "POST", f"/v1/apps/{app_id}/connections/{connection_id}/logs", request
        )

    async def create_connection_usage(
        self, app_id: int, connection_id: int, request: CreateConnectionUsageRequest
    ) -> Result:
        return await self._call(
            "POST", f"/v1/apps/{app_id}/connections/{connection_id}/usage", request
        )

    # Tokens, users, watches, collections and apps

    async def get_submission_token(
        self,
        app_id: int,
        collection_id: int,
        options: Optional[SubmissionTokenOptions] = None,
    ) -> Result:
        path = f"/v1/apps/{app_id}/collections/{collection_id}/submission-token"
        return await self._call("POST", path, options or SubmissionTokenOptions())

    async def update_submission_token(
        self,
        app_id: int,
        collection_id: int,
        item_id: int,
        options: Optional[UpdateTokenOptions] = None,
    ) -> Result:
        path = f"{self._items_path(app_id, collection_id)}/{item_id}/update-token"
        return await self._call("POST", path, options or UpdateTokenOptions())

    async def get_upload_token(self) -> Result:
        return await self._call("POST", "/v1/uploads/token")

    async def get_user(self, user_id: int) -> Result:
        return await self._call("GET", f"/v1/users/{user_id}")

    async def get_user_by_token(self, token: str) -> Result:
        return await self._call("GET", f"/v1/user-token/{quote(token, safe='')}")

    async def start_watch_data(self, options: WatchDataOptions) -> Result:
        return await self._call("POST", "/v1/watch-data", options)

    async def get_collections(self, app_id: int) -> Result:
        return await self._call("GET", f"/v1/apps/{app_id}/collections")

    async def get_collection(self, app_id: int, collection_id: int) -> Result:
        return await self._call("GET", f"/v1/apps/{app_id}/collections/{collection_id}")

    async def get_apps(self) -> Result:
        return await self._call("GET", "/v1/apps")

    async def get_app(self, app_id: int) -> Result:
        return await self._call("GET", f"/v1/apps/{app_id}")


__all__ = ["CarthooksClient"]
