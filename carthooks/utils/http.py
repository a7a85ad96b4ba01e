"""HTTP transport used by every API call, built on ``httpx.AsyncClient``."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from carthooks.core.errors import TransportError
from carthooks.core.logging import mask_secret

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HTTPTransport:
    """Issue requests against a base URL with shared default headers.

    No retries are attempted: some calls (an authorization-code exchange, for
    instance) are not safe to repeat, so retry policy belongs to the caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
        debug: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._debug = debug
        self._headers: Dict[str, str] = {
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
        }
        self._headers.update(headers or {})
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def set_bearer_token(self, token: str) -> None:
        self._headers["Authorization"] = f"Bearer {token}"

    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> httpx.URL:
        url = httpx.URL(self._base_url + path)
        if params:
            url = url.copy_merge_params({key: str(value) for key, value in params.items()})
        return url

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """Send a JSON request with the default and bearer headers applied."""
        url = self.build_url(path, params)
        content: Optional[bytes] = None
        if body is not None:
            try:
                content = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise TransportError(f"failed to marshal request body: {exc}") from exc

        if self._debug:
            logger.debug("%s %s", method, url)
            if content is not None:
                logger.debug("Request body: %s", content.decode("utf-8"))

        return await self._dispatch(method, url, content=content, headers=self.headers)

    async def send_form(self, method: str, path: str, form: Mapping[str, str]) -> httpx.Response:
        """Send a form-encoded request without forwarding the bearer header."""
        url = self.build_url(path)
        headers = {"Content-Type": FORM_CONTENT_TYPE, "Accept": JSON_CONTENT_TYPE}
        for key, value in self._headers.items():
            if key.lower() not in ("authorization", "content-type"):
                headers[key] = value

        if self._debug:
            logger.debug("%s %s", method, url)
            logger.debug("Form data: %s", _masked_form(form))

        return await self._dispatch(method, url, data=dict(form), headers=headers)

    async def _dispatch(self, method: str, url: httpx.URL, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            reason = str(exc) or exc.__class__.__name__
            raise TransportError(f"request failed: {reason}") from exc

        if self._debug:
            logger.debug("Response status: %s", response.status_code)
            logger.debug("Response body: %s", response.text)
        return response

    async def aclose(self) -> None:
        await self._client.aclose()


def _masked_form(form: Mapping[str, str]) -> Dict[str, str]:
    secret_keys = ("client_secret", "refresh_token", "user_access_token", "code")
    return {
        key: mask_secret(value) if key in secret_keys else value
        for key, value in form.items()
    }


__all__ = ["FORM_CONTENT_TYPE", "HTTPTransport", "JSON_CONTENT_TYPE"]
