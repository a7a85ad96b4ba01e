"""Pytest configuration shared across the suite."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from urllib.parse import parse_qsl

import httpx
import pytest

from carthooks.clients import CarthooksClient
from carthooks.core.config import ClientSettings
from carthooks.models.oauth import OAuthConfig

BASE_URL = "https://api.carthooks.test"

Responder = Callable[[httpx.Request], httpx.Response]


def envelope(data: Any = None, **extra: Any) -> httpx.Response:
    """Build a successful envelope response."""
    return httpx.Response(200, json={"data": data, **extra})


def token_payload(
    access_token: str = "t1",
    *,
    expires_in: int = 3600,
    refresh_token: Optional[str] = None,
    scope: str = "api:full",
) -> dict:
    data = {
        "access_token": access_token,
        "token_type": "Bearer",
        "expires_in": expires_in,
        "scope": scope,
    }
    if refresh_token is not None:
        data["refresh_token"] = refresh_token
    return data


class RecordingServer:
    """Stand-in for the API: records requests, answers through ``responder``."""

    def __init__(self, responder: Optional[Responder] = None) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Responder = responder or (lambda request: envelope(None))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def token_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == "/oauth/token"]

    @staticmethod
    def form(request: httpx.Request) -> dict[str, str]:
        return dict(parse_qsl(request.content.decode("utf-8")))

    @staticmethod
    def json(request: httpx.Request) -> Any:
        return json.loads(request.content)


class FrozenClock:
    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(_env_file=None, base_url=BASE_URL)


@pytest.fixture
def server() -> RecordingServer:
    return RecordingServer()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def oauth_config() -> OAuthConfig:
    return OAuthConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        auto_refresh=True,
    )


@pytest.fixture
def make_client(settings: ClientSettings, server: RecordingServer, clock: FrozenClock):
    """Factory building clients wired to the recording server."""

    def _make(**kwargs: Any) -> CarthooksClient:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("transport", server.transport)
        kwargs.setdefault("clock", clock)
        return CarthooksClient(**kwargs)

    return _make
