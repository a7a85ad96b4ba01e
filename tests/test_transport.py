from __future__ import annotations

import httpx
import pytest

from carthooks.core.errors import TransportError
from carthooks.utils.http import FORM_CONTENT_TYPE, HTTPTransport

from conftest import BASE_URL, RecordingServer


def _transport(server: RecordingServer, **kwargs) -> HTTPTransport:
    return HTTPTransport(BASE_URL, transport=server.transport, **kwargs)


@pytest.mark.asyncio
async def test_json_request_applies_default_custom_and_bearer_headers() -> None:
    server = RecordingServer()
    transport = _transport(server, headers={"X-Tenant": "42"})
    transport.set_bearer_token("static-token")

    await transport.send("POST", "/v1/apps", {"name": "demo"})

    request = server.last
    assert request.url == httpx.URL(f"{BASE_URL}/v1/apps")
    assert request.headers["content-type"] == "application/json"
    assert request.headers["accept"] == "application/json"
    assert request.headers["x-tenant"] == "42"
    assert request.headers["authorization"] == "Bearer static-token"
    assert server.json(request) == {"name": "demo"}
    await transport.aclose()


@pytest.mark.asyncio
async def test_query_params_are_url_encoded() -> None:
    server = RecordingServer()
    transport = _transport(server)

    await transport.send(
        "GET",
        "/v1/apps/1/collections/2/items",
        params={"pagination[start]": 0, "pagination[limit]": 10, "q": "a b"},
    )

    params = server.last.url.params
    assert params["pagination[start]"] == "0"
    assert params["pagination[limit]"] == "10"
    assert params["q"] == "a b"
    await transport.aclose()


@pytest.mark.asyncio
async def test_form_request_drops_authorization_header() -> None:
    server = RecordingServer()
    transport = _transport(server, headers={"X-Tenant": "42"})
    transport.set_bearer_token("static-token")

    await transport.send_form("POST", "/oauth/token", {"grant_type": "client_credentials"})

    request = server.last
    assert "authorization" not in request.headers
    assert request.headers["content-type"] == FORM_CONTENT_TYPE
    assert request.headers["accept"] == "application/json"
    assert request.headers["x-tenant"] == "42"
    assert server.form(request) == {"grant_type": "client_credentials"}
    await transport.aclose()


@pytest.mark.asyncio
async def test_timeout_surfaces_as_transport_error() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    transport = _transport(RecordingServer(responder), timeout=0.5)

    with pytest.raises(TransportError) as excinfo:
        await transport.send("GET", "/v1/me")

    assert "timed out" in str(excinfo.value)
    await transport.aclose()


@pytest.mark.asyncio
async def test_connection_failure_surfaces_as_transport_error() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = _transport(RecordingServer(responder))

    with pytest.raises(TransportError, match="connection refused"):
        await transport.send("GET", "/v1/me")
    await transport.aclose()


@pytest.mark.asyncio
async def test_unserializable_body_is_rejected_before_sending() -> None:
    server = RecordingServer()
    transport = _transport(server)

    with pytest.raises(TransportError, match="marshal"):
        await transport.send("POST", "/v1/apps", {"value": object()})

    assert server.requests == []
    await transport.aclose()
