"""Tests for the command-line front end."""

from __future__ import annotations

import json

import httpx
import pytest

from scripts import carthooks_cli

from conftest import RecordingServer, envelope, token_payload


@pytest.fixture(autouse=True)
def _cli_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTHOOKS_API_URL", "https://api.carthooks.test")
    monkeypatch.setenv("CARTHOOKS_ACCESS_TOKEN", "cli-token")


def test_whoami_prints_user(capsys: pytest.CaptureFixture[str]) -> None:
    server = RecordingServer(lambda request: envelope({"user_id": 5, "username": "ada"}))

    exit_code = carthooks_cli.main(["whoami"], transport=server.transport)

    assert exit_code == carthooks_cli.EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"user_id": 5, "username": "ada"}
    assert server.last.url.path == "/v1/me"
    assert server.last.headers["authorization"] == "Bearer cli-token"


def test_items_reports_api_error(capsys: pytest.CaptureFixture[str]) -> None:
    server = RecordingServer(
        lambda request: httpx.Response(
            404,
            json={"error": {"message": "Collection not found", "code": "NOT_FOUND"}, "trace_id": "t-7"},
        )
    )

    exit_code = carthooks_cli.main(["items", "1", "2", "--limit", "5"], transport=server.transport)

    assert exit_code == carthooks_cli.EXIT_API_ERROR
    assert "Collection not found (trace_id=t-7)" in capsys.readouterr().err
    assert server.last.url.params["pagination[limit]"] == "5"


def test_client_credentials_flag_exchanges_token_first(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CARTHOOKS_ACCESS_TOKEN")
    monkeypatch.setenv("CARTHOOKS_CLIENT_ID", "cli-id")
    monkeypatch.setenv("CARTHOOKS_CLIENT_SECRET", "cli-secret")

    def responder(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            return envelope(token_payload("issued"))
        return envelope({"user_id": 1})

    server = RecordingServer(responder)

    exit_code = carthooks_cli.main(
        ["--client-credentials", "--user-token", "u-1", "whoami"], transport=server.transport
    )

    assert exit_code == carthooks_cli.EXIT_OK
    token_request = server.requests[0]
    assert server.form(token_request)["user_access_token"] == "u-1"
    assert server.last.headers["authorization"] == "Bearer issued"


def test_client_credentials_without_oauth_config_is_a_config_error(
    capsys: pytest.CaptureFixture[str],
) -> None:
    server = RecordingServer()

    exit_code = carthooks_cli.main(["--client-credentials", "whoami"], transport=server.transport)

    assert exit_code == carthooks_cli.EXIT_CONFIG_ERROR
    assert "OAuth configuration not provided" in capsys.readouterr().err
    assert server.requests == []


def test_invalid_settings_are_reported(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("CARTHOOKS_TIMEOUT", "soon")

    exit_code = carthooks_cli.main(["whoami"], transport=RecordingServer().transport)

    assert exit_code == carthooks_cli.EXIT_CONFIG_ERROR
    assert "Settings validation failed" in capsys.readouterr().err
