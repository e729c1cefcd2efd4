"""
Tests for the NetBird REST client.
"""

import json

import pytest
import requests

from netbird_mcp.client import DEFAULT_TIMEOUT, NetbirdClient
from netbird_mcp.config import NetbirdConfig
from netbird_mcp.errors import NetbirdAPIError


def make_response(status_code=200, payload=None, text=None):
    response = requests.Response()
    response.status_code = status_code
    if payload is not None:
        response._content = json.dumps(payload).encode()
    elif text is not None:
        response._content = text.encode()
    else:
        response._content = b""
    return response


class RecordingSession(requests.Session):
    def __init__(self, response=None, error=None):
        super().__init__()
        self.response = response if response is not None else make_response(payload={})
        self.error = error
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def make_client(session, token="secret", host="api.netbird.io"):
    return NetbirdClient(NetbirdConfig(api_token=token, api_host=host), session=session)


def test_get_sends_token_header():
    session = RecordingSession(make_response(payload=[{"id": "p1"}]))

    result = make_client(session).get("/peers")

    assert result == [{"id": "p1"}]
    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert url == "https://api.netbird.io/api/peers"
    assert kwargs["headers"]["Authorization"] == "Token secret"
    assert "Content-Type" not in kwargs["headers"]
    assert "json" not in kwargs


def test_post_sends_json_body():
    session = RecordingSession(make_response(payload={"id": "g1", "name": "dev"}))

    result = make_client(session).post("/groups", {"name": "dev"})

    assert result == {"id": "g1", "name": "dev"}
    method, _, kwargs = session.requests[0]
    assert method == "POST"
    assert kwargs["json"] == {"name": "dev"}
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_custom_host_builds_base_url():
    session = RecordingSession()
    make_client(session, host="netbird.example.com:33073").get("/users")
    assert session.requests[0][1] == "https://netbird.example.com:33073/api/users"


def test_no_content_decodes_to_none():
    session = RecordingSession(make_response(status_code=204))
    assert make_client(session).delete("/peers/p1") is None


def test_empty_body_decodes_to_none():
    session = RecordingSession(make_response(status_code=200))
    assert make_client(session).put("/peers/p1", {"name": "x"}) is None


def test_non_success_status_raises_with_body():
    session = RecordingSession(make_response(status_code=404, text="not found"))

    with pytest.raises(NetbirdAPIError) as exc:
        make_client(session).get("/peers/missing")

    assert str(exc.value) == "unexpected status code: 404, body: not found"
    assert exc.value.status_code == 404
    assert exc.value.body == "not found"


def test_undecodable_body_raises():
    session = RecordingSession(make_response(status_code=200, text="<html>"))
    with pytest.raises(NetbirdAPIError, match="^decoding response: "):
        make_client(session).get("/peers")


def test_transport_failure_raises():
    session = RecordingSession(error=requests.ConnectionError("connection refused"))
    with pytest.raises(NetbirdAPIError, match="^making request: connection refused"):
        make_client(session).get("/peers")


def test_missing_token_fails_before_request():
    session = RecordingSession()
    with pytest.raises(NetbirdAPIError, match="netbird API token not found in context"):
        make_client(session, token="").get("/peers")
    assert session.requests == []


def test_timeout_from_environment(clean_env):
    clean_env.setenv("NETBIRD_TIMEOUT", "5")
    session = RecordingSession()
    make_client(session).get("/peers")
    assert session.requests[0][2]["timeout"] == 5.0


def test_invalid_timeout_falls_back_to_default(clean_env):
    clean_env.setenv("NETBIRD_TIMEOUT", "soon")
    assert make_client(RecordingSession()).timeout == DEFAULT_TIMEOUT
