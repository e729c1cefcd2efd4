"""
Tests for configuration resolution and validation.
"""

import logging

import pytest

from netbird_mcp.config import (
    DEFAULT_NETBIRD_HOST,
    ConfigError,
    ConfigLoader,
    NetbirdConfig,
    strip_protocol_prefix,
    validate_config,
)


def test_defaults_without_any_source(clean_env):
    config = ConfigLoader().load()
    assert config.api_token == ""
    assert config.api_host == DEFAULT_NETBIRD_HOST
    assert config.base_url == "https://api.netbird.io/api"


def test_environment_is_used(clean_env):
    clean_env.setenv("NETBIRD_API_TOKEN", "env-token")
    clean_env.setenv("NETBIRD_HOST", "env.example.com")

    config = ConfigLoader().load()

    assert config.api_token == "env-token"
    assert config.api_host == "env.example.com"


def test_headers_override_environment(clean_env):
    clean_env.setenv("NETBIRD_API_TOKEN", "env-token")
    clean_env.setenv("NETBIRD_HOST", "env.example.com")

    config = ConfigLoader().load(http_token="header-token", http_host="header.example.com")

    assert config.api_token == "header-token"
    assert config.api_host == "header.example.com"


def test_cli_overrides_headers(clean_env):
    loader = ConfigLoader(cli_token="cli-token", cli_host="cli.example.com")
    config = loader.load(http_token="header-token", http_host="header.example.com")
    assert config.api_token == "cli-token"
    assert config.api_host == "cli.example.com"


def test_sources_are_resolved_independently(clean_env):
    clean_env.setenv("NETBIRD_HOST", "env.example.com")
    config = ConfigLoader(cli_token="cli-token").load(http_host=None)
    assert config.api_token == "cli-token"
    assert config.api_host == "env.example.com"


@pytest.mark.parametrize("source", ["cli", "header", "env"])
def test_protocol_prefix_is_stripped(clean_env, source):
    host = "https://nb.example.com"
    if source == "cli":
        loader, kwargs = ConfigLoader(cli_host=host), {}
    elif source == "header":
        loader, kwargs = ConfigLoader(), {"http_host": host}
    else:
        clean_env.setenv("NETBIRD_HOST", host)
        loader, kwargs = ConfigLoader(), {}

    assert loader.load(**kwargs).api_host == "nb.example.com"


def test_strip_protocol_prefix():
    assert strip_protocol_prefix("http://a.b") == "a.b"
    assert strip_protocol_prefix("https://a.b") == "a.b"
    assert strip_protocol_prefix("a.b") == "a.b"


def test_resolve_reads_headers_case_insensitively(clean_env):
    config = ConfigLoader().resolve({"X-Netbird-API-Token": "t", "X-Netbird-Host": "h.example.com"})
    assert config.api_token == "t"
    assert config.api_host == "h.example.com"


def test_resolve_without_token_returns_empty_token(clean_env, caplog):
    with caplog.at_level(logging.WARNING):
        config = ConfigLoader().resolve({})
    assert config.api_token == ""
    assert config.api_host == DEFAULT_NETBIRD_HOST
    assert "Missing NetBird API token" in caplog.text


def test_resolve_keeps_invalid_host_and_warns(clean_env, caplog):
    with caplog.at_level(logging.WARNING):
        config = ConfigLoader(cli_token="t").resolve({"x-netbird-host": "bad host"})
    assert config.api_host == "bad host"
    assert "Configuration validation failed" in caplog.text


def test_resolve_never_logs_token(clean_env, caplog):
    with caplog.at_level(logging.DEBUG):
        ConfigLoader(cli_token="super-secret").resolve({"x-netbird-host": "bad host"})
    assert "super-secret" not in caplog.text


def test_validate_accepts_valid_config():
    validate_config(NetbirdConfig(api_token="t", api_host="api.netbird.io"))
    validate_config(NetbirdConfig(api_token="t", api_host="localhost:8080"))


@pytest.mark.parametrize(
    "token, host, expected",
    [
        ("", "api.netbird.io", "API token is required but not provided"),
        ("   ", "api.netbird.io", "API token cannot be empty or whitespace-only"),
        ("t", "", "API host is required but not provided"),
        ("t", "  ", "API host cannot be empty or whitespace-only"),
        ("t", "https://api.netbird.io", "should not contain protocol prefix"),
        ("t", "api netbird.io", "contains spaces"),
        ("t", "api.netbird.io/<x>", "contains invalid character '<'"),
        ("t", "api|netbird", "contains invalid character '|'"),
        ("t", "___", "no valid hostname characters"),
    ],
)
def test_validate_rejects_invalid_config(token, host, expected):
    with pytest.raises(ConfigError) as exc:
        validate_config(NetbirdConfig(api_token=token, api_host=host))
    assert expected in str(exc.value)
