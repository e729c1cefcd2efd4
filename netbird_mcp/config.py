"""
NetBird MCP Server Configuration
Resolves the NetBird API token and host for a single request.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_NETBIRD_HOST = "api.netbird.io"
NETBIRD_API_PATH = "/api"

NETBIRD_HOST_ENV_VAR = "NETBIRD_HOST"
NETBIRD_TOKEN_ENV_VAR = "NETBIRD_API_TOKEN"

TOKEN_HEADER = "x-netbird-api-token"
HOST_HEADER = "x-netbird-host"

_INVALID_HOST_CHARS = ["<", ">", '"', "{", "}", "|", "\\", "^", "`"]
_VALID_HOST_CHARS = set(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-:/"
)


class ConfigError(ValueError):
    """Raised when a resolved configuration is not usable."""


class NetbirdConfig(BaseModel):
    """API credentials for one tool invocation."""
    api_token: str = Field("", description="NetBird personal access token")
    api_host: str = Field(DEFAULT_NETBIRD_HOST, description="NetBird API host without protocol")

    @property
    def base_url(self) -> str:
        return f"https://{self.api_host}{NETBIRD_API_PATH}"


def strip_protocol_prefix(host: str) -> str:
    """Remove a leading http:// or https:// from a host."""
    for prefix in ("http://", "https://"):
        if host.startswith(prefix):
            return host[len(prefix):]
    return host


def validate_config(config: NetbirdConfig) -> None:
    """
    Validate a resolved configuration.

    Raises:
        ConfigError: describing the first problem found
    """
    if config.api_token == "":
        raise ConfigError("API token is required but not provided")
    if config.api_token.strip() == "":
        raise ConfigError("API token cannot be empty or whitespace-only")

    host = config.api_host
    if host == "":
        raise ConfigError("API host is required but not provided")
    if host.strip() == "":
        raise ConfigError("API host cannot be empty or whitespace-only")
    if host.startswith("http://") or host.startswith("https://"):
        raise ConfigError(
            f"API host '{host}' should not contain protocol prefix (http:// or https://)"
        )
    if " " in host:
        raise ConfigError(f"API host '{host}' is not a valid URL format: contains spaces")
    for char in _INVALID_HOST_CHARS:
        if char in host:
            raise ConfigError(
                f"API host '{host}' is not a valid URL format: contains invalid character '{char}'"
            )
    if not any(char in _VALID_HOST_CHARS for char in host):
        raise ConfigError(
            f"API host '{host}' is not a valid URL format: no valid hostname characters"
        )


class ConfigLoader:
    """
    Builds a NetbirdConfig from its sources.

    Priority, highest first: CLI arguments, HTTP headers, environment
    variables, then the default host. The loader only holds the CLI values;
    headers and environment are read for each call so every request gets
    its own configuration.
    """

    def __init__(self, cli_token: Optional[str] = None, cli_host: Optional[str] = None):
        self.cli_token = cli_token or ""
        self.cli_host = cli_host or ""

    def load(self, http_token: Optional[str] = None, http_host: Optional[str] = None) -> NetbirdConfig:
        if self.cli_token:
            token = self.cli_token
        elif http_token:
            token = http_token
        else:
            token = os.getenv(NETBIRD_TOKEN_ENV_VAR, "")

        if self.cli_host:
            host = strip_protocol_prefix(self.cli_host)
        elif http_host:
            host = strip_protocol_prefix(http_host)
        else:
            env_host = os.getenv(NETBIRD_HOST_ENV_VAR, "")
            host = strip_protocol_prefix(env_host) if env_host else DEFAULT_NETBIRD_HOST

        return NetbirdConfig(api_token=token, api_host=host)

    def resolve(self, headers: Optional[dict] = None) -> NetbirdConfig:
        """
        Load the configuration for a request and log validation problems.

        An invalid configuration is still returned; the API call made with it
        reports the actual failure. A missing token resolves to an empty one.
        """
        normalized = {k.lower(): v for k, v in (headers or {}).items()}
        config = self.load(normalized.get(TOKEN_HEADER), normalized.get(HOST_HEADER))

        try:
            validate_config(config)
        except ConfigError as e:
            if config.api_token.strip() == "":
                logger.warning("Missing NetBird API token from all sources")
                return NetbirdConfig(api_token="", api_host=config.api_host)
            logger.warning(f"Configuration validation failed: {e}")
        return config
