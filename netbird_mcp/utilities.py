"""
NetBird MCP Server Utilities
Common utility functions for the NetBird MCP server.
"""

import logging
import os
from typing import Dict, Optional

from fastmcp.server.dependencies import get_access_token, get_http_headers

from .client import NetbirdClient
from .config import ConfigLoader

logger = logging.getLogger(__name__)


def parse_boolean_env_var(env_var_name: str, default: bool = False) -> bool:
    """
    Parse environment variable as boolean with multiple formats supported.

    Args:
        env_var_name: Name of the environment variable
        default: Default value if environment variable is not set

    Returns:
        Boolean value of the environment variable
    """
    val = os.getenv(env_var_name, '').lower().strip()
    return val in ['true', '1', 'yes', 't', 'y'] if val else default


def log_user_access(tool_name: str) -> None:
    """Log which authenticated user called a tool when ENABLE_AUTH_LOGGING is set."""
    if not parse_boolean_env_var("ENABLE_AUTH_LOGGING"):
        return

    try:
        token = get_access_token()
    except RuntimeError:
        # no HTTP request (stdio)
        return
    claims = getattr(token, "claims", None) or {}
    if claims:
        name = claims.get("name") or claims.get("preferred_username")
        email = claims.get("email") or claims.get("upn")
        logger.info(f"[NETBIRD] Tool '{tool_name}' accessed by user: {name} ({email})")


def get_request_headers() -> Dict[str, str]:
    """Headers of the current HTTP request; empty under stdio."""
    return get_http_headers(include_all=True) or {}


def get_netbird_client(loader: ConfigLoader, headers: Optional[Dict[str, str]] = None) -> NetbirdClient:
    """
    Build a client for the current request.

    Args:
        loader: Holds the CLI-supplied token and host
        headers: Request headers; read from the active request when omitted

    Returns:
        NetbirdClient configured from CLI, headers, environment or defaults
    """
    if headers is None:
        headers = get_request_headers()
    return NetbirdClient(loader.resolve(headers))


def configure_auth():
    """
    Configure JWT authentication for the HTTP transports.

    Auth is enabled when AUTH_JWKS_URI and AUTH_ISSUER are both set, unless
    DISABLE_JWT_AUTH is true. AUTH_AUDIENCE is optional.

    Returns:
        Configured authentication provider or None if authentication is disabled
    """
    from fastmcp.server.auth.providers.jwt import JWTVerifier

    if parse_boolean_env_var('DISABLE_JWT_AUTH'):
        logger.info("JWT authentication disabled by DISABLE_JWT_AUTH=true")
        return None

    jwks_uri = os.getenv('AUTH_JWKS_URI')
    issuer = os.getenv('AUTH_ISSUER')
    audience = os.getenv('AUTH_AUDIENCE')

    if not jwks_uri and not issuer:
        logger.info("JWT authentication not configured (AUTH_JWKS_URI/AUTH_ISSUER unset)")
        return None

    if not jwks_uri or not issuer:
        error_msg = "JWT authentication requires both AUTH_JWKS_URI and AUTH_ISSUER. Set DISABLE_JWT_AUTH=true to explicitly disable authentication."
        logger.error(error_msg)
        raise ValueError(error_msg)

    logger.info(f"Configuring JWT verification for issuer {issuer}")
    if not audience:
        logger.warning("AUTH_AUDIENCE not set - audience validation will be skipped")

    return JWTVerifier(
        jwks_uri=jwks_uri,
        issuer=issuer,
        audience=audience  # Can be None - FastMCP will skip audience validation
    )
