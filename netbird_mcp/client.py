"""
NetBird REST client
Thin authenticated wrapper over the NetBird management API.
"""

import logging
import os
from typing import Any, Optional

import requests

from .config import NetbirdConfig
from .errors import NetbirdAPIError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _default_timeout() -> float:
    try:
        return float(os.getenv("NETBIRD_TIMEOUT", DEFAULT_TIMEOUT))
    except ValueError:
        return DEFAULT_TIMEOUT


class NetbirdClient:
    """Performs GET/POST/PUT/DELETE calls against ``https://<host>/api``."""

    def __init__(
        self,
        config: NetbirdConfig,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.api_token = config.api_token
        self.base_url = (base_url or config.base_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else _default_timeout()

    def _request(self, method: str, path: str, body: Any = None) -> Any:
        if not self.api_token:
            raise NetbirdAPIError("netbird API token not found in context")

        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Token {self.api_token}", "Accept": "application/json"}
        kwargs = {}
        if body is not None:
            headers["Content-Type"] = "application/json"
            kwargs["json"] = body

        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise NetbirdAPIError(f"making request: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            raise NetbirdAPIError(
                f"unexpected status code: {response.status_code}, body: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise NetbirdAPIError(f"decoding response: {e}", status_code=response.status_code) from e

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def post(self, path: str, body: Any = None) -> Any:
        return self._request("POST", path, body)

    def put(self, path: str, body: Any = None) -> Any:
        return self._request("PUT", path, body)

    def delete(self, path: str) -> None:
        self._request("DELETE", path)
