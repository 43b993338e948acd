"""
HTTP client wrapper for the Wealthsimple private API.

Purpose:
- Provide a single place to manage base URL, user agent and timeouts.
- Keep endpoint modules focused on URL paths, headers and payloads.

Logic flow:
1) The caller instantiates WealthsimpleHttpClient with a base_url.
2) Endpoint methods call request(method, path, ...).
3) request() builds the full URL, merges headers, and delegates to requests.
4) The raw Response is returned; status handling belongs to the caller
   because 401 carries meaning for both login and polling.

Tracing notes:
- Network failures are re-raised as TransportError so the outer loop only
  has to know about this package's error types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
import logging

import requests

from .config import DEFAULT_API_BASE_URL, DEFAULT_USER_AGENT
from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class WealthsimpleHttpClient:
    """
    Minimal HTTP client that handles base URL + common headers.
    """

    base_url: str = DEFAULT_API_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: int = 30
    debug_logging: bool = False

    def __post_init__(self) -> None:
        self._session = requests.Session()

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> requests.Response:
        """
        Send a single HTTP request and return the response untouched.

        Inputs:
        - method: HTTP method (GET, POST).
        - path: endpoint path relative to base_url (e.g., /accounts).
        - headers: extra headers; User-Agent is always set.
        - json_body: JSON payload for POST requests.

        Outputs:
        - requests.Response (status is NOT checked here).
        """

        url = f"{self.base_url.rstrip('/')}{path}"
        merged = {"User-Agent": self.user_agent}
        if headers:
            merged.update(headers)

        if self.debug_logging:
            logger.info("HTTP %s %s", method.upper(), url)
        try:
            response = self._session.request(
                method=method.upper(),
                url=url,
                json=json_body,
                headers=merged,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method.upper()} {url} failed: {exc}") from exc
        if self.debug_logging:
            logger.info("HTTP %s %s -> %s", method.upper(), url, response.status_code)
        return response

    def close(self) -> None:
        self._session.close()


def decode_json(response: requests.Response) -> Any:
    """
    Decode a response body, mapping malformed payloads to TransportError.
    """

    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(
            f"Malformed JSON from {response.url} (HTTP {response.status_code})"
        ) from exc
