"""
Error taxonomy for the exporter.

Purpose:
- Give callers a closed set of failure types so recoverable outcomes
  (ReauthRequired) are distinguishable from fatal ones.

Propagation:
- AuthenticationFailed: raised by session.authenticate(); fatal at startup,
  retried by the poller when it happens during a mid-loop re-login.
- ReauthRequired: raised when a bearer is requested from an
  unauthenticated session.
- TransportError: wraps requests failures and malformed payloads; fatal.
- UnexpectedStatus: accounts endpoint returned something other than 200/401.
"""

from __future__ import annotations

from typing import Mapping


class WealthsimpleError(Exception):
    """
    Base class for every error raised by this package.
    """


class AuthenticationFailed(WealthsimpleError):
    """
    Login or OTP challenge was rejected by the server.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        headers: Mapping[str, str] | None = None,
        body: str | None = None,
    ) -> None:
        self.status = status
        self.headers = dict(headers) if headers is not None else {}
        self.body = body
        detail = message
        if status is not None:
            detail = f"{detail} (HTTP {status})"
        if body:
            detail = f"{detail}: {body}"
        super().__init__(detail)


class ReauthRequired(WealthsimpleError):
    """
    The current bearer credential is stale or missing.
    """

    def __init__(self, body: str | None = None) -> None:
        self.body = body
        message = "Session expired, re-authentication required"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class TransportError(WealthsimpleError):
    """
    Network-level failure or a response that could not be decoded.
    """


class UnexpectedStatus(WealthsimpleError):
    """
    The accounts endpoint answered with a status the poller cannot handle.
    """

    def __init__(self, status: int, body: str | None = None) -> None:
        self.status = status
        self.body = body
        super().__init__(f"Request failed with HTTP {status}: {body or ''}")
