"""
Session manager: password login with optional app-based OTP challenge.

Purpose:
- Produce a bearer credential ("Bearer <token>") for the accounts endpoint.
- Cache the OTP bypass claim so later re-logins skip the challenge.

Logic flow (authenticate):
1) POST /oauth/token with the password-grant payload (+ cached claim).
2) 200 -> return bearer, claim unchanged.
3) 401 with "x-wealthsimple-otp: required; method=app" -> ask the injected
   otp_provider for a code once, resend with code + device id.
   - 200 -> return bearer + new claim from the response headers.
   - anything else -> AuthenticationFailed.
4) Any other status -> AuthenticationFailed.

State (SessionManager, across the process lifetime):
- UNAUTHENTICATED -> login() -> AUTHENTICATED -> invalidate() -> ...
- The device id is generated once and never changes.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable
import logging
import uuid

from .endpoints.oauth import OAuthAPI, OTP_CLAIM_HEADER, OTP_HEADER, build_login_payload
from .errors import AuthenticationFailed, ReauthRequired, TransportError
from .http import decode_json

logger = logging.getLogger(__name__)

OTP_REQUIRED_APP = "required; method=app"

OtpProvider = Callable[[], str]


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


def _bearer_from(response) -> str:
    payload = decode_json(response)
    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        raise TransportError("Login response did not include an access_token.")
    return f"Bearer {token}"


def authenticate(
    oauth: OAuthAPI,
    username: str,
    password: str,
    device_id: str,
    cached_claim: str | None,
    otp_provider: OtpProvider,
) -> tuple[str, str | None]:
    """
    Log in and return (bearer, otp_claim).

    Inputs:
    - oauth: token endpoint wrapper.
    - username/password: supplied once by the credential source.
    - device_id: stable per-process identifier, sent with OTP answers.
    - cached_claim: bypass claim from an earlier OTP success, or None.
    - otp_provider: called at most once, only when the server asks for a code.

    Outputs:
    - bearer credential and the claim to keep for the next login.
    """

    payload = build_login_payload(username, password)
    response = oauth.request_token(payload, otp_claim=cached_claim)

    if response.status_code == 200:
        return _bearer_from(response), cached_claim

    if (
        response.status_code == 401
        and response.headers.get(OTP_HEADER) == OTP_REQUIRED_APP
    ):
        logger.info("Login requires an app OTP code")
        code = otp_provider().strip()
        retry = oauth.request_token(payload, otp_code=code, device_id=device_id)
        if retry.status_code != 200:
            raise AuthenticationFailed(
                "Failed to log in after 2fa",
                status=retry.status_code,
                headers=retry.headers,
                body=retry.text,
            )
        bearer = _bearer_from(retry)
        claim = retry.headers.get(OTP_CLAIM_HEADER)
        if claim is None:
            logger.warning("OTP login succeeded without a %s header", OTP_CLAIM_HEADER)
            claim = cached_claim
        return bearer, claim

    raise AuthenticationFailed(
        "Failed to log in",
        status=response.status_code,
        headers=response.headers,
        body=response.text,
    )


class SessionManager:
    """
    Holds the one live session and the inputs needed to renew it.

    Credentials stay in memory only; nothing here is persisted.
    """

    def __init__(
        self,
        oauth: OAuthAPI,
        username: str,
        password: str,
        otp_provider: OtpProvider,
        *,
        device_id: str | None = None,
    ) -> None:
        self._oauth = oauth
        self._username = username
        self._password = password
        self._otp_provider = otp_provider
        self._device_id = device_id or uuid.uuid4().hex
        self._otp_claim: str | None = None
        self._bearer: str | None = None
        self.logins = 0

    @property
    def device_id(self) -> str:
        return self._device_id

    @property
    def otp_claim(self) -> str | None:
        return self._otp_claim

    @property
    def state(self) -> SessionState:
        if self._bearer is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def bearer(self) -> str:
        if self._bearer is None:
            raise ReauthRequired()
        return self._bearer

    def login(self) -> str:
        """
        Run authenticate() with the retained credentials and cached claim.

        The previous bearer is replaced wholesale; on failure the session
        stays unauthenticated.
        """

        self._bearer = None
        logger.info(
            "Logging in as %s (otp claim cached: %s)",
            self._username,
            self._otp_claim is not None,
        )
        bearer, claim = authenticate(
            self._oauth,
            self._username,
            self._password,
            self._device_id,
            self._otp_claim,
            self._otp_provider,
        )
        self._bearer = bearer
        self._otp_claim = claim
        self.logins += 1
        logger.info("Login succeeded (login #%d this process)", self.logins)
        return bearer

    def invalidate(self) -> None:
        self._bearer = None
