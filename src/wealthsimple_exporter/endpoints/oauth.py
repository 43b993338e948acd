"""
OAuth token endpoint (Wealthsimple v1).

Included routes:
- POST /oauth/token

Logic flow:
1) build_login_payload() assembles the password-grant body.
2) request_token() posts it with the optional OTP headers.
3) session.authenticate() interprets the status and headers.
"""

from __future__ import annotations

import requests

from ..http import WealthsimpleHttpClient

TOKEN_PATH = "/oauth/token"
OAUTH_SCOPE = "invest.read mfda.read mercer.read trade.read"
OAUTH_CLIENT_ID = "4da53ac2b03225bed1550eba8e4611e086c7b905a3855e6ed12ea08c246758fa"
GRANT_TYPE = "password"

OTP_HEADER = "x-wealthsimple-otp"
OTP_CLAIM_HEADER = "x-wealthsimple-otp-claim"
DEVICE_ID_HEADER = "x-ws-device-id"


def build_login_payload(username: str, password: str) -> dict[str, str]:
    return {
        "username": username,
        "password": password,
        "scope": OAUTH_SCOPE,
        "grant_type": GRANT_TYPE,
        "client_id": OAUTH_CLIENT_ID,
    }


class OAuthAPI:
    """
    Endpoint grouping for token issuance.
    """

    def __init__(self, client: WealthsimpleHttpClient) -> None:
        self._client = client

    def request_token(
        self,
        payload: dict[str, str],
        *,
        otp_claim: str | None = None,
        otp_code: str | None = None,
        device_id: str | None = None,
    ) -> requests.Response:
        """
        POST /oauth/token

        Inputs:
        - payload: output of build_login_payload().
        - otp_claim: cached bypass claim from an earlier OTP success.
        - otp_code/device_id: sent together when answering an OTP challenge.

        Outputs:
        - Raw response (200 with access_token, or 401 with OTP hints).
        """

        headers = {"Accept": "application/json"}
        if otp_claim:
            headers[OTP_CLAIM_HEADER] = otp_claim
        if otp_code is not None:
            headers[OTP_HEADER] = f"{otp_code};remember=true"
        if device_id is not None:
            headers[DEVICE_ID_HEADER] = device_id
        return self._client.request("POST", TOKEN_PATH, headers=headers, json_body=payload)
