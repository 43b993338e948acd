from __future__ import annotations

import json

import pytest
import responses

from wealthsimple_exporter.endpoints.oauth import OAuthAPI
from wealthsimple_exporter.errors import AuthenticationFailed, ReauthRequired, TransportError
from wealthsimple_exporter.http import WealthsimpleHttpClient
from wealthsimple_exporter.session import SessionManager, SessionState, authenticate

TOKEN_URL = "https://example.com/v1/oauth/token"
OTP_REQUIRED = {"x-wealthsimple-otp": "required; method=app"}


class ScriptedOtp:
    def __init__(self, code: str = "123456") -> None:
        self.code = code
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return self.code


@pytest.fixture
def oauth() -> OAuthAPI:
    return OAuthAPI(WealthsimpleHttpClient(base_url="https://example.com/v1"))


@responses.activate
def test_authenticate_success_returns_bearer_and_keeps_claim(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, json={"access_token": "tok123"}, status=200)
    otp = ScriptedOtp()

    bearer, claim = authenticate(oauth, "u", "p", "dev", "old-claim", otp)

    assert bearer == "Bearer tok123"
    assert claim == "old-claim"
    assert otp.calls == 0
    request = responses.calls[0].request
    assert request.headers["x-wealthsimple-otp-claim"] == "old-claim"
    body = json.loads(request.body)
    assert body["grant_type"] == "password"
    assert body["username"] == "u"


@responses.activate
def test_authenticate_otp_challenge_prompts_once(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, status=401, headers=OTP_REQUIRED, json={})
    responses.add(
        responses.POST,
        TOKEN_URL,
        status=200,
        json={"access_token": "tok456"},
        headers={"x-wealthsimple-otp-claim": "new-claim"},
    )
    otp = ScriptedOtp("654321")

    bearer, claim = authenticate(oauth, "u", "p", "dev-1", None, otp)

    assert bearer == "Bearer tok456"
    assert claim == "new-claim"
    assert otp.calls == 1
    assert len(responses.calls) == 2
    retry = responses.calls[1].request
    assert retry.headers["x-wealthsimple-otp"] == "654321;remember=true"
    assert retry.headers["x-ws-device-id"] == "dev-1"
    assert json.loads(retry.body) == json.loads(responses.calls[0].request.body)


@responses.activate
def test_authenticate_otp_retry_failure_raises(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, status=401, headers=OTP_REQUIRED, json={})
    responses.add(responses.POST, TOKEN_URL, status=401, body="bad code")
    otp = ScriptedOtp()

    with pytest.raises(AuthenticationFailed) as excinfo:
        authenticate(oauth, "u", "p", "dev", None, otp)

    assert excinfo.value.body == "bad code"
    assert otp.calls == 1
    assert len(responses.calls) == 2


@responses.activate
def test_authenticate_plain_401_fails_without_prompt(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, status=401, body="invalid credentials")
    otp = ScriptedOtp()

    with pytest.raises(AuthenticationFailed) as excinfo:
        authenticate(oauth, "u", "p", "dev", None, otp)

    assert excinfo.value.status == 401
    assert otp.calls == 0
    assert len(responses.calls) == 1


@responses.activate
def test_authenticate_other_status_fails(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, status=503, body="down")
    with pytest.raises(AuthenticationFailed) as excinfo:
        authenticate(oauth, "u", "p", "dev", None, ScriptedOtp())
    assert excinfo.value.status == 503
    assert "down" in str(excinfo.value)


@responses.activate
def test_authenticate_missing_token_is_transport_error(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, status=200, json={"token_type": "bearer"})
    with pytest.raises(TransportError):
        authenticate(oauth, "u", "p", "dev", None, ScriptedOtp())


@responses.activate
def test_session_manager_reuses_claim_and_device_id(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, status=401, headers=OTP_REQUIRED, json={})
    responses.add(
        responses.POST,
        TOKEN_URL,
        status=200,
        json={"access_token": "first"},
        headers={"x-wealthsimple-otp-claim": "claim-1"},
    )
    responses.add(responses.POST, TOKEN_URL, status=200, json={"access_token": "second"})
    otp = ScriptedOtp()
    session = SessionManager(oauth, "u", "p", otp)
    device_id = session.device_id

    assert session.state is SessionState.UNAUTHENTICATED
    with pytest.raises(ReauthRequired):
        session.bearer

    assert session.login() == "Bearer first"
    assert session.otp_claim == "claim-1"
    session.invalidate()
    assert session.state is SessionState.UNAUTHENTICATED

    assert session.login() == "Bearer second"
    assert session.state is SessionState.AUTHENTICATED
    assert session.device_id == device_id
    assert otp.calls == 1
    assert session.logins == 2
    assert responses.calls[2].request.headers["x-wealthsimple-otp-claim"] == "claim-1"


@responses.activate
def test_session_manager_stays_unauthenticated_on_failure(oauth: OAuthAPI) -> None:
    responses.add(responses.POST, TOKEN_URL, status=403, body="locked")
    session = SessionManager(oauth, "u", "p", ScriptedOtp(), device_id="fixed")
    with pytest.raises(AuthenticationFailed):
        session.login()
    assert session.state is SessionState.UNAUTHENTICATED
    assert session.device_id == "fixed"
