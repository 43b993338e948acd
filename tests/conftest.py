import pytest

from wealthsimple_exporter import config


class FakeResponse:
    """
    Stand-in for requests.Response with just what the package reads.
    """

    def __init__(self, status_code, payload=None, *, text=None, headers=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))
        self.headers = headers or {}
        self.url = "https://example.com/v1/accounts"

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


@pytest.fixture
def account_payload():
    return {
        "object": "account",
        "id": "A1",
        "type": "investment",
        "nickname": None,
        "base_currency": "CAD",
        "status": "open",
        "total_deposits": {"amount": "1000.50", "currency": "CAD"},
        "total_withdrawals": {"amount": "0", "currency": "CAD"},
        "net_liquidation": {"amount": "1050.25", "currency": "CAD"},
        "gross_position": {"amount": "1050.25", "currency": "CAD"},
    }


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch):
    for key in list(config.ENV_VARS.values()) + [config.CONFIG_PATH_ENV]:
        monkeypatch.delenv(key, raising=False)
    # Never pick up a developer's local .env during tests.
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    yield


@pytest.fixture
def fake_response():
    return FakeResponse
