from __future__ import annotations

import pytest
import requests

from wealthsimple_exporter.metrics import AccountMetrics
from wealthsimple_exporter.models import parse_account
from wealthsimple_exporter.server import MetricsServer


@pytest.fixture
def running_server(account_payload):
    metrics = AccountMetrics()
    account_payload["nickname"] = "RRSP"
    metrics.record(parse_account(account_payload))
    server = MetricsServer(metrics, host="127.0.0.1", port=0)
    server.start()
    host, port = server.address
    yield server, f"http://{host}:{port}"
    server.stop()


def test_metrics_path_serves_exposition(running_server) -> None:
    _, base = running_server
    response = requests.get(f"{base}/metrics", timeout=5)
    assert response.status_code == 200
    assert response.headers["Content-Type"].startswith("text/plain")
    assert "# HELP wealthsimple_deposited the total amount deposited" in response.text
    assert 'account_name="RRSP"' in response.text


def test_other_paths_return_empty_404(running_server) -> None:
    _, base = running_server
    response = requests.get(f"{base}/other", timeout=5)
    assert response.status_code == 404
    assert response.content == b""


def test_encoding_failure_returns_empty_500(running_server, monkeypatch) -> None:
    server, base = running_server

    def broken() -> bytes:
        raise RuntimeError("boom")

    monkeypatch.setattr(server.metrics, "render", broken)
    response = requests.get(f"{base}/metrics", timeout=5)
    assert response.status_code == 500
    assert response.content == b""
