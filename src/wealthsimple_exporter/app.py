"""
Runtime assembly helpers.

Purpose:
- Keep wiring logic (settings -> client -> session -> poller/server) in one place.
- Make it easy to trace how a prompt answer becomes a gauge value.

Logic flow:
1) main() loads and validates settings, then configures logging.
2) Credentials are prompted once and kept in memory.
3) build_exporter() creates the HTTP client, endpoints, session and metrics.
4) The first login happens before the metrics server starts; a failure
   there is fatal.
5) The server thread starts and the poll loop takes over the main thread.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
import logging

from .config import ExporterSettings, load_settings
from .endpoints.accounts import AccountsAPI
from .endpoints.oauth import OAuthAPI
from .errors import WealthsimpleError
from .http import WealthsimpleHttpClient
from .logging_config import setup_logging
from .metrics import AccountMetrics
from .poller import AccountPoller
from .prompts import Credentials, prompt_credentials, prompt_otp_code
from .server import MetricsServer
from .session import SessionManager
from .validation import validate_settings

logger = logging.getLogger(__name__)


@dataclass
class Exporter:
    """
    Fully wired exporter components.
    """

    settings: ExporterSettings
    http_client: WealthsimpleHttpClient
    session: SessionManager
    metrics: AccountMetrics
    poller: AccountPoller
    server: MetricsServer


def build_http_client(settings: ExporterSettings) -> WealthsimpleHttpClient:
    return WealthsimpleHttpClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.request_timeout_seconds,
        debug_logging=settings.debug_http,
    )


def build_exporter(
    settings: ExporterSettings,
    credentials: Credentials,
    *,
    otp_provider: Callable[[], str] = prompt_otp_code,
    metrics: AccountMetrics | None = None,
) -> Exporter:
    """
    Create every component for one exporter process without doing any I/O
    beyond binding the metrics socket.
    """

    http_client = build_http_client(settings)
    session = SessionManager(
        OAuthAPI(http_client),
        credentials.username,
        credentials.password,
        otp_provider,
    )
    metrics = metrics if metrics is not None else AccountMetrics()
    poller = AccountPoller(
        session,
        AccountsAPI(http_client),
        metrics,
        interval_seconds=settings.poll_interval_seconds,
    )
    server = MetricsServer(
        metrics,
        host=settings.metrics_host,
        port=settings.metrics_port,
        path=settings.metrics_path,
    )
    return Exporter(
        settings=settings,
        http_client=http_client,
        session=session,
        metrics=metrics,
        poller=poller,
        server=server,
    )


def run_exporter(exporter: Exporter, *, iterations: int | None = None) -> None:
    """
    Log in, start serving, then poll until an unrecoverable error.
    """

    try:
        exporter.session.login()
        exporter.server.start()
        exporter.poller.run(iterations=iterations)
    finally:
        exporter.server.stop()
        exporter.http_client.close()


def main(config_path: str | None = None) -> int:
    """
    Console entry point. Returns a process exit code.
    """

    try:
        settings = load_settings(config_path)
    except (OSError, ValueError) as exc:
        setup_logging()
        logger.error("Could not load settings: %s", exc)
        return 1
    setup_logging(settings.log_level, json_output=settings.json_logs)

    warnings = validate_settings(settings)
    if warnings:
        logger.error("Invalid settings: %s", "; ".join(warnings))
        return 1

    try:
        credentials = prompt_credentials()
        exporter = build_exporter(settings, credentials)
        run_exporter(exporter)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 130
    except (WealthsimpleError, OSError, ValueError):
        logger.exception("Exporter stopped")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
