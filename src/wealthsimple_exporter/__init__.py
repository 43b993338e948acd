"""
Wealthsimple balance exporter.

Logs in to the Wealthsimple private API, polls account balances on a fixed
interval, and serves them as Prometheus gauges. Public names are exported
here so the wiring stays obvious while each module stays small.
"""

from .config import ExporterSettings, load_settings
from .errors import (
    AuthenticationFailed,
    ReauthRequired,
    TransportError,
    UnexpectedStatus,
    WealthsimpleError,
)
from .http import WealthsimpleHttpClient
from .endpoints.accounts import AccountsAPI
from .endpoints.oauth import OAuthAPI
from .models import AccountSnapshot, Amount, parse_accounts_response
from .session import SessionManager, SessionState, authenticate
from .metrics import AccountMetrics
from .server import MetricsServer
from .poller import AccountPoller, PollResult, PollStatus, poll_once
from .validation import validate_settings
from .logging_config import setup_logging
from .app import Exporter, build_exporter, main, run_exporter

__all__ = [
    "ExporterSettings",
    "load_settings",
    "AuthenticationFailed",
    "ReauthRequired",
    "TransportError",
    "UnexpectedStatus",
    "WealthsimpleError",
    "WealthsimpleHttpClient",
    "AccountsAPI",
    "OAuthAPI",
    "AccountSnapshot",
    "Amount",
    "parse_accounts_response",
    "SessionManager",
    "SessionState",
    "authenticate",
    "AccountMetrics",
    "MetricsServer",
    "AccountPoller",
    "PollResult",
    "PollStatus",
    "poll_once",
    "validate_settings",
    "setup_logging",
    "Exporter",
    "build_exporter",
    "main",
    "run_exporter",
]
