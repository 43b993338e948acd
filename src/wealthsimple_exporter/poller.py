"""
Fixed-interval account poller.

Purpose:
- Fetch GET /accounts with the live bearer and push balances into gauges.
- Re-authenticate transparently when the bearer expires.

Logic flow (AccountPoller.run):
1) poll_once() with the current bearer.
2) OK -> record each snapshot, sleep interval_seconds, next cycle.
3) REAUTH_REQUIRED -> re-login and retry immediately (no sleep, no cap).
4) FATAL -> raise UnexpectedStatus; TransportError propagates as is.

Notes:
- A failing auth service makes step 3 spin without delay. This matches the
  behaviour the exporter has always had; see DESIGN.md.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import logging
import time

from .config import DEFAULT_POLL_INTERVAL_SECONDS
from .endpoints.accounts import AccountsAPI
from .errors import AuthenticationFailed, ReauthRequired, UnexpectedStatus
from .http import decode_json
from .metrics import AccountMetrics
from .models import AccountSnapshot, parse_accounts_response
from .session import SessionManager

logger = logging.getLogger(__name__)


class PollStatus(str, Enum):
    OK = "ok"
    REAUTH_REQUIRED = "reauth_required"
    FATAL = "fatal"


@dataclass(frozen=True)
class PollResult:
    """
    Outcome of a single accounts request.
    """

    status: PollStatus
    snapshots: list[AccountSnapshot] = field(default_factory=list)
    http_status: int | None = None
    body: str | None = None


def poll_once(accounts: AccountsAPI, bearer: str) -> PollResult:
    """
    Fetch and classify one accounts response.

    Outputs:
    - OK with snapshots on 200.
    - REAUTH_REQUIRED on 401 (bearer stale).
    - FATAL with status/body for anything else.
    """

    response = accounts.list_accounts(bearer)
    if response.status_code == 200:
        snapshots = parse_accounts_response(decode_json(response))
        return PollResult(status=PollStatus.OK, snapshots=snapshots, http_status=200)
    if response.status_code == 401:
        return PollResult(
            status=PollStatus.REAUTH_REQUIRED, http_status=401, body=response.text
        )
    return PollResult(
        status=PollStatus.FATAL, http_status=response.status_code, body=response.text
    )


class AccountPoller:
    """
    Sequential poll loop bound to one session and one metrics registry.
    """

    def __init__(
        self,
        session: SessionManager,
        accounts: AccountsAPI,
        metrics: AccountMetrics,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._session = session
        self._accounts = accounts
        self._metrics = metrics
        self._interval_seconds = interval_seconds
        self._sleep = sleep
        self.cycles = 0
        self.reauths = 0

    def _reauthenticate(self) -> None:
        self.reauths += 1
        self._session.invalidate()
        try:
            self._session.login()
        except AuthenticationFailed as exc:
            # Credentials are still in memory; the next pass tries again.
            logger.error("Re-login failed, retrying: %s", exc)

    def _current_bearer(self) -> str | None:
        try:
            return self._session.bearer
        except ReauthRequired:
            return None

    def run_cycle(self) -> list[AccountSnapshot]:
        """
        Run one poll cycle to completion, re-authenticating as often as needed.

        Does not sleep; run() owns the interval.
        """

        while True:
            bearer = self._current_bearer()
            if bearer is None:
                self._reauthenticate()
                continue

            result = poll_once(self._accounts, bearer)
            if result.status is PollStatus.REAUTH_REQUIRED:
                logger.warning("got 401, need to log in again: %s", result.body)
                self._reauthenticate()
                continue
            if result.status is PollStatus.FATAL:
                raise UnexpectedStatus(result.http_status or 0, result.body)

            for snapshot in result.snapshots:
                self._metrics.record(snapshot)
            self.cycles += 1
            logger.info("Updated balances for %d account(s)", len(result.snapshots))
            return result.snapshots

    def run(self, iterations: int | None = None) -> None:
        """
        Poll forever (or for `iterations` completed cycles), sleeping between.
        """

        count = 0
        while iterations is None or count < iterations:
            self.run_cycle()
            count += 1
            self._sleep(self._interval_seconds)
