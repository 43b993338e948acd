"""
Account balance gauges.

Purpose:
- Hold the four per-account gauge families in an explicit registry that is
  shared by the poller (single writer) and the metrics server (readers).
- Render the registry in the Prometheus text exposition format.

Notes:
- prometheus_client locks each value individually; a scrape may see one
  family updated for an account before the others.
- Label sets are never removed. Accounts that vanish from the API keep
  their last values until the process restarts.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from .models import AccountSnapshot

LABELS = ("account_id", "account_type", "account_name")

DEPOSITED = "wealthsimple_deposited"
WITHDRAWN = "wealthsimple_withdrawn"
NET_LIQUIDATION = "wealthsimple_net_liquidation"
GROSS_POSITION = "wealthsimple_gross_position"


class AccountMetrics:
    """
    Registry wrapper with one Gauge per balance field.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.deposited = Gauge(
            DEPOSITED, "the total amount deposited", LABELS, registry=self.registry
        )
        self.withdrawn = Gauge(
            WITHDRAWN, "the total amount withdrawn", LABELS, registry=self.registry
        )
        self.net_liquidation = Gauge(
            NET_LIQUIDATION,
            "the value of the account if it were to be liquidated",
            LABELS,
            registry=self.registry,
        )
        self.gross_position = Gauge(
            GROSS_POSITION,
            "sum of all positions in the account",
            LABELS,
            registry=self.registry,
        )

    def record(self, snapshot: AccountSnapshot) -> int:
        """
        Push one snapshot's amounts; unparsed amounts are left untouched.

        Returns the number of gauges that were set.
        """

        labels = snapshot.label_values()
        updated = 0
        for gauge, amount in (
            (self.deposited, snapshot.total_deposits),
            (self.withdrawn, snapshot.total_withdrawals),
            (self.net_liquidation, snapshot.net_liquidation),
            (self.gross_position, snapshot.gross_position),
        ):
            if amount.value is None:
                continue
            gauge.labels(*labels).set(float(amount.value))
            updated += 1
        return updated

    def value(self, metric: str, labels: tuple[str, str, str]) -> float | None:
        return self.registry.get_sample_value(metric, dict(zip(LABELS, labels)))

    def render(self) -> bytes:
        return generate_latest(self.registry)
