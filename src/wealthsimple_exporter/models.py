"""
Typed views of the accounts payload.

Purpose:
- Turn each entry of GET /accounts `results` into an AccountSnapshot.
- Keep parsing forgiving: a bad amount drops that one value, not the cycle.

Notes:
- Only the four balance amounts are interpreted; everything else is passed
  through or ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import TransportError


@dataclass(frozen=True)
class Amount:
    """
    Money amount; value is None when the source string was not numeric.
    """

    value: Decimal | None
    currency: str | None


@dataclass(frozen=True)
class AccountSnapshot:
    """
    One account's balances at poll time.
    """

    account_id: str
    account_type: str
    nickname: str | None
    total_deposits: Amount
    total_withdrawals: Amount
    net_liquidation: Amount
    gross_position: Amount
    base_currency: str | None = None
    status: str | None = None

    def label_values(self) -> tuple[str, str, str]:
        return (self.account_id, self.account_type, self.nickname or "")


def parse_decimal(raw: Any) -> Decimal | None:
    """
    Strict amount parser: no padding, no digit separators, no signaling NaN.
    """

    if raw is None or isinstance(raw, bool):
        return None
    text = str(raw)
    if "_" in text or text != text.strip():
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if value.is_snan():
        return None
    return value


def parse_amount(payload: Any) -> Amount:
    if not isinstance(payload, dict):
        return Amount(value=None, currency=None)
    return Amount(value=parse_decimal(payload.get("amount")), currency=payload.get("currency"))


def parse_account(payload: dict[str, Any]) -> AccountSnapshot:
    """
    Parse one account object into an AccountSnapshot.

    Raises TransportError if the identity fields are missing, since the
    gauges cannot be keyed without them.
    """

    try:
        account_id = str(payload["id"])
        account_type = str(payload["type"])
    except (KeyError, TypeError) as exc:
        raise TransportError(f"Account entry missing identity field: {exc}") from exc

    return AccountSnapshot(
        account_id=account_id,
        account_type=account_type,
        nickname=payload.get("nickname"),
        total_deposits=parse_amount(payload.get("total_deposits")),
        total_withdrawals=parse_amount(payload.get("total_withdrawals")),
        net_liquidation=parse_amount(payload.get("net_liquidation")),
        gross_position=parse_amount(payload.get("gross_position")),
        base_currency=payload.get("base_currency"),
        status=payload.get("status"),
    )


def parse_accounts_response(payload: Any) -> list[AccountSnapshot]:
    """
    Parse the GET /accounts body, preserving the server's ordering.
    """

    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        raise TransportError("Accounts response must contain a 'results' list.")
    return [parse_account(entry) for entry in payload["results"]]
