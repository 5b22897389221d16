from __future__ import annotations

from typing import Dict, Iterable, List, Protocol

import pandas as pd

from networth_core.domain.errors import InvalidArgumentError
from networth_core.domain.models import Account, Money


REQUIRED_COLUMNS = {"account_id", "date", "balance"}
CLASSIFICATIONS = {"asset", "liability"}


class BalanceSource(Protocol):
    """Read-only view over account balances."""

    def accounts(self) -> List[Account]:
        ...

    def balance_history(self, account_id: str) -> pd.Series:
        """Balances in minor units of the account currency, indexed by ascending date."""
        ...


class InMemoryBalanceSource:
    def __init__(self, accounts: Iterable[Account], histories: Dict[str, pd.Series]):
        self._accounts = list(accounts)
        self._histories = histories

    def accounts(self) -> List[Account]:
        return list(self._accounts)

    def balance_history(self, account_id: str) -> pd.Series:
        history = self._histories.get(account_id)
        if history is None:
            return pd.Series([], index=pd.DatetimeIndex([]), dtype="int64")
        return history


def load_balances(frame: pd.DataFrame, accounts: Iterable[Account]) -> InMemoryBalanceSource:
    """
    Build an in-memory source from a frame of balance snapshots.
    - `balance` is in major units of the owning account's currency.
    - Several rows for the same account and day keep the last one.
    """
    missing = REQUIRED_COLUMNS - set(frame.columns)
    if missing:
        raise ValueError(f"Missing columns in balance frame: {missing}")

    accounts = list(accounts)
    by_id = {account.id: account for account in accounts}
    for account in accounts:
        if account.classification not in CLASSIFICATIONS:
            raise InvalidArgumentError(
                f"Invalid classification for account {account.id}: {account.classification}"
            )

    df = frame.copy()
    df["account_id"] = df["account_id"].astype(str)
    unknown = set(df["account_id"]) - set(by_id)
    if unknown:
        raise ValueError(f"Balances reference unknown accounts: {sorted(unknown)}")

    df["date"] = pd.to_datetime(df["date"]).dt.normalize()
    df = df.sort_values(["account_id", "date"], kind="stable")

    histories: Dict[str, pd.Series] = {}
    for account_id, rows in df.groupby("account_id", sort=False):
        currency = by_id[account_id].currency
        cents = [Money.from_decimal(value, currency).cents for value in rows["balance"]]
        series = pd.Series(cents, index=pd.DatetimeIndex(rows["date"]), dtype="int64")
        histories[account_id] = series[~series.index.duplicated(keep="last")]

    return InMemoryBalanceSource(accounts, histories)
