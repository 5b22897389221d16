from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, List, Optional, Tuple

import pandas as pd

from networth_core.domain.models import DEFAULT_MINIMUM_MONTHS, Account, HistoricalPoint, Money
from networth_core.io.balances import BalanceSource
from networth_core.io.currency import CurrencyConverter, StaticRateConverter

logger = logging.getLogger(__name__)

# Extra months sampled so that month-over-month deltas still cover the minimum window.
LOOKBACK_PADDING_MONTHS = 3


def sample_dates(reference_date: dt.date, minimum_months: int) -> List[dt.date]:
    """Month-ends from (minimum_months + 3) months back through the reference date."""
    start = pd.Period(pd.Timestamp(reference_date), freq="M") - (minimum_months + LOOKBACK_PADDING_MONTHS)
    end = pd.Period(pd.Timestamp(reference_date), freq="M")
    dates = []
    for period in pd.period_range(start, end, freq="M"):
        month_end = period.end_time.date()
        if month_end > reference_date:
            break
        dates.append(month_end)
    return dates


class HistoricalSeriesBuilder:
    def __init__(
        self,
        source: BalanceSource,
        reference_date: dt.date,
        base_currency: str = "USD",
        converter: Optional[CurrencyConverter] = None,
    ):
        self.source = source
        self.reference_date = reference_date
        self.base_currency = base_currency.upper()
        self.converter = converter or StaticRateConverter()

    def build(self, minimum_months: int = DEFAULT_MINIMUM_MONTHS) -> List[HistoricalPoint]:
        histories = self._load_histories()
        points = [
            HistoricalPoint(date=date, value=self._net_worth(histories, date))
            for date in sample_dates(self.reference_date, minimum_months)
        ]
        logger.debug("Sampled %d month-end net worth points for %d accounts", len(points), len(histories))
        return points

    def net_worth_at(self, date: dt.date) -> Money:
        value = self._net_worth(self._load_histories(), date)
        return value if value is not None else Money.zero(self.base_currency)

    def current(self) -> Money:
        return self.net_worth_at(self.reference_date)

    def _load_histories(self) -> Dict[str, Tuple[Account, pd.Series]]:
        # One fetch per account; as-of lookups are resolved in memory.
        return {
            account.id: (account, _as_datetime_indexed(self.source.balance_history(account.id)))
            for account in self.source.accounts()
            if account.visible
        }

    def _net_worth(self, histories: Dict[str, Tuple[Account, pd.Series]], date: dt.date) -> Optional[Money]:
        assets = Money.zero(self.base_currency)
        liabilities = Money.zero(self.base_currency)
        contributed = False

        for account, history in histories.values():
            balance = _balance_as_of(history, date)
            if balance is None:
                continue
            contributed = True
            money = self.converter.convert(Money(balance, account.currency), self.base_currency)
            if account.classification == "asset":
                assets = assets + money
            elif account.classification == "liability":
                liabilities = liabilities + money

        if not contributed:
            return None
        return assets - liabilities


def _as_datetime_indexed(history: pd.Series) -> pd.Series:
    """Sources may index by datetime.date or strings; lookups need a sorted DatetimeIndex."""
    if isinstance(history.index, pd.DatetimeIndex) and history.index.is_monotonic_increasing:
        return history
    history = history.copy()
    history.index = pd.DatetimeIndex(pd.to_datetime(history.index)).normalize()
    return history.sort_index(kind="stable")


def _balance_as_of(history: pd.Series, date: dt.date) -> Optional[int]:
    if history.empty:
        return None
    idx = history.index.searchsorted(pd.Timestamp(date), side="right") - 1
    if idx < 0:
        return None
    return int(history.iloc[idx])
