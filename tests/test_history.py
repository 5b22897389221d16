import datetime as dt

import pandas as pd
import pytest

from networth_core.domain.errors import InvalidArgumentError
from networth_core.domain.models import Account, Money
from networth_core.io.balances import InMemoryBalanceSource, load_balances
from networth_core.io.currency import StaticRateConverter
from networth_core.services.history import HistoricalSeriesBuilder, sample_dates


ACCOUNTS = [
    Account(id="checking", name="Checking", classification="asset"),
    Account(id="card", name="Credit card", classification="liability"),
    Account(id="savings-eur", name="Savings", classification="asset", currency="EUR"),
    Account(id="old", name="Closed", classification="asset", visible=False),
]


def _frame() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"account_id": "checking", "date": "2023-10-01", "balance": 1000.00},
            {"account_id": "checking", "date": "2024-01-15", "balance": 2000.00},
            {"account_id": "card", "date": "2023-12-01", "balance": 250.50},
            {"account_id": "savings-eur", "date": "2024-02-01", "balance": 100.00},
            {"account_id": "old", "date": "2023-09-01", "balance": 99999.00},
        ]
    )


class _CountingSource(InMemoryBalanceSource):
    def __init__(self, inner: InMemoryBalanceSource):
        super().__init__(inner.accounts(), inner._histories)
        self.calls = []

    def balance_history(self, account_id):
        self.calls.append(account_id)
        return super().balance_history(account_id)


def _builder(reference_date=dt.date(2024, 6, 15), source=None) -> HistoricalSeriesBuilder:
    return HistoricalSeriesBuilder(
        source or load_balances(_frame(), ACCOUNTS),
        reference_date=reference_date,
        converter=StaticRateConverter({("EUR", "USD"): "1.10"}),
    )


def test_sample_dates_cover_padded_window_of_month_ends():
    dates = sample_dates(dt.date(2024, 6, 15), minimum_months=6)
    assert len(dates) == 9
    assert dates[0] == dt.date(2023, 9, 30)
    assert dates[-1] == dt.date(2024, 5, 31)
    assert dt.date(2024, 2, 29) in dates


def test_sample_dates_include_reference_when_it_is_a_month_end():
    dates = sample_dates(dt.date(2024, 6, 30), minimum_months=6)
    assert len(dates) == 10
    assert dates[-1] == dt.date(2024, 6, 30)


def test_net_worth_uses_latest_balance_at_or_before_date():
    builder = _builder()
    assert builder.net_worth_at(dt.date(2023, 10, 31)) == Money(100000)
    assert builder.net_worth_at(dt.date(2023, 12, 31)) == Money(74950)
    # 2000.00 checking - 250.50 card + 100 EUR at 1.10
    assert builder.net_worth_at(dt.date(2024, 2, 29)) == Money(185950)
    assert builder.current() == Money(185950)


def test_build_marks_months_without_any_balance_as_missing():
    points = _builder().build(minimum_months=6)
    assert [p.date for p in points] == sample_dates(dt.date(2024, 6, 15), 6)
    assert points[0].value is None
    assert points[0].is_missing
    assert points[1].value == Money(100000)
    assert points[-1].value == Money(185950)


def test_hidden_accounts_are_ignored():
    assert _builder().net_worth_at(dt.date(2023, 9, 30)) == Money(0)


def test_histories_are_fetched_once_per_visible_account():
    source = _CountingSource(load_balances(_frame(), ACCOUNTS))
    _builder(source=source).build(minimum_months=6)
    assert sorted(source.calls) == ["card", "checking", "savings-eur"]


def test_load_balances_validates_input():
    with pytest.raises(ValueError, match="Missing columns"):
        load_balances(pd.DataFrame({"account_id": ["checking"], "date": ["2024-01-01"]}), ACCOUNTS)
    with pytest.raises(ValueError, match="unknown accounts"):
        load_balances(pd.DataFrame({"account_id": ["nope"], "date": ["2024-01-01"], "balance": [1.0]}), ACCOUNTS)
    with pytest.raises(InvalidArgumentError):
        load_balances(_frame(), [Account(id="checking", name="Checking", classification="equity")])


def test_load_balances_keeps_last_snapshot_of_a_day():
    frame = pd.DataFrame(
        [
            {"account_id": "checking", "date": "2024-01-01", "balance": 10.0},
            {"account_id": "checking", "date": "2024-01-01", "balance": 12.5},
        ]
    )
    history = load_balances(frame, ACCOUNTS[:1]).balance_history("checking")
    assert history.tolist() == [1250]


def test_histories_indexed_by_plain_dates_are_accepted():
    source = InMemoryBalanceSource(
        ACCOUNTS[:1],
        {"checking": pd.Series([20_000, 10_000], index=[dt.date(2024, 2, 1), dt.date(2024, 1, 1)])},
    )
    builder = _builder(source=source)
    assert builder.current() == Money(20_000)
    assert builder.net_worth_at(dt.date(2024, 1, 31)) == Money(10_000)
    assert builder.net_worth_at(dt.date(2023, 12, 31)) == Money(0)
