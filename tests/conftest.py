import datetime as dt

import django
import pandas as pd
import pytest
from django.conf import settings

from networth_core.domain.models import Account
from networth_core.io.balances import load_balances


HOUSEHOLD_ACCOUNTS = [
    Account(id="brokerage", name="Brokerage", classification="asset"),
    Account(id="mortgage", name="Mortgage", classification="liability"),
]


def pytest_configure():
    if settings.configured:
        return
    settings.configure(
        DEBUG=False,
        SECRET_KEY="tests",
        ALLOWED_HOSTS=["*"],
        ROOT_URLCONF="server.net_worth.urls",
        INSTALLED_APPS=[
            "django.contrib.contenttypes",
            "django.contrib.auth",
            "rest_framework",
        ],
        DATABASES={},
        REST_FRAMEWORK={
            "DEFAULT_AUTHENTICATION_CLASSES": [],
            "DEFAULT_PERMISSION_CLASSES": [],
            "UNAUTHENTICATED_USER": None,
        },
        NET_WORTH_PROJECTION={"minimum_months": 6, "base_currency": "USD"},
    )
    django.setup()


@pytest.fixture
def reference_date():
    return dt.date(2024, 6, 15)


@pytest.fixture
def household_source():
    """Brokerage grows by 400.00 and the mortgage shrinks by 100.00 each month: +500.00 net."""
    rows = []
    for k, month in enumerate(pd.period_range("2023-09", "2024-06", freq="M")):
        day = month.start_time.date().isoformat()
        rows.append({"account_id": "brokerage", "date": day, "balance": 30_000 + 400 * k})
        rows.append({"account_id": "mortgage", "date": day, "balance": 20_000 - 100 * k})
    return load_balances(pd.DataFrame(rows), HOUSEHOLD_ACCOUNTS)
