from networth_core.domain.models import (
    Account,
    CalculationMethod,
    GrowthError,
    Money,
    ProjectionConfig,
    Scenario,
    Volatility,
)
from networth_core.io.balances import InMemoryBalanceSource
from networth_core.services.net_worth import NetWorth


def test_current_net_worth(household_source, reference_date):
    assert NetWorth(household_source, reference_date).current() == Money(1_450_000)


def test_growth_rate_info(household_source, reference_date):
    info = NetWorth(household_source, reference_date).growth_rate_info()
    assert info["monthly_rate"] == Money(50_000)
    assert info["annual_rate"] == Money(600_000)
    # 500 / average of 10,000 .. 14,000
    assert info["percent"] == 4.17
    assert info["volatility"] == Volatility.LOW
    assert info["warning"] is None


def test_projections_use_config_defaults(household_source, reference_date):
    net_worth = NetWorth(household_source, reference_date)
    assert net_worth.can_project()
    document = net_worth.projections()
    assert document.timeframes == [1, 5, 10]
    assert document.scenarios[Scenario.REALISTIC].milestones[1].value == Money(2_050_000)
    assert document.scenarios[Scenario.CONSERVATIVE].milestones[1].value == Money(1_870_000)


def test_projections_with_explicit_rate(household_source, reference_date):
    document = NetWorth(household_source, reference_date).projections(
        timeframes=[2], interval="yearly", monthly_growth_rate=Money(10_000)
    )
    realistic = document.scenarios[Scenario.REALISTIC]
    assert [p.months_from_now for p in realistic.values] == [0, 12, 24]
    assert realistic.final_value == Money(1_450_000 + 240_000)


def test_median_method_from_config(household_source, reference_date):
    config = ProjectionConfig(method=CalculationMethod.MEDIAN)
    info = NetWorth(household_source, reference_date, config=config).growth_rate_info()
    assert info["monthly_rate"] == Money(50_000)


def test_household_without_balances_cannot_project(reference_date):
    accounts = [Account(id="brokerage", name="Brokerage", classification="asset")]
    net_worth = NetWorth(InMemoryBalanceSource(accounts, {}), reference_date)
    assert not net_worth.can_project()
    assert net_worth.current() == Money(0)
    assert net_worth.growth_rate_info()["error"] == GrowthError.POOR_DATA_QUALITY
    document = net_worth.projections(timeframes=[1])
    assert not document.sufficient
    assert document.scenarios == {}
