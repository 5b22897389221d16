from __future__ import annotations

import bisect
import datetime as dt
import logging
from typing import Dict, Iterable, List, Optional, Union

from dateutil.relativedelta import relativedelta

from networth_core.domain.errors import InvalidArgumentError
from networth_core.domain.models import (
    AVAILABLE_TIMEFRAMES,
    DEFAULT_MINIMUM_MONTHS,
    DEFAULT_TIMEFRAMES,
    MAX_INVALID_RATIO,
    CalculationMethod,
    DataQuality,
    GrowthRateSummary,
    GrowthResult,
    Interval,
    Milestone,
    Money,
    ProjectionDocument,
    ProjectionPoint,
    Scenario,
    ScenarioProjection,
)
from networth_core.services.growth import GrowthCalculator
from networth_core.services.history import HistoricalSeriesBuilder

logger = logging.getLogger(__name__)


def validate_timeframes(timeframes: Iterable[int]) -> List[int]:
    """Return the timeframes sorted and de-duplicated, or raise naming the bad ones."""
    timeframes = list(timeframes)
    if not timeframes:
        raise InvalidArgumentError("At least one timeframe must be specified")
    invalid = [tf for tf in timeframes if isinstance(tf, bool) or tf not in AVAILABLE_TIMEFRAMES]
    if invalid:
        raise InvalidArgumentError(
            f"Invalid timeframes: {', '.join(map(str, invalid))}. "
            f"Available: {', '.join(map(str, AVAILABLE_TIMEFRAMES))}"
        )
    return sorted({int(tf) for tf in timeframes})


def months_between(start: dt.date, end: dt.date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def projection_dates(start: dt.date, years: int, interval: Interval) -> List[dt.date]:
    """
    Dates from start through start + years, inclusive, one interval apart.
    Each step is offset from start so month-end clamping does not accumulate.
    """
    end = start + relativedelta(years=years)
    dates = []
    step = 0
    current = start
    while current <= end:
        dates.append(current)
        step += 1
        current = start + relativedelta(months=step * interval.months)
    return dates


def closest_point(values: List[ProjectionPoint], target: dt.date) -> ProjectionPoint:
    """Point nearest to target in a date-sorted list; the earlier point wins a tie."""
    dates = [v.date for v in values]
    idx = bisect.bisect_left(dates, target)
    if idx == 0:
        return values[0]
    if idx == len(values):
        return values[-1]
    before, after = values[idx - 1], values[idx]
    if abs((target - before.date).days) <= abs((after.date - target).days):
        return before
    return after


def project_scenario(
    current_value: Money,
    monthly_rate: Money,
    timeframes: List[int],
    interval: Interval,
    start: dt.date,
) -> ScenarioProjection:
    max_years = max(timeframes)
    values = []
    for date in projection_dates(start, max_years, interval):
        months = months_between(start, date)
        values.append(ProjectionPoint(date=date, value=current_value + monthly_rate * months, months_from_now=months))

    milestones: Dict[int, Milestone] = {}
    for years in timeframes:
        point = closest_point(values, start + relativedelta(years=years))
        milestones[years] = Milestone(
            date=point.date,
            value=point.value,
            growth_from_current=point.value - current_value,
        )

    final_value = values[-1].value
    return ScenarioProjection(
        values=values,
        milestones=milestones,
        final_value=final_value,
        total_growth=final_value - current_value,
        years_projected=max_years,
    )


class ProjectionEngine:
    """
    Linear net worth projection under the conservative, realistic and optimistic scenarios.

    Pass ``monthly_growth_rate`` to skip the historical growth calculation.
    """

    def __init__(
        self,
        series_builder: HistoricalSeriesBuilder,
        monthly_growth_rate: Optional[Money] = None,
        minimum_months: int = DEFAULT_MINIMUM_MONTHS,
        max_invalid_ratio: float = MAX_INVALID_RATIO,
    ):
        if monthly_growth_rate is not None and not isinstance(monthly_growth_rate, Money):
            raise InvalidArgumentError(f"monthly_growth_rate must be Money, got {monthly_growth_rate!r}")
        self.series_builder = series_builder
        self.monthly_growth_rate = monthly_growth_rate
        self.minimum_months = minimum_months
        self.max_invalid_ratio = max_invalid_ratio

    @property
    def reference_date(self) -> dt.date:
        return self.series_builder.reference_date

    def generate(
        self,
        timeframes: Iterable[int] = DEFAULT_TIMEFRAMES,
        interval: Union[str, Interval] = Interval.MONTHLY,
    ) -> ProjectionDocument:
        timeframes = validate_timeframes(timeframes)
        interval = Interval.parse(interval)

        current_value = self.series_builder.current()
        growth = self._growth()

        if not growth.sufficient:
            return ProjectionDocument(
                current_net_worth=current_value,
                data_quality=DataQuality.from_growth(growth),
                timeframes=timeframes,
                interval=interval,
                error=growth.error,
                message=growth.message,
            )

        monthly_rate = growth.monthly_rate
        if monthly_rate.currency != current_value.currency:
            raise InvalidArgumentError(
                f"Growth rate currency {monthly_rate.currency} does not match net worth currency "
                f"{current_value.currency}"
            )

        scenarios = {
            scenario: project_scenario(
                current_value=current_value,
                monthly_rate=monthly_rate.scale(scenario.multiplier),
                timeframes=timeframes,
                interval=interval,
                start=self.reference_date,
            )
            for scenario in Scenario
        }
        logger.info(
            "Projected %s over %s years (%s) from %s",
            current_value.format(),
            timeframes,
            interval.value,
            self.reference_date.isoformat(),
        )

        return ProjectionDocument(
            current_net_worth=current_value,
            data_quality=DataQuality.from_growth(growth),
            timeframes=timeframes,
            interval=interval,
            growth_rate=GrowthRateSummary.from_monthly(monthly_rate, growth.monthly_rate_percent),
            scenarios=scenarios,
        )

    def can_project(self) -> bool:
        if self.monthly_growth_rate is not None:
            return True
        return self._calculator().sufficient_data()

    def _calculator(self) -> GrowthCalculator:
        return GrowthCalculator(
            self.series_builder,
            minimum_months=self.minimum_months,
            max_invalid_ratio=self.max_invalid_ratio,
        )

    def _growth(self) -> GrowthResult:
        if self.monthly_growth_rate is not None:
            return GrowthResult(sufficient=True, monthly_rate=self.monthly_growth_rate)
        return self._calculator().calculate(CalculationMethod.MEAN)
