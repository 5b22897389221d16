from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from networth_core.domain.models import (
    DEFAULT_MINIMUM_MONTHS,
    MAX_INVALID_RATIO,
    CalculationMethod,
    GrowthError,
    GrowthResult,
    HistoricalPeriod,
    HistoricalPoint,
    Money,
    Volatility,
)
from networth_core.services.history import HistoricalSeriesBuilder

logger = logging.getLogger(__name__)

DECLINING_TREND_WARNING = "Recent 3 months show declining net worth. Projections may be pessimistic."
HIGH_VOLATILITY_WARNING = (
    "High volatility detected in historical data. Projections should be treated as rough estimates."
)
MINIMAL_GROWTH_WARNING = "Minimal historical growth detected. Projections may not be meaningful."


def _div_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _cents(point: HistoricalPoint) -> int:
    return point.value.cents if point.value is not None else 0


def monthly_changes(points: Sequence[HistoricalPoint]) -> List[int]:
    return [_cents(current) - _cents(previous) for previous, current in zip(points, points[1:])]


def mean_growth(changes: Sequence[int]) -> int:
    if not changes:
        return 0
    return _div_toward_zero(sum(changes), len(changes))


def median_growth(changes: Sequence[int]) -> int:
    if not changes:
        return 0
    ordered = sorted(changes)
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) // 2


def weighted_growth(changes: Sequence[int]) -> int:
    """Linear weights: oldest change has weight 1, most recent has weight n."""
    if not changes:
        return 0
    weighted_sum = sum(change * weight for weight, change in enumerate(changes, start=1))
    weight_sum = len(changes) * (len(changes) + 1) // 2
    return _div_toward_zero(weighted_sum, weight_sum)


_REDUCERS = {
    CalculationMethod.MEAN: mean_growth,
    CalculationMethod.MEDIAN: median_growth,
    CalculationMethod.WEIGHTED: weighted_growth,
}


def coefficient_of_variation(changes: Sequence[int], rate_cents: int) -> Optional[float]:
    """Dispersion of changes around the rate, relative to the rate. None when the rate is zero."""
    if not changes or rate_cents == 0:
        return None
    arr = np.asarray(changes, dtype=float)
    std_dev = float(np.sqrt(np.mean((arr - rate_cents) ** 2)))
    return std_dev / abs(rate_cents)


def classify_volatility(cv: Optional[float]) -> Volatility:
    if cv is None or cv < 0.5:
        return Volatility.LOW
    if cv < 1.5:
        return Volatility.MEDIUM
    return Volatility.HIGH


def percentage_rate(points: Sequence[HistoricalPoint], rate_cents: int) -> float:
    if not points:
        return 0.0
    average = float(np.mean([_cents(p) for p in points]))
    if average == 0:
        return 0.0
    return round(rate_cents / average * 100, 2)


def detect_warnings(changes: Sequence[int], volatility: Volatility, minor_per_major: int = 100) -> Optional[str]:
    warnings = []
    recent = changes[-3:]
    if len(recent) >= 3 and all(c < 0 for c in recent):
        warnings.append(DECLINING_TREND_WARNING)
    if volatility == Volatility.HIGH:
        warnings.append(HIGH_VOLATILITY_WARNING)
    if all(abs(c) < minor_per_major for c in changes):
        warnings.append(MINIMAL_GROWTH_WARNING)
    return " ".join(warnings) if warnings else None


class GrowthCalculator:
    """
    Estimates a representative monthly net worth change from month-end history.

    Data problems (too few months, too many empty months) come back as an
    insufficient GrowthResult; only bad arguments raise.
    """

    def __init__(
        self,
        series_builder: HistoricalSeriesBuilder,
        minimum_months: int = DEFAULT_MINIMUM_MONTHS,
        max_invalid_ratio: float = MAX_INVALID_RATIO,
    ):
        self.series_builder = series_builder
        self.minimum_months = minimum_months
        self.max_invalid_ratio = max_invalid_ratio

    @property
    def currency(self) -> str:
        return self.series_builder.base_currency

    def calculate(self, method: Union[str, CalculationMethod] = CalculationMethod.MEAN) -> GrowthResult:
        method = CalculationMethod.parse(method)

        points = self.series_builder.build(self.minimum_months)
        validation = self._validate(points)
        if validation is not None:
            logger.warning("Growth rate unavailable: %s", validation.message)
            return validation

        changes = monthly_changes(points)
        rate_cents = _REDUCERS[method](changes)
        monthly_rate = Money(rate_cents, self.currency)
        volatility = classify_volatility(coefficient_of_variation(changes, rate_cents))
        warning = detect_warnings(changes, volatility, monthly_rate.minor_per_major)

        result = GrowthResult(
            sufficient=True,
            monthly_rate=monthly_rate,
            monthly_rate_percent=percentage_rate(points, rate_cents),
            volatility=volatility,
            warning=warning,
            data_points_used=len(points),
            calculation_method=method,
            period=HistoricalPeriod(start=points[0].date, end=points[-1].date),
        )
        logger.info(
            "Monthly growth %s (%s, %d points, volatility=%s)",
            monthly_rate.format(),
            method.value,
            len(points),
            volatility.value,
        )
        if warning:
            logger.warning("Growth data quality: %s", warning)
        return result

    def sufficient_data(self) -> bool:
        points = self.series_builder.build(self.minimum_months)
        return self._validate(points) is None

    def _validate(self, points: Sequence[HistoricalPoint]) -> Optional[GrowthResult]:
        zero = Money.zero(self.currency)
        if len(points) < self.minimum_months:
            return GrowthResult(
                sufficient=False,
                monthly_rate=zero,
                error=GrowthError.INSUFFICIENT_HISTORY,
                message=(
                    f"At least {self.minimum_months} months of transaction history required. "
                    f"Found {len(points)} months."
                ),
                data_points_found=len(points),
                data_points_required=self.minimum_months,
            )

        invalid = sum(1 for p in points if p.is_missing)
        if invalid > len(points) * self.max_invalid_ratio:
            return GrowthResult(
                sufficient=False,
                monthly_rate=zero,
                error=GrowthError.POOR_DATA_QUALITY,
                message="Too many periods with zero or missing net worth data. Projections may be unreliable.",
                invalid_count=invalid,
                total_count=len(points),
            )
        return None
