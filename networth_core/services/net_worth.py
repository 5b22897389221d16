from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, Optional, Union

from networth_core.domain.models import Interval, Money, ProjectionConfig, ProjectionDocument
from networth_core.io.balances import BalanceSource
from networth_core.io.currency import CurrencyConverter
from networth_core.services.growth import GrowthCalculator
from networth_core.services.history import HistoricalSeriesBuilder
from networth_core.services.projection import ProjectionEngine


class NetWorth:
    """Entry point for callers: current value, projections and growth summary for one household."""

    def __init__(
        self,
        source: BalanceSource,
        reference_date: dt.date,
        config: Optional[ProjectionConfig] = None,
        converter: Optional[CurrencyConverter] = None,
    ):
        self.config = config or ProjectionConfig()
        self.series_builder = HistoricalSeriesBuilder(
            source,
            reference_date=reference_date,
            base_currency=self.config.base_currency,
            converter=converter,
        )

    def current(self) -> Money:
        return self.series_builder.current()

    def projections(
        self,
        timeframes: Optional[Iterable[int]] = None,
        interval: Optional[Union[str, Interval]] = None,
        monthly_growth_rate: Optional[Money] = None,
    ) -> ProjectionDocument:
        engine = ProjectionEngine(
            self.series_builder,
            monthly_growth_rate=monthly_growth_rate,
            minimum_months=self.config.minimum_months,
            max_invalid_ratio=self.config.max_invalid_ratio,
        )
        return engine.generate(
            timeframes=self.config.timeframes if timeframes is None else timeframes,
            interval=self.config.interval if interval is None else interval,
        )

    def can_project(self) -> bool:
        return self._calculator().sufficient_data()

    def growth_rate_info(self) -> Dict[str, Any]:
        result = self._calculator().calculate(self.config.method)
        if not result.sufficient:
            return {"error": result.error, "message": result.message}
        return {
            "monthly_rate": result.monthly_rate,
            "annual_rate": result.monthly_rate * 12,
            "percent": result.monthly_rate_percent,
            "volatility": result.volatility,
            "warning": result.warning,
        }

    def _calculator(self) -> GrowthCalculator:
        return GrowthCalculator(
            self.series_builder,
            minimum_months=self.config.minimum_months,
            max_invalid_ratio=self.config.max_invalid_ratio,
        )
