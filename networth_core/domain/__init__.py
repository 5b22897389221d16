from networth_core.domain.errors import (  # noqa: F401
    ConversionError,
    CurrencyMismatchError,
    InvalidArgumentError,
)
from networth_core.domain.models import (  # noqa: F401
    AVAILABLE_TIMEFRAMES,
    Account,
    CalculationMethod,
    DataQuality,
    GrowthError,
    GrowthRateSummary,
    GrowthResult,
    HistoricalPeriod,
    HistoricalPoint,
    Interval,
    Milestone,
    Money,
    ProjectionConfig,
    ProjectionDocument,
    ProjectionPoint,
    Scenario,
    ScenarioProjection,
    Volatility,
)

__all__ = [
    "AVAILABLE_TIMEFRAMES",
    "Account",
    "CalculationMethod",
    "ConversionError",
    "CurrencyMismatchError",
    "DataQuality",
    "GrowthError",
    "GrowthRateSummary",
    "GrowthResult",
    "HistoricalPeriod",
    "HistoricalPoint",
    "Interval",
    "InvalidArgumentError",
    "Milestone",
    "Money",
    "ProjectionConfig",
    "ProjectionDocument",
    "ProjectionPoint",
    "Scenario",
    "ScenarioProjection",
    "Volatility",
]
