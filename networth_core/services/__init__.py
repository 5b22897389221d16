from networth_core.services.growth import GrowthCalculator  # noqa: F401
from networth_core.services.history import HistoricalSeriesBuilder  # noqa: F401
from networth_core.services.net_worth import NetWorth  # noqa: F401
from networth_core.services.projection import ProjectionEngine  # noqa: F401

__all__ = [
    "GrowthCalculator",
    "HistoricalSeriesBuilder",
    "NetWorth",
    "ProjectionEngine",
]
