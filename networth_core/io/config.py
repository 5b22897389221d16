from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from networth_core.domain.errors import InvalidArgumentError
from networth_core.domain.models import (
    AVAILABLE_TIMEFRAMES,
    DEFAULT_MINIMUM_MONTHS,
    DEFAULT_TIMEFRAMES,
    MAX_INVALID_RATIO,
    CalculationMethod,
    Interval,
    ProjectionConfig,
)


def load_projection_config(path: str | Path) -> ProjectionConfig:
    return projection_config_from_dict(_read_json(path))


def projection_config_from_dict(data: Mapping[str, Any]) -> ProjectionConfig:
    minimum_months = int(data.get("minimum_months", DEFAULT_MINIMUM_MONTHS))
    if minimum_months < 1:
        raise InvalidArgumentError(f"minimum_months must be positive, got {minimum_months}")

    timeframes = tuple(int(t) for t in data.get("timeframes", DEFAULT_TIMEFRAMES))
    invalid = [t for t in timeframes if t not in AVAILABLE_TIMEFRAMES]
    if not timeframes or invalid:
        raise InvalidArgumentError(
            f"Invalid timeframes: {', '.join(map(str, invalid)) or 'none given'}. "
            f"Available: {', '.join(map(str, AVAILABLE_TIMEFRAMES))}"
        )

    max_invalid_ratio = float(data.get("max_invalid_ratio", MAX_INVALID_RATIO))
    if not 0.0 <= max_invalid_ratio <= 1.0:
        raise InvalidArgumentError(f"max_invalid_ratio must be within [0, 1], got {max_invalid_ratio}")

    return ProjectionConfig(
        minimum_months=minimum_months,
        timeframes=timeframes,
        interval=Interval.parse(data.get("interval", Interval.MONTHLY.value)),
        method=CalculationMethod.parse(data.get("method", CalculationMethod.MEAN.value)),
        base_currency=str(data.get("base_currency", "USD")).upper(),
        max_invalid_ratio=max_invalid_ratio,
    )


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
