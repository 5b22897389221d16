from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

from networth_core.domain.models import (
    DataQuality,
    GrowthError,
    GrowthRateSummary,
    HistoricalPeriod,
    Interval,
    Milestone,
    Money,
    ProjectionDocument,
    ProjectionPoint,
    Scenario,
    ScenarioProjection,
    Volatility,
)

# Error codes exposed to HTTP clients.
CLIENT_ERROR_CODES = {
    GrowthError.INSUFFICIENT_HISTORY: "insufficient_data",
    GrowthError.POOR_DATA_QUALITY: "poor_data_quality",
}


def money_to_json(money: Money) -> dict:
    return {"amount": str(money.cents), "currency": money.currency, "formatted": money.format()}


def money_from_json(data: dict) -> Money:
    return Money(int(data["amount"]), data["currency"])


def _date_to_json(value: Optional[dt.date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _date_from_json(value: Optional[str]) -> Optional[dt.date]:
    return dt.date.fromisoformat(value) if value else None


def _enum_value(value):
    return value.value if value is not None else None


def _period_to_json(period: HistoricalPeriod) -> dict:
    return {"start": _date_to_json(period.start), "end": _date_to_json(period.end)}


def _data_quality_to_json(quality: DataQuality) -> dict:
    payload = {
        "sufficient": quality.sufficient,
        "volatility": _enum_value(quality.volatility),
        "warning": quality.warning,
        "data_points_used": quality.data_points_used,
        "period": _period_to_json(quality.period),
    }
    if not quality.sufficient:
        payload.update(
            {
                "error": _enum_value(quality.error),
                "message": quality.message,
                "data_points_found": quality.data_points_found,
                "data_points_required": quality.data_points_required,
                "invalid_count": quality.invalid_count,
                "total_count": quality.total_count,
            }
        )
    return payload


def _scenario_to_json(projection: ScenarioProjection) -> dict:
    return {
        "values": [
            {
                "date": p.date.isoformat(),
                "value": money_to_json(p.value),
                "months_from_now": p.months_from_now,
            }
            for p in projection.values
        ],
        "milestones": {
            str(years): {
                "date": m.date.isoformat(),
                "value": money_to_json(m.value),
                "growth_from_current": money_to_json(m.growth_from_current),
            }
            for years, m in projection.milestones.items()
        },
        "final_value": money_to_json(projection.final_value),
        "total_growth": money_to_json(projection.total_growth),
        "years_projected": projection.years_projected,
    }


def document_to_json(document: ProjectionDocument) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "current_net_worth": money_to_json(document.current_net_worth),
        "data_quality": _data_quality_to_json(document.data_quality),
    }
    if not document.sufficient:
        payload["error"] = _enum_value(document.error)
        payload["message"] = document.message
        return payload

    payload["timeframes"] = list(document.timeframes)
    payload["interval"] = document.interval.value
    growth = document.growth_rate
    payload["growth_rate"] = {
        "monthly": money_to_json(growth.monthly),
        "annual": money_to_json(growth.annual),
        "percent": growth.percent,
    }
    payload["scenarios"] = {
        scenario.label: _scenario_to_json(projection) for scenario, projection in document.scenarios.items()
    }
    return payload


def error_payload(document: ProjectionDocument) -> Dict[str, Optional[str]]:
    """Body returned to HTTP clients when a projection cannot be produced."""
    return {"error": CLIENT_ERROR_CODES.get(document.error, "insufficient_data"), "message": document.message}


def _data_quality_from_json(data: dict) -> DataQuality:
    period = data.get("period") or {}
    volatility = data.get("volatility")
    error = data.get("error")
    return DataQuality(
        sufficient=bool(data["sufficient"]),
        volatility=Volatility(volatility) if volatility else None,
        warning=data.get("warning"),
        data_points_used=int(data.get("data_points_used", 0)),
        period=HistoricalPeriod(start=_date_from_json(period.get("start")), end=_date_from_json(period.get("end"))),
        error=GrowthError(error) if error else None,
        message=data.get("message"),
        data_points_found=data.get("data_points_found"),
        data_points_required=data.get("data_points_required"),
        invalid_count=data.get("invalid_count"),
        total_count=data.get("total_count"),
    )


def _scenario_from_json(data: dict) -> ScenarioProjection:
    return ScenarioProjection(
        values=[
            ProjectionPoint(
                date=_date_from_json(item["date"]),
                value=money_from_json(item["value"]),
                months_from_now=int(item["months_from_now"]),
            )
            for item in data["values"]
        ],
        milestones={
            int(years): Milestone(
                date=_date_from_json(item["date"]),
                value=money_from_json(item["value"]),
                growth_from_current=money_from_json(item["growth_from_current"]),
            )
            for years, item in data["milestones"].items()
        },
        final_value=money_from_json(data["final_value"]),
        total_growth=money_from_json(data["total_growth"]),
        years_projected=int(data["years_projected"]),
    )


def document_from_json(data: Dict[str, Any]) -> ProjectionDocument:
    growth = data.get("growth_rate")
    error = data.get("error")
    return ProjectionDocument(
        current_net_worth=money_from_json(data["current_net_worth"]),
        data_quality=_data_quality_from_json(data["data_quality"]),
        timeframes=[int(t) for t in data.get("timeframes", [])],
        interval=Interval.parse(data.get("interval", Interval.MONTHLY.value)),
        growth_rate=(
            GrowthRateSummary(
                monthly=money_from_json(growth["monthly"]),
                annual=money_from_json(growth["annual"]),
                percent=float(growth["percent"]),
            )
            if growth
            else None
        ),
        scenarios={
            Scenario.from_label(name): _scenario_from_json(item) for name, item in (data.get("scenarios") or {}).items()
        },
        error=GrowthError(error) if error else None,
        message=data.get("message"),
    )
