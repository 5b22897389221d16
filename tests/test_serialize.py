import dataclasses
import datetime as dt
import json

from networth_core.domain.models import GrowthError, GrowthResult, DataQuality, Money, ProjectionDocument
from networth_core.io.serialize import document_from_json, document_to_json, error_payload
from networth_core.services.projection import ProjectionEngine


class _StubSeries:
    base_currency = "USD"
    reference_date = dt.date(2024, 3, 31)

    def current(self):
        return Money(5_000_000)


def _document():
    engine = ProjectionEngine(_StubSeries(), monthly_growth_rate=Money(50_000))
    return engine.generate(timeframes=[5, 1], interval="quarterly")


def test_json_round_trip_preserves_minor_units_and_dates():
    document = _document()
    payload = json.loads(json.dumps(document_to_json(document)))
    assert document_from_json(payload) == document


def test_json_shape():
    payload = document_to_json(_document())
    assert payload["timeframes"] == [1, 5]
    assert payload["interval"] == "quarterly"
    assert payload["current_net_worth"] == {"amount": "5000000", "currency": "USD", "formatted": "$50,000.00"}
    assert payload["growth_rate"]["annual"]["amount"] == "600000"
    assert set(payload["scenarios"]) == {"conservative", "realistic", "optimistic"}

    realistic = payload["scenarios"]["realistic"]
    assert realistic["values"][0] == {
        "date": "2024-03-31",
        "value": {"amount": "5000000", "currency": "USD", "formatted": "$50,000.00"},
        "months_from_now": 0,
    }
    assert realistic["milestones"]["1"]["date"] == "2025-03-31"
    assert realistic["milestones"]["1"]["growth_from_current"]["formatted"] == "$6,000.00"
    assert realistic["years_projected"] == 5
    assert payload["data_quality"]["volatility"] == "low"
    assert payload["data_quality"]["period"] == {"start": None, "end": None}


def _insufficient_document():
    growth = GrowthResult(
        sufficient=False,
        monthly_rate=Money(0),
        error=GrowthError.POOR_DATA_QUALITY,
        message="Too many periods with zero or missing net worth data. Projections may be unreliable.",
        invalid_count=5,
        total_count=9,
    )
    return ProjectionDocument(
        current_net_worth=Money(-2_500),
        data_quality=DataQuality.from_growth(growth),
        timeframes=[1],
        error=growth.error,
        message=growth.message,
    )


def test_insufficient_document_round_trip_and_error_body():
    document = _insufficient_document()
    payload = document_to_json(document)
    assert "scenarios" not in payload
    assert "timeframes" not in payload
    assert "interval" not in payload
    assert payload["error"] == "poor_data_quality"
    assert payload["data_quality"]["invalid_count"] == 5
    assert document_from_json(payload) == dataclasses.replace(document, timeframes=[])
    assert error_payload(document) == {"error": "poor_data_quality", "message": document.message}


def test_insufficient_history_maps_to_insufficient_data():
    document = ProjectionDocument(
        current_net_worth=Money(0),
        data_quality=DataQuality(sufficient=False, error=GrowthError.INSUFFICIENT_HISTORY),
        timeframes=[1],
        error=GrowthError.INSUFFICIENT_HISTORY,
        message="At least 6 months of transaction history required. Found 2 months.",
    )
    assert error_payload(document)["error"] == "insufficient_data"
