"""
Shared fixtures: fixed-result predictor, fresh repositories, report data.
"""

from datetime import datetime, timezone

import pytest

from oiliq.prediction import Predictor, PredictionResult, SensorData
from oiliq.reports import ReportData
from oiliq.rules import RegulatoryLimits, aggregate, generate_recommendations
from oiliq.store import InMemoryAlertRepository, InMemoryBatchRepository


class FixedPredictor(Predictor):
    """Always returns the result scored from the given readings."""

    def __init__(self, ffa: float, tpc: float, pv: float, confidence: float = 90.0):
        self.readings = (ffa, tpc, pv)
        self.confidence = confidence
        self.calls = []

    def predict(self, sensor_data: SensorData) -> PredictionResult:
        self.calls.append(sensor_data)
        scored = aggregate(*self.readings, confidence=self.confidence)
        return PredictionResult(
            **scored.model_dump(),
            recommendations=generate_recommendations(scored),
            model_version="fixed-1",
        )


@pytest.fixture
def passing_predictor():
    return FixedPredictor(0.03, 2.5, 1.0)


@pytest.fixture
def rejecting_predictor():
    return FixedPredictor(0.35, 27.0, 12.0)


@pytest.fixture
def batch_repo():
    return InMemoryBatchRepository(seed_demo=True)


@pytest.fixture
def alert_repo():
    return InMemoryAlertRepository()


@pytest.fixture
def report_data() -> ReportData:
    results = aggregate(
        0.18, 18.5, 8.2,
        confidence=94.2,
        timestamp=datetime(2024, 1, 15, 14, 32, tzinfo=timezone.utc),
    )
    return ReportData(
        batch_id="BATCH-2024-0115-A",
        test_date=datetime(2024, 1, 15, 14, 32, tzinfo=timezone.utc),
        station_name="Fryer A1",
        location="Kitchen Zone A",
        equipment="Industrial Fryer 50L",
        oil_type="Refined Sunflower Oil",
        results=results,
        limits=RegulatoryLimits(),
        operator_name="R. Sharma",
    )
