"""
API Services — Business Logic Layer

Orchestrates a test run across predictor, batch store and alert store,
and assembles report snapshots from persisted records.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel

from oiliq.exceptions import RecordNotFound
from oiliq.prediction import Predictor, simulate_sensor_capture
from oiliq.reports import ReportData
from oiliq.rules.aggregator import ScoreResult
from oiliq.rules.standards import RegulatoryLimits
from oiliq.store import Alert, AlertRepository, Batch, BatchRepository, TestRecord


logger = logging.getLogger(__name__)


class TestRunResult(BaseModel):
    """Everything a test run produced."""
    record: TestRecord
    batch: Batch
    recommendations: List[str]
    alert: Optional[Alert] = None

    # Not a pytest test class despite the name
    __test__ = False


def run_oil_test(
    batch_id: str,
    batch_repo: BatchRepository,
    alert_repo: AlertRepository,
    predictor: Predictor,
    operator_id: Optional[str] = None,
) -> TestRunResult:
    """
    Run one oil test against a batch.

    Steps:
    1. Capture sensor data for the batch
    2. Predict (remote with local fallback, per predictor chain)
    3. Persist the TestRecord
    4. Update the batch's current score/status
    5. Raise an alert if the result is not PASS

    Raises:
        RecordNotFound: If the batch does not exist
    """
    batch = batch_repo.get_batch(batch_id)
    if batch is None:
        raise RecordNotFound("Batch", batch_id)

    capture = simulate_sensor_capture(sample_id=batch_id)
    result = predictor.predict(capture)

    record = batch_repo.add_test_record(
        batch_id=batch_id,
        timestamp=result.timestamp,
        ffa=result.ffa,
        tpc=result.tpc,
        pv=result.pv,
        score=result.score,
        classification=result.classification,
        confidence=result.confidence,
        operator_id=operator_id,
        model_version=result.model_version,
    )
    updated = batch_repo.update_batch_from_test(
        batch_id, result.score, result.classification, tested_at=result.timestamp
    )

    alert = alert_repo.create_test_result_alert(
        result.classification, result.score, batch_id, station_id=batch.station_id
    )

    logger.info(
        f"🧪 Test {record.id} on {batch_id}: score={record.score} "
        f"({record.classification.value})"
    )

    return TestRunResult(
        record=record,
        batch=updated,
        recommendations=result.recommendations,
        alert=alert,
    )


def build_report_data(
    record: TestRecord,
    batch: Batch,
    limits: RegulatoryLimits,
    company_name: Optional[str] = None,
    company_address: Optional[str] = None,
) -> ReportData:
    """
    Snapshot a stored test record for the report composer.

    The Snapshot Rule: values come from the persisted record, never from a
    fresh prediction.
    """
    results = ScoreResult(
        ffa=record.ffa,
        tpc=record.tpc,
        pv=record.pv,
        score=record.score,
        classification=record.classification,
        confidence=record.confidence,
        timestamp=record.timestamp,
    )
    return ReportData(
        batch_id=batch.id,
        test_date=record.timestamp,
        station_name=batch.station_name,
        location=batch.location,
        equipment=batch.equipment,
        oil_type=batch.oil_type,
        results=results,
        limits=limits,
        operator_name=record.operator_id,
        company_name=company_name or None,
        company_address=company_address or None,
    )
