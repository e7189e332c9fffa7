"""
Batch Routes — Stations, Batches, Test Runs and Report Downloads

Endpoints:
- GET/POST /api/v1/stations, PATCH /api/v1/stations/{station_id}
- GET/POST /api/v1/batches, GET /api/v1/batches/{batch_id}
- POST/GET /api/v1/batches/{batch_id}/tests
- GET /api/v1/batches/{batch_id}/history.xlsx: Excel test history
- GET /api/v1/tests/{test_id}/report: Download PDF report
- GET /api/v1/statistics

Handlers that call the predictor or build PDF / xlsx files are plain def,
so FastAPI runs them in its threadpool.
"""

import io
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from oiliq.config import settings
from oiliq.exceptions import RecordNotFound
from oiliq.prediction import Predictor
from oiliq.reports import generate_filename, generate_history_excel, generate_pdf_report
from oiliq.rules.classifier import ComplianceStatus
from oiliq.rules.standards import RegulatoryLimits
from oiliq.store import (
    AlertRepository,
    Batch,
    BatchRepository,
    BatchStatistics,
    FryingStation,
    TestRecord,
)

from .dependencies import (
    get_alert_repository,
    get_batch_repository,
    get_limits,
    get_predictor,
)
from .schemas import BatchCreate, StationCreate, StationUpdate, TestRunRequest
from .services import TestRunResult, build_report_data, run_oil_test


logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_V1_STR, tags=["Batches"])


def _require_batch(repo: BatchRepository, batch_id: str) -> Batch:
    batch = repo.get_batch(batch_id)
    if batch is None:
        raise RecordNotFound("Batch", batch_id)
    return batch


# =============================================================================
# STATIONS
# =============================================================================

@router.get("/stations", response_model=List[FryingStation])
async def list_stations(repo: BatchRepository = Depends(get_batch_repository)):
    return repo.list_stations()


@router.post("/stations", response_model=FryingStation, status_code=status.HTTP_201_CREATED)
async def add_station(
    request: StationCreate,
    repo: BatchRepository = Depends(get_batch_repository),
):
    return repo.add_station(**request.model_dump())


@router.patch("/stations/{station_id}", response_model=FryingStation)
async def update_station(
    station_id: str,
    request: StationUpdate,
    repo: BatchRepository = Depends(get_batch_repository),
):
    updated = repo.update_station(station_id, **request.model_dump(exclude_none=True))
    if updated is None:
        raise RecordNotFound("Station", station_id)
    return updated


# =============================================================================
# BATCHES
# =============================================================================

@router.get("/batches", response_model=List[Batch])
async def list_batches(
    station_id: Optional[str] = Query(default=None),
    status_filter: Optional[ComplianceStatus] = Query(default=None, alias="status"),
    repo: BatchRepository = Depends(get_batch_repository),
):
    """Batches, newest first, optionally filtered by station or status."""
    return repo.list_batches(station_id=station_id, status=status_filter)


@router.post("/batches", response_model=Batch, status_code=status.HTTP_201_CREATED)
async def create_batch(
    request: BatchCreate,
    repo: BatchRepository = Depends(get_batch_repository),
):
    return repo.create_batch(request.station_id, request.oil_type, notes=request.notes)


@router.get("/batches/{batch_id}", response_model=Batch)
async def get_batch(
    batch_id: str,
    repo: BatchRepository = Depends(get_batch_repository),
):
    return _require_batch(repo, batch_id)


@router.post("/batches/{batch_id}/tests", response_model=TestRunResult)
def run_test(
    batch_id: str,
    request: Optional[TestRunRequest] = None,
    batch_repo: BatchRepository = Depends(get_batch_repository),
    alert_repo: AlertRepository = Depends(get_alert_repository),
    predictor: Predictor = Depends(get_predictor),
):
    """
    Run an oil test on a batch.

    Stores the result, updates the batch and raises an alert for
    BORDERLINE/REJECT results.
    """
    operator_id = request.operator_id if request else None
    return run_oil_test(batch_id, batch_repo, alert_repo, predictor, operator_id=operator_id)


@router.get("/batches/{batch_id}/tests", response_model=List[TestRecord])
async def list_batch_tests(
    batch_id: str,
    repo: BatchRepository = Depends(get_batch_repository),
):
    _require_batch(repo, batch_id)
    return repo.list_test_records(batch_id)


@router.get("/batches/{batch_id}/history.xlsx", summary="Download Excel test history")
def download_history(
    batch_id: str,
    repo: BatchRepository = Depends(get_batch_repository),
):
    batch = _require_batch(repo, batch_id)
    content = generate_history_excel(batch, repo.list_test_records(batch_id))
    filename = f"FoodOilIQ_History_{batch_id}_{datetime.now(timezone.utc).date().isoformat()}.xlsx"

    return StreamingResponse(
        io.BytesIO(content),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get("/statistics", response_model=BatchStatistics)
async def get_statistics(repo: BatchRepository = Depends(get_batch_repository)):
    return repo.get_statistics()


# =============================================================================
# REPORTS
# =============================================================================

@router.get("/tests/{test_id}/report", summary="Download PDF test report")
def download_report(
    test_id: str,
    repo: BatchRepository = Depends(get_batch_repository),
    limits: RegulatoryLimits = Depends(get_limits),
):
    """
    Generate and download the Oil Quality Test Report for a stored test.

    Returns 422 if the batch metadata needed by the report is incomplete.
    """
    record = repo.get_test_record(test_id)
    if record is None:
        raise RecordNotFound("Test", test_id)

    batch = repo.get_batch(record.batch_id)
    if batch is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Test '{test_id}' references missing batch '{record.batch_id}'"
        )

    data = build_report_data(
        record,
        batch,
        limits,
        company_name=settings.COMPANY_NAME,
        company_address=settings.COMPANY_ADDRESS,
    )
    generated_at = datetime.now(timezone.utc)
    content = generate_pdf_report(data, generated_at=generated_at)
    filename = generate_filename(batch.id, generated_at)

    return StreamingResponse(
        io.BytesIO(content),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
