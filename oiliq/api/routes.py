"""
API Routes — Health, Configuration and Scoring

/health and /predict may reach the remote predictor, so they are plain def
and run in the threadpool. The rest are async.

Domain errors (InvalidLimit, InvalidReading) propagate to the exception
handlers in main.py and become 422 responses.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from oiliq.config import settings
from oiliq.prediction import Predictor, PredictionResult, simulate_sensor_capture
from oiliq.rules.aggregator import (
    aggregate,
    generate_recommendations,
    SCORE_PASS_MIN,
    SCORE_BORDERLINE_MIN,
)
from oiliq.rules.classifier import (
    classify,
    validate_limit,
    RATIO_PASS_MAX,
    RATIO_BORDERLINE_MAX,
)
from oiliq.rules.standards import STANDARDS, RegulatoryLimits, merge_limits, resolve_limits

from .dependencies import get_limits, get_predictor
from .schemas import (
    ClassifyRequest,
    ClassifyResponse,
    ConfigResponse,
    HealthResponse,
    PredictRequest,
    ScoreRequest,
    ScoreResponse,
    StandardInfo,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(predictor: Predictor = Depends(get_predictor)):
    """Service health plus the prediction backend's own status."""
    return HealthResponse(
        status="healthy",
        environment=settings.ENVIRONMENT,
        predictor=predictor.health_check(),
    )


@router.get(f"{settings.API_V1_STR}/config", response_model=ConfigResponse, tags=["Config"])
async def get_config(limits: RegulatoryLimits = Depends(get_limits)):
    """Active limits, score bands and the available regulatory presets."""
    return ConfigResponse(
        standard=settings.REGULATORY_STANDARD,
        limits=limits,
        score_pass_min=SCORE_PASS_MIN,
        score_borderline_min=SCORE_BORDERLINE_MIN,
        ratio_pass_max=RATIO_PASS_MAX,
        ratio_borderline_max=RATIO_BORDERLINE_MAX,
        standards=[StandardInfo(**s.model_dump()) for s in STANDARDS.values()],
    )


@router.post(
    f"{settings.API_V1_STR}/predict",
    response_model=PredictionResult,
    response_model_by_alias=False,
    tags=["Scoring"],
)
def predict(
    request: PredictRequest,
    predictor: Predictor = Depends(get_predictor),
):
    """
    Capture a (simulated) sensor reading and run it through the predictor.
    """
    capture = simulate_sensor_capture(sample_id=request.sample_id)
    return predictor.predict(capture)


@router.post(f"{settings.API_V1_STR}/score", response_model=ScoreResponse, tags=["Scoring"])
async def score_readings(
    request: ScoreRequest,
    default_limits: RegulatoryLimits = Depends(get_limits),
):
    """
    Score laboratory readings against the configured (or requested) limits.
    """
    overrides = request.limits.model_dump() if request.limits else {}

    if request.standard:
        try:
            limits = resolve_limits(request.standard, **overrides)
        except KeyError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(e.args[0])
            )
    else:
        limits = merge_limits(default_limits, **overrides)

    result = aggregate(
        request.ffa, request.tpc, request.pv, limits, confidence=request.confidence
    )

    return ScoreResponse(
        **result.model_dump(),
        limits=limits,
        recommendations=generate_recommendations(result, limits),
    )


@router.post(f"{settings.API_V1_STR}/classify", response_model=ClassifyResponse, tags=["Scoring"])
async def classify_reading(request: ClassifyRequest):
    """Per-parameter classification of a single reading."""
    limit = validate_limit(request.limit)
    return ClassifyResponse(
        value=request.value,
        limit=limit,
        ratio=request.value / limit,
        status=classify(request.value, limit),
    )
