"""
Score Aggregator — Three Readings to One Oil Health Score

This is where the overall verdict lives. Readings come in; a 0-100 score and
a compliance band come out.

Constraints:
- Component score = max(0, 100 - (value / limit) * 100)
- Score = mean of the three components, rounded half-up, clamped [0, 100]
- Band thresholds are named constants, independent of the per-parameter
  ratio classifier
- NaN / infinite / negative readings are rejected, never scored
- Confidence is supplied by the caller and passed through unchanged
"""

import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oiliq.exceptions import InvalidReading
from oiliq.rules.classifier import ComplianceStatus, validate_limit
from oiliq.rules.standards import RegulatoryLimits


# ============================================================================
# THRESHOLD CONSTANTS
# ============================================================================

SCORE_PASS_MIN = 75        # score >= this = PASS
SCORE_BORDERLINE_MIN = 50  # score >= this = BORDERLINE, below = REJECT

# Fraction of the limit above which a parameter earns a recommendation
RECOMMENDATION_TRIGGERS: Dict[str, float] = {
    "ffa": 2.0 / 3.0,
    "tpc": 0.8,
    "pv": 0.8,
}

RECOMMENDATION_TEXT: Dict[str, str] = {
    "ffa": "FFA levels elevated - consider oil replacement soon",
    "tpc": "TPC approaching limits - increase monitoring frequency",
    "pv": "Peroxide value high - check storage conditions",
}
RECOMMENDATION_NOMINAL = "All parameters within optimal range"


class ScoreResult(BaseModel):
    """
    Aggregated test result. Immutable once produced.
    """
    model_config = ConfigDict(frozen=True)

    ffa: float = Field(..., description="Free Fatty Acid (%)")
    tpc: float = Field(..., description="Total Polar Compounds (%)")
    pv: float = Field(..., description="Peroxide Value (meq/kg)")
    score: int = Field(..., ge=0, le=100, description="0=Unusable, 100=Fresh")
    classification: ComplianceStatus
    confidence: float = Field(..., ge=0.0, le=100.0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('timestamp')
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


def _check_reading(parameter: str, value: float) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidReading(parameter, value)
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidReading(parameter, value)
    if not math.isfinite(value) or value < 0:
        raise InvalidReading(parameter, value)
    return value


def round_half_up(x: float) -> int:
    """Round halves up (12.5 -> 13), unlike round()'s half-to-even."""
    return int(math.floor(x + 0.5))


def component_score(value: float, limit: float) -> float:
    """Score one parameter: 100 at zero, 0 at or beyond the limit."""
    return max(0.0, 100.0 - (value / limit) * 100.0)


def classify_score(score: int) -> ComplianceStatus:
    """Band an aggregate score into a compliance status."""
    if score >= SCORE_PASS_MIN:
        return ComplianceStatus.PASS
    elif score >= SCORE_BORDERLINE_MIN:
        return ComplianceStatus.BORDERLINE
    else:
        return ComplianceStatus.REJECT


def aggregate(
    ffa: float,
    tpc: float,
    pv: float,
    limits: Union[RegulatoryLimits, Dict[str, float], None] = None,
    confidence: float = 100.0,
    timestamp: Optional[datetime] = None,
) -> ScoreResult:
    """
    Combine FFA, TPC and PV readings into a single ScoreResult.

    Args:
        ffa, tpc, pv: Measured values (must be finite and >= 0)
        limits: Regulatory limits (defaults to FSSAI/Codex 0.3 / 25 / 10)
        confidence: External model confidence [0, 100], passed through
        timestamp: Result time (defaults to now, UTC)

    Returns:
        Frozen ScoreResult

    Raises:
        InvalidReading: A reading or the confidence is NaN, infinite or out of range
        InvalidLimit: A limit is not a positive finite number
    """
    if limits is None:
        limits = RegulatoryLimits()
    elif isinstance(limits, dict):
        limits = RegulatoryLimits.model_construct(**limits)

    readings = {
        "ffa": _check_reading("ffa", ffa),
        "tpc": _check_reading("tpc", tpc),
        "pv": _check_reading("pv", pv),
    }
    checked_limits = {
        name: validate_limit(getattr(limits, name, None), name)
        for name in readings
    }

    confidence = _check_reading("confidence", confidence)
    if confidence > 100.0:
        raise InvalidReading("confidence", confidence)

    components = [
        component_score(readings[name], checked_limits[name])
        for name in readings
    ]
    score = round_half_up(sum(components) / len(components))
    score = max(0, min(100, score))

    return ScoreResult(
        ffa=readings["ffa"],
        tpc=readings["tpc"],
        pv=readings["pv"],
        score=score,
        classification=classify_score(score),
        confidence=confidence,
        timestamp=timestamp or datetime.now(timezone.utc),
    )


def generate_recommendations(
    result: ScoreResult,
    limits: Optional[RegulatoryLimits] = None
) -> List[str]:
    """
    Operator hints for parameters approaching their limits.

    Returns at least one entry; the nominal message when nothing triggers.
    """
    limits = limits or RegulatoryLimits()
    recommendations = []

    for name, fraction in RECOMMENDATION_TRIGGERS.items():
        if getattr(result, name) > getattr(limits, name) * fraction:
            recommendations.append(RECOMMENDATION_TEXT[name])

    if not recommendations:
        recommendations.append(RECOMMENDATION_NOMINAL)

    return recommendations
