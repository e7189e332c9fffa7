"""
Pydantic Schemas — API Request/Response Models

Strict validation at the HTTP edge; domain rules (limits, readings) are
enforced again by the rules layer and surface as 422 responses.

Constraints:
- Readings must be >= 0 (NaN/inf are rejected by the aggregator)
- Limits, when overridden, must be > 0
- Confidence: 0-100
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from oiliq.rules.classifier import ComplianceStatus
from oiliq.rules.standards import RegulatoryLimits
from oiliq.store.batches import StationStatus
from oiliq.store.alerts import NotifyOn


# ============================================================================
# Scoring
# ============================================================================

class LimitsInput(BaseModel):
    """Optional per-parameter limit overrides, checked by merge_limits()."""
    ffa: Optional[float] = Field(default=None, description="FFA limit (%)")
    tpc: Optional[float] = Field(default=None, description="TPC limit (%)")
    pv: Optional[float] = Field(default=None, description="PV limit (meq/kg)")


class ScoreRequest(BaseModel):
    """Score three laboratory readings directly."""
    ffa: float = Field(..., ge=0, description="Free Fatty Acid (%)")
    tpc: float = Field(..., ge=0, description="Total Polar Compounds (%)")
    pv: float = Field(..., ge=0, description="Peroxide Value (meq/kg)")
    confidence: float = Field(default=100.0, ge=0.0, le=100.0)
    standard: Optional[str] = Field(default=None, description="fssai, eu, china, codex")
    limits: Optional[LimitsInput] = None


class ScoreResponse(BaseModel):
    """Aggregated result with the limits it was scored against."""
    ffa: float
    tpc: float
    pv: float
    score: int
    classification: ComplianceStatus
    confidence: float
    timestamp: datetime
    limits: RegulatoryLimits
    recommendations: List[str]


class ClassifyRequest(BaseModel):
    """Classify one reading against one limit."""
    value: float = Field(..., ge=0)
    limit: float = Field(..., description="Must be a positive number")


class ClassifyResponse(BaseModel):
    value: float
    limit: float
    ratio: float
    status: ComplianceStatus


class PredictRequest(BaseModel):
    """Run a prediction on a simulated capture for a sample."""
    sample_id: Optional[str] = Field(default=None, description="Batch or sample identifier")


# ============================================================================
# Stations & Batches
# ============================================================================

class StationCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    equipment: str = Field(..., min_length=1)
    capacity: str = Field(..., min_length=1)
    status: StationStatus = StationStatus.ACTIVE


class StationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    equipment: Optional[str] = None
    capacity: Optional[str] = None
    status: Optional[StationStatus] = None


class BatchCreate(BaseModel):
    station_id: str = Field(..., min_length=1)
    oil_type: str = Field(..., min_length=1)
    notes: Optional[str] = None


class TestRunRequest(BaseModel):
    """Run a test on a batch."""
    operator_id: Optional[str] = Field(default=None, description="Operator performing the test")

    # Not a pytest test class despite the name
    __test__ = False


# ============================================================================
# Alerts
# ============================================================================

class AcknowledgeRequest(BaseModel):
    acknowledged_by: str = Field(..., min_length=1)


class PreferencesUpdate(BaseModel):
    """Partial update of notification preferences."""
    email: Optional[bool] = None
    sms: Optional[bool] = None
    email_addresses: Optional[List[str]] = None
    phone_numbers: Optional[List[str]] = None
    notify_on: Optional[NotifyOn] = None

    @field_validator('email_addresses')
    @classmethod
    def validate_emails(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        for address in v:
            if "@" not in address:
                raise ValueError(f"Invalid email address: '{address}'")
        return v


class UnacknowledgedCount(BaseModel):
    count: int


# ============================================================================
# System
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    environment: str
    predictor: dict


class StandardInfo(BaseModel):
    code: str
    name: str
    reference: str
    limits: RegulatoryLimits


class ConfigResponse(BaseModel):
    """Active scoring configuration."""
    standard: str
    limits: RegulatoryLimits
    score_pass_min: int
    score_borderline_min: int
    ratio_pass_max: float
    ratio_borderline_max: float
    standards: List[StandardInfo]
