"""
Prediction Schemas — Sensor Input and Model Output

Field names are snake_case in Python and camelCase on the wire, so the
same models talk to a remote inference service and to dashboard clients.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from oiliq.rules.aggregator import ScoreResult


class SensorData(BaseModel):
    """One spectral capture of an oil sample."""
    model_config = ConfigDict(populate_by_name=True)

    spectral_features: List[float] = Field(
        ...,
        min_length=1,
        alias="spectralFeatures",
        description="Normalized spectral intensities"
    )
    temperature: float = Field(..., description="Sample temperature (C)")
    humidity: float = Field(..., ge=0.0, le=100.0, description="Relative humidity (%)")
    sample_id: Optional[str] = Field(default=None, alias="sampleId")


class PredictionResult(ScoreResult):
    """ScoreResult plus the model's recommendations and version."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        protected_namespaces=(),
    )

    recommendations: List[str] = Field(default_factory=list)
    model_version: str = Field(default="unknown", alias="modelVersion")
