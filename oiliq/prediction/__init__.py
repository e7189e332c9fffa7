"""
Prediction Module — Oil Quality Inference Seam

Public API:
- Predictor: Interface every model backend implements
- SimulatedPredictor: Seeded local simulation (offline/demo mode)
- RemotePredictor: HTTP client for an external inference service
- FallbackPredictor: Remote first, simulation on failure
- build_predictor: Chain built from Settings
"""

from .schemas import SensorData, PredictionResult
from .predictor import (
    Predictor,
    SimulatedPredictor,
    RemotePredictor,
    FallbackPredictor,
    build_predictor,
    simulate_sensor_capture,
    LOCAL_MODEL_VERSION,
)

__all__ = [
    "SensorData",
    "PredictionResult",
    "Predictor",
    "SimulatedPredictor",
    "RemotePredictor",
    "FallbackPredictor",
    "build_predictor",
    "simulate_sensor_capture",
    "LOCAL_MODEL_VERSION",
]
