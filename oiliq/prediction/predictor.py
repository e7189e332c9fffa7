"""
Oil Quality Predictors — Inference Seam with Local Fallback

The classifier, aggregator and report composer never talk to a model
directly. Everything goes through Predictor.predict(), so a real inference
service can replace the simulation without touching them.

Implementations:
- SimulatedPredictor: seeded random readings scored by the aggregator
- RemotePredictor: POST {base_url}/predict over HTTP
- FallbackPredictor: primary first, simulation when the primary fails

CRITICAL: SimulatedPredictor is a SIMULATOR. Its readings are random.
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from oiliq.config import Settings
from oiliq.exceptions import PredictionError
from oiliq.rules.aggregator import aggregate, generate_recommendations
from oiliq.rules.standards import RegulatoryLimits, resolve_limits

from .schemas import PredictionResult, SensorData


logger = logging.getLogger(__name__)


LOCAL_MODEL_VERSION = "local-v1.0.0"

# Simulated reading ranges (min, span)
SIM_FFA_RANGE = (0.10, 0.25)
SIM_TPC_RANGE = (10.0, 18.0)
SIM_PV_RANGE = (3.0, 9.0)
SIM_CONFIDENCE_RANGE = (85.0, 12.0)

# Simulated capture conditions
SPECTRAL_FEATURE_COUNT = 10
SIM_TEMPERATURE_RANGE = (22.0, 3.0)
SIM_HUMIDITY_RANGE = (45.0, 15.0)


def simulate_sensor_capture(
    sample_id: Optional[str] = None,
    rng: Optional[random.Random] = None
) -> SensorData:
    """
    Produce a SensorData capture as the handheld sensor would.

    Args:
        sample_id: Batch or sample identifier
        rng: Random source (module RNG if None)
    """
    rng = rng or random.Random()
    return SensorData(
        spectral_features=[rng.random() for _ in range(SPECTRAL_FEATURE_COUNT)],
        temperature=SIM_TEMPERATURE_RANGE[0] + rng.random() * SIM_TEMPERATURE_RANGE[1],
        humidity=SIM_HUMIDITY_RANGE[0] + rng.random() * SIM_HUMIDITY_RANGE[1],
        sample_id=sample_id,
    )


class Predictor(ABC):
    """Anything that turns a sensor capture into a scored result."""

    @abstractmethod
    def predict(self, sensor_data: SensorData) -> PredictionResult:
        """
        Predict oil quality from a sensor capture.

        Raises:
            PredictionError: If the prediction could not be produced
        """

    def health_check(self) -> Dict[str, str]:
        return {"status": "ok", "version": "unknown"}


class SimulatedPredictor(Predictor):
    """
    Local stand-in for the inference service.

    Readings are random within realistic ranges; score and classification
    come from the real aggregator, so they are always self-consistent.

    Usage:
        predictor = SimulatedPredictor(seed=42)
        result = predictor.predict(simulate_sensor_capture("BATCH-01"))
    """

    def __init__(
        self,
        limits: Optional[RegulatoryLimits] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            limits: Limits used for scoring (defaults to FSSAI)
            seed: Random seed for deterministic output (None for random)
        """
        self.limits = limits or RegulatoryLimits()
        self.seed = seed
        self._rng = random.Random(seed)

    def predict(self, sensor_data: SensorData) -> PredictionResult:
        ffa = round(SIM_FFA_RANGE[0] + self._rng.random() * SIM_FFA_RANGE[1], 2)
        tpc = round(SIM_TPC_RANGE[0] + self._rng.random() * SIM_TPC_RANGE[1], 1)
        pv = round(SIM_PV_RANGE[0] + self._rng.random() * SIM_PV_RANGE[1], 1)
        confidence = SIM_CONFIDENCE_RANGE[0] + self._rng.random() * SIM_CONFIDENCE_RANGE[1]

        scored = aggregate(ffa, tpc, pv, self.limits, confidence=confidence)

        logger.debug(
            f"[SIMULATED] sample={sensor_data.sample_id} "
            f"score={scored.score} class={scored.classification.value}"
        )

        return PredictionResult(
            **scored.model_dump(),
            recommendations=generate_recommendations(scored, self.limits),
            model_version=LOCAL_MODEL_VERSION,
        )

    def health_check(self) -> Dict[str, str]:
        return {"status": "ok", "version": LOCAL_MODEL_VERSION}

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the random state (uses original seed if None)."""
        if seed is not None:
            self.seed = seed
        self._rng = random.Random(self.seed)


class RemotePredictor(Predictor):
    """HTTP client for an external inference service."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        """
        Args:
            base_url: Service root, e.g. "http://models.local/api"
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def predict(self, sensor_data: SensorData) -> PredictionResult:
        url = f"{self.base_url}/predict"
        try:
            response = requests.post(
                url,
                json=sensor_data.model_dump(mode="json", by_alias=True),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise PredictionError("Request timeout - please check your connection") from e
        except requests.exceptions.RequestException as e:
            raise PredictionError(f"Prediction service unreachable: {e}") from e

        if not response.ok:
            message = _error_message(response)
            raise PredictionError(message or f"API Error: {response.status_code}")

        try:
            return PredictionResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise PredictionError(f"Malformed prediction payload: {e}") from e

    def health_check(self) -> Dict[str, str]:
        try:
            response = requests.get(f"{self.base_url}/health", timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.exceptions.RequestException, ValueError):
            return {"status": "offline", "version": "local-simulation"}


def _error_message(response: requests.Response) -> Optional[str]:
    try:
        payload: Any = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        return payload.get("message")
    return None


class FallbackPredictor(Predictor):
    """
    Try the primary predictor; fall back to a local one if it fails.

    The fallback is a caller policy: errors from the primary are logged and
    never reach the user.
    """

    def __init__(self, primary: Predictor, fallback: Optional[Predictor] = None):
        self.primary = primary
        self.fallback = fallback or SimulatedPredictor()

    def predict(self, sensor_data: SensorData) -> PredictionResult:
        try:
            return self.primary.predict(sensor_data)
        except PredictionError as e:
            logger.warning(f"⚠️  API unavailable, using local simulation: {e}")
            return self.fallback.predict(sensor_data)

    def health_check(self) -> Dict[str, str]:
        return self.primary.health_check()


def build_predictor(settings: Settings) -> Predictor:
    """
    Build the predictor chain from configuration.

    Remote + simulated fallback when PREDICTION_API_URL is set,
    otherwise the simulation alone.
    """
    limits = resolve_limits(
        settings.REGULATORY_STANDARD,
        ffa=settings.FFA_LIMIT,
        tpc=settings.TPC_LIMIT,
        pv=settings.PV_LIMIT,
    )
    local = SimulatedPredictor(limits=limits)

    if not settings.PREDICTION_API_URL:
        logger.info("🧪 No PREDICTION_API_URL configured, using local simulation")
        return local

    logger.info(f"🔗 Prediction service: {settings.PREDICTION_API_URL}")
    remote = RemotePredictor(settings.PREDICTION_API_URL, timeout=settings.PREDICTION_TIMEOUT_S)
    return FallbackPredictor(remote, local)
