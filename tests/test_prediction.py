"""
Prediction Seam Tests

Tests verify:
- Seeded simulation is deterministic and self-consistent with the aggregator
- RemotePredictor maps timeouts, network and HTTP errors to PredictionError
- FallbackPredictor never surfaces PredictionError to the caller
- build_predictor wiring from Settings
"""

import random

import pytest
import requests

from oiliq.config import Settings
from oiliq.exceptions import PredictionError
from oiliq.prediction import (
    FallbackPredictor,
    LOCAL_MODEL_VERSION,
    PredictionResult,
    RemotePredictor,
    SensorData,
    SimulatedPredictor,
    build_predictor,
    simulate_sensor_capture,
)
from oiliq.prediction import predictor as predictor_module
from oiliq.rules import ComplianceStatus, aggregate


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


REMOTE_PAYLOAD = {
    "ffa": 0.12,
    "tpc": 11.0,
    "pv": 3.5,
    "score": 67,
    "classification": "borderline",
    "confidence": 91.0,
    "timestamp": "2024-01-15T10:00:00Z",
    "recommendations": ["All parameters within optimal range"],
    "modelVersion": "remote-2.1",
}


@pytest.fixture
def capture() -> SensorData:
    return simulate_sensor_capture("BATCH-TEST", rng=random.Random(7))


class TestSensorCapture:

    def test_capture_shape(self, capture):
        assert len(capture.spectral_features) == 10
        assert 0.0 <= capture.humidity <= 100.0
        assert capture.sample_id == "BATCH-TEST"

    def test_wire_names_are_camel_case(self, capture):
        payload = capture.model_dump(by_alias=True)
        assert "spectralFeatures" in payload
        assert "sampleId" in payload

    def test_accepts_camel_case_input(self):
        data = SensorData.model_validate({
            "spectralFeatures": [0.1, 0.2],
            "temperature": 23.0,
            "humidity": 50.0,
            "sampleId": "S-1",
        })
        assert data.sample_id == "S-1"


class TestSimulatedPredictor:

    def test_seeded_runs_are_identical(self, capture):
        first = SimulatedPredictor(seed=42).predict(capture)
        second = SimulatedPredictor(seed=42).predict(capture)

        assert (first.ffa, first.tpc, first.pv, first.score) == \
            (second.ffa, second.tpc, second.pv, second.score)

    def test_reset_replays_sequence(self, capture):
        predictor = SimulatedPredictor(seed=3)
        first = predictor.predict(capture)
        predictor.reset()
        assert predictor.predict(capture).score == first.score

    def test_score_consistent_with_aggregator(self, capture):
        predictor = SimulatedPredictor(seed=1)
        for _ in range(20):
            result = predictor.predict(capture)
            expected = aggregate(result.ffa, result.tpc, result.pv)
            assert result.score == expected.score
            assert result.classification == expected.classification

    def test_readings_within_simulated_ranges(self, capture):
        predictor = SimulatedPredictor(seed=5)
        for _ in range(50):
            result = predictor.predict(capture)
            assert 0.10 <= result.ffa <= 0.35
            assert 10.0 <= result.tpc <= 28.0
            assert 3.0 <= result.pv <= 12.0
            assert 85.0 <= result.confidence <= 97.0

    def test_reports_local_model_version(self, capture):
        result = SimulatedPredictor(seed=1).predict(capture)
        assert result.model_version == LOCAL_MODEL_VERSION
        assert result.recommendations


class TestRemotePredictor:

    def test_parses_camel_case_payload(self, capture, monkeypatch):
        calls = {}

        def fake_post(url, json, timeout):
            calls.update(url=url, json=json, timeout=timeout)
            return FakeResponse(200, REMOTE_PAYLOAD)

        monkeypatch.setattr(predictor_module.requests, "post", fake_post)

        result = RemotePredictor("http://models.local/api/", timeout=5.0).predict(capture)

        assert isinstance(result, PredictionResult)
        assert result.score == 67
        assert result.classification == ComplianceStatus.BORDERLINE
        assert result.model_version == "remote-2.1"
        assert calls["url"] == "http://models.local/api/predict"
        assert calls["timeout"] == 5.0
        assert "spectralFeatures" in calls["json"]

    def test_timeout_raises_prediction_error(self, capture, monkeypatch):
        def fake_post(*args, **kwargs):
            raise requests.exceptions.Timeout()

        monkeypatch.setattr(predictor_module.requests, "post", fake_post)

        with pytest.raises(PredictionError, match="timeout"):
            RemotePredictor("http://models.local").predict(capture)

    def test_connection_error_raises_prediction_error(self, capture, monkeypatch):
        def fake_post(*args, **kwargs):
            raise requests.exceptions.ConnectionError("refused")

        monkeypatch.setattr(predictor_module.requests, "post", fake_post)

        with pytest.raises(PredictionError):
            RemotePredictor("http://models.local").predict(capture)

    def test_http_error_uses_service_message(self, capture, monkeypatch):
        monkeypatch.setattr(
            predictor_module.requests, "post",
            lambda *a, **kw: FakeResponse(503, {"message": "Model warming up"})
        )

        with pytest.raises(PredictionError, match="Model warming up"):
            RemotePredictor("http://models.local").predict(capture)

    def test_http_error_without_body(self, capture, monkeypatch):
        monkeypatch.setattr(
            predictor_module.requests, "post",
            lambda *a, **kw: FakeResponse(500)
        )

        with pytest.raises(PredictionError, match="500"):
            RemotePredictor("http://models.local").predict(capture)

    def test_malformed_payload(self, capture, monkeypatch):
        monkeypatch.setattr(
            predictor_module.requests, "post",
            lambda *a, **kw: FakeResponse(200, {"score": "high"})
        )

        with pytest.raises(PredictionError):
            RemotePredictor("http://models.local").predict(capture)

    def test_health_check_offline(self, monkeypatch):
        def fake_get(*args, **kwargs):
            raise requests.exceptions.ConnectionError()

        monkeypatch.setattr(predictor_module.requests, "get", fake_get)

        health = RemotePredictor("http://models.local").health_check()
        assert health == {"status": "offline", "version": "local-simulation"}


class TestFallbackPredictor:

    def test_falls_back_on_prediction_error(self, capture, monkeypatch):
        def fake_post(*args, **kwargs):
            raise requests.exceptions.Timeout()

        monkeypatch.setattr(predictor_module.requests, "post", fake_post)

        predictor = FallbackPredictor(
            RemotePredictor("http://models.local"),
            SimulatedPredictor(seed=42),
        )
        result = predictor.predict(capture)

        assert result.model_version == LOCAL_MODEL_VERSION

    def test_uses_primary_when_healthy(self, capture, monkeypatch):
        monkeypatch.setattr(
            predictor_module.requests, "post",
            lambda *a, **kw: FakeResponse(200, REMOTE_PAYLOAD)
        )

        predictor = FallbackPredictor(RemotePredictor("http://models.local"))
        assert predictor.predict(capture).model_version == "remote-2.1"


class TestBuildPredictor:

    def test_simulation_when_no_url(self):
        predictor = build_predictor(Settings(PREDICTION_API_URL=""))
        assert isinstance(predictor, SimulatedPredictor)

    def test_fallback_chain_when_url_set(self):
        predictor = build_predictor(Settings(PREDICTION_API_URL="http://models.local"))
        assert isinstance(predictor, FallbackPredictor)
        assert isinstance(predictor.primary, RemotePredictor)
        assert isinstance(predictor.fallback, SimulatedPredictor)

    def test_simulation_uses_configured_limits(self):
        predictor = build_predictor(Settings(REGULATORY_STANDARD="china", PREDICTION_API_URL=""))
        assert predictor.limits.ffa == 0.5
