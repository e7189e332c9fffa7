"""
Score Aggregation Tests

Tests verify:
- Component score: 100 at zero, 0 at or beyond the limit
- Score = half-up rounded mean of the three components
- Score bands use named constants (75 / 50)
- Symmetry: permuting parameters (with their limits) keeps the score
- NaN / infinite / negative readings raise InvalidReading
- Invalid limits raise InvalidLimit
"""

import math
from datetime import datetime, timezone
from itertools import permutations

import pytest
from pydantic import ValidationError

from oiliq.exceptions import InvalidLimit, InvalidReading
from oiliq.rules.aggregator import (
    ScoreResult,
    aggregate,
    classify_score,
    component_score,
    generate_recommendations,
    round_half_up,
    RECOMMENDATION_NOMINAL,
    SCORE_PASS_MIN,
    SCORE_BORDERLINE_MIN,
)
from oiliq.rules.classifier import ComplianceStatus
from oiliq.rules.standards import RegulatoryLimits


FSSAI = {"ffa": 0.3, "tpc": 25.0, "pv": 10.0}


class TestRoundHalfUp:

    @pytest.mark.parametrize("x, expected", [(12.5, 13), (0.5, 1), (2.5, 3), (2.49, 2), (0.0, 0)])
    def test_halves_round_up(self, x, expected):
        assert round_half_up(x) == expected


class TestComponentScore:

    def test_zero_value_scores_full(self):
        assert component_score(0.0, 10.0) == 100.0

    def test_at_limit_scores_zero(self):
        assert component_score(10.0, 10.0) == 0.0

    def test_beyond_limit_clamped_to_zero(self):
        assert component_score(30.0, 10.0) == 0.0

    def test_linear_in_ratio(self):
        assert component_score(5.0, 10.0) == pytest.approx(50.0)


class TestAggregate:

    def test_reference_readings(self):
        """
        0.18/0.3, 18.5/25, 8.2/10 -> components 40, 26, 18.
        The mean is 28, which bands as REJECT.
        """
        result = aggregate(0.18, 18.5, 8.2, FSSAI)

        assert result.score == 28
        assert result.classification == ComplianceStatus.REJECT

    def test_fresh_oil_scores_100(self):
        result = aggregate(0.0, 0.0, 0.0)
        assert result.score == 100
        assert result.classification == ComplianceStatus.PASS

    def test_all_at_limit_scores_0(self):
        result = aggregate(0.3, 25.0, 10.0)
        assert result.score == 0
        assert result.classification == ComplianceStatus.REJECT

    def test_score_bounds(self):
        for readings in [(0, 0, 0), (0.1, 5, 2), (0.3, 25, 10), (5, 500, 100)]:
            result = aggregate(*readings)
            assert 0 <= result.score <= 100

    def test_defaults_to_fssai_limits(self):
        assert aggregate(0.1, 10.0, 4.0).score == aggregate(0.1, 10.0, 4.0, FSSAI).score

    def test_accepts_limits_model(self):
        limits = RegulatoryLimits(ffa=0.5, tpc=27.0, pv=12.0)
        result = aggregate(0.25, 13.5, 6.0, limits)
        assert result.score == 50
        assert result.classification == ComplianceStatus.BORDERLINE

    def test_symmetric_under_permutation(self):
        """Permuting (reading, limit) pairs never changes the score."""
        pairs = [(0.12, 0.3), (9.0, 25.0), (2.5, 10.0)]
        expected = aggregate(0.12, 9.0, 2.5, FSSAI).score

        for perm in permutations(pairs):
            (a, la), (b, lb), (c, lc) = perm
            result = aggregate(a, b, c, {"ffa": la, "tpc": lb, "pv": lc})
            assert result.score == expected

    def test_passes_readings_and_confidence_through(self):
        ts = datetime(2024, 1, 15, 14, 32, tzinfo=timezone.utc)
        result = aggregate(0.18, 18.5, 8.2, confidence=94.2, timestamp=ts)

        assert result.ffa == 0.18
        assert result.tpc == 18.5
        assert result.pv == 8.2
        assert result.confidence == 94.2
        assert result.timestamp == ts

    def test_naive_timestamp_becomes_utc(self):
        result = aggregate(0.1, 5.0, 2.0, timestamp=datetime(2024, 1, 15, 12, 0))
        assert result.timestamp.tzinfo == timezone.utc

    def test_result_is_frozen(self):
        result = aggregate(0.1, 5.0, 2.0)
        with pytest.raises(ValidationError):
            result.score = 99

    def test_deterministic(self):
        scores = {aggregate(0.18, 18.5, 8.2).score for _ in range(10)}
        assert scores == {28}


class TestInvalidReadings:

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf, -0.01, None, "abc"])
    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_bad_reading_rejected(self, bad, position):
        readings = [0.1, 10.0, 4.0]
        readings[position] = bad
        with pytest.raises(InvalidReading):
            aggregate(*readings)

    def test_invalid_reading_names_parameter(self):
        with pytest.raises(InvalidReading) as exc_info:
            aggregate(0.1, math.nan, 4.0)
        assert exc_info.value.parameter == "tpc"

    @pytest.mark.parametrize("confidence", [-1.0, 100.5, math.nan])
    def test_bad_confidence_rejected(self, confidence):
        with pytest.raises(InvalidReading):
            aggregate(0.1, 10.0, 4.0, confidence=confidence)

    @pytest.mark.parametrize("limits", [
        {"ffa": 0.0, "tpc": 25.0, "pv": 10.0},
        {"ffa": 0.3, "tpc": -25.0, "pv": 10.0},
        {"ffa": 0.3, "tpc": 25.0, "pv": math.nan},
    ])
    def test_bad_limits_rejected(self, limits):
        with pytest.raises(InvalidLimit):
            aggregate(0.1, 10.0, 4.0, limits)


class TestScoreBands:

    def test_uses_named_constants(self):
        assert isinstance(SCORE_PASS_MIN, int)
        assert isinstance(SCORE_BORDERLINE_MIN, int)
        assert SCORE_BORDERLINE_MIN < SCORE_PASS_MIN

    def test_band_edges(self):
        assert classify_score(100) == ComplianceStatus.PASS
        assert classify_score(SCORE_PASS_MIN) == ComplianceStatus.PASS
        assert classify_score(SCORE_PASS_MIN - 1) == ComplianceStatus.BORDERLINE
        assert classify_score(SCORE_BORDERLINE_MIN) == ComplianceStatus.BORDERLINE
        assert classify_score(SCORE_BORDERLINE_MIN - 1) == ComplianceStatus.REJECT
        assert classify_score(0) == ComplianceStatus.REJECT

    def test_monotonic(self):
        """Higher score never gives a more severe band."""
        severities = [classify_score(s).severity for s in range(101)]
        assert severities == sorted(severities, reverse=True)


class TestRecommendations:

    def _result(self, ffa, tpc, pv) -> ScoreResult:
        return aggregate(ffa, tpc, pv)

    def test_nominal_when_nothing_triggers(self):
        assert generate_recommendations(self._result(0.1, 10.0, 4.0)) == [RECOMMENDATION_NOMINAL]

    def test_ffa_trigger_above_two_thirds_of_limit(self):
        recs = generate_recommendations(self._result(0.25, 10.0, 4.0))
        assert len(recs) == 1
        assert "FFA" in recs[0]

    def test_all_triggers(self):
        recs = generate_recommendations(self._result(0.28, 22.0, 9.0))
        assert len(recs) == 3
        assert RECOMMENDATION_NOMINAL not in recs

    def test_uses_supplied_limits(self):
        china = RegulatoryLimits(ffa=0.5, tpc=27.0, pv=12.0)
        recs = generate_recommendations(self._result(0.25, 10.0, 4.0), china)
        assert recs == [RECOMMENDATION_NOMINAL]
