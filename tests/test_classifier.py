"""
Per-Parameter Classification Tests

Tests verify:
- Ratio bands: <= 0.7 PASS, <= 1.0 BORDERLINE, above REJECT
- Inclusive boundaries at exactly 0.7 and 1.0
- Non-positive / non-finite limits raise InvalidLimit
- Zero and negative values pass through unchecked
- Severity is monotonic in value for a fixed limit
"""

import math

import pytest

from oiliq.exceptions import InvalidLimit
from oiliq.rules.classifier import (
    ComplianceStatus,
    ParameterReading,
    classify,
    validate_limit,
    RATIO_PASS_MAX,
    RATIO_BORDERLINE_MAX,
)


class TestClassify:
    """Test ratio-based classification."""

    def test_documented_examples(self):
        assert classify(0.2, 0.3) == ComplianceStatus.PASS
        assert classify(0.25, 0.3) == ComplianceStatus.BORDERLINE
        assert classify(0.35, 0.3) == ComplianceStatus.REJECT

    def test_pass_boundary_is_inclusive(self):
        """ratio == 0.7 is PASS."""
        assert classify(7.0, 10.0) == ComplianceStatus.PASS
        assert classify(0.7, 1.0) == ComplianceStatus.PASS

    def test_borderline_boundary_is_inclusive(self):
        """ratio == 1.0 is BORDERLINE, not REJECT."""
        assert classify(10.0, 10.0) == ComplianceStatus.BORDERLINE
        assert classify(25.0, 25.0) == ComplianceStatus.BORDERLINE

    @pytest.mark.parametrize("value, limit, expected", [
        (0.07, 0.1, ComplianceStatus.PASS),
        (0.21, 0.3, ComplianceStatus.PASS),
        (0.3, 0.3, ComplianceStatus.BORDERLINE),
        (17.5, 25.0, ComplianceStatus.PASS),
    ])
    def test_decimal_inputs_on_boundary(self, value, limit, expected):
        """Float error in value/limit does not push a boundary value outward."""
        assert classify(value, limit) == expected

    def test_just_above_limit_rejects(self):
        assert classify(10.01, 10.0) == ComplianceStatus.REJECT

    def test_zero_and_negative_values_pass_through(self):
        assert classify(0.0, 10.0) == ComplianceStatus.PASS
        assert classify(-5.0, 10.0) == ComplianceStatus.PASS

    def test_uses_named_constants(self):
        assert RATIO_PASS_MAX == 0.7
        assert RATIO_BORDERLINE_MAX == 1.0
        assert RATIO_PASS_MAX < RATIO_BORDERLINE_MAX

    def test_deterministic(self):
        for _ in range(10):
            assert classify(0.25, 0.3) == ComplianceStatus.BORDERLINE

    @pytest.mark.parametrize("limit", [0.1, 0.3, 0.5, 10.0, 12.0, 25.0, 27.0])
    def test_severity_never_decreases_as_value_grows(self, limit):
        steps = 400
        values = [2 * limit * i / steps for i in range(steps + 1)]
        severities = [classify(v, limit).severity for v in values]

        assert severities == sorted(severities)
        assert severities[0] == ComplianceStatus.PASS.severity
        assert severities[-1] == ComplianceStatus.REJECT.severity


class TestInvalidLimit:
    """Limits must be positive finite numbers."""

    @pytest.mark.parametrize("limit", [0, 0.0, -1.0, math.nan, math.inf, None, True])
    def test_invalid_limits_raise(self, limit):
        with pytest.raises(InvalidLimit):
            classify(1.0, limit)

    def test_invalid_limit_is_value_error(self):
        with pytest.raises(ValueError):
            classify(1.0, 0)

    def test_validate_limit_names_parameter(self):
        with pytest.raises(InvalidLimit) as exc_info:
            validate_limit(-2, "tpc")
        assert exc_info.value.parameter == "tpc"
        assert "tpc" in str(exc_info.value)

    def test_validate_limit_returns_float(self):
        assert validate_limit(25) == 25.0
        assert isinstance(validate_limit(25), float)


class TestComplianceStatus:

    def test_values_are_lowercase_strings(self):
        assert ComplianceStatus.PASS.value == "pass"
        assert ComplianceStatus.BORDERLINE.value == "borderline"
        assert ComplianceStatus.REJECT.value == "reject"

    def test_severity_ordering(self):
        assert (
            ComplianceStatus.PASS.severity
            < ComplianceStatus.BORDERLINE.severity
            < ComplianceStatus.REJECT.severity
        )


class TestParameterReading:

    def test_status_derived_from_ratio(self):
        reading = ParameterReading(name="tpc", value=20.0, unit="%", limit=25.0)
        assert reading.ratio == pytest.approx(0.8)
        assert reading.status == ComplianceStatus.BORDERLINE

    def test_rejects_non_positive_limit(self):
        with pytest.raises(InvalidLimit):
            ParameterReading(name="pv", value=5.0, unit="meq/kg", limit=0.0)

    def test_is_immutable(self):
        reading = ParameterReading(name="ffa", value=0.1, unit="%", limit=0.3)
        with pytest.raises(AttributeError):
            reading.value = 0.5
