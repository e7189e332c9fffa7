"""
Compliance Classifier — Per-Parameter Status Against a Regulatory Limit

Maps a single measured value onto PASS / BORDERLINE / REJECT using its
ratio to the configured limit.

Constraints:
- Deterministic, no side effects
- Named ratio thresholds (no magic numbers)
- Lower bounds inclusive: ratio == 0.7 is PASS, ratio == 1.0 is BORDERLINE,
  within RATIO_TOLERANCE so decimal inputs on a boundary land inside it
- Limit must be > 0; the value itself is not validated
"""

import math
from dataclasses import dataclass
from enum import Enum

from oiliq.exceptions import InvalidLimit


# ============================================================================
# THRESHOLD CONSTANTS
# ============================================================================

RATIO_PASS_MAX = 0.7        # value/limit at or below this = PASS
RATIO_BORDERLINE_MAX = 1.0  # value/limit at or below this = BORDERLINE
# Above RATIO_BORDERLINE_MAX = REJECT

# Slack for float error in value/limit, e.g. 0.07 / 0.1 == 0.7000000000000001
RATIO_TOLERANCE = 1e-9


class ComplianceStatus(str, Enum):
    """Compliance classification. Values match the dashboard's JSON."""
    PASS = "pass"
    BORDERLINE = "borderline"
    REJECT = "reject"

    @property
    def severity(self) -> int:
        """Ordering helper: 0 = PASS, 2 = REJECT."""
        return _SEVERITY[self]


_SEVERITY = {
    ComplianceStatus.PASS: 0,
    ComplianceStatus.BORDERLINE: 1,
    ComplianceStatus.REJECT: 2,
}


def validate_limit(limit: float, parameter: str = "limit") -> float:
    """Raise InvalidLimit unless limit is a positive finite number."""
    if limit is None or isinstance(limit, bool):
        raise InvalidLimit(limit, parameter)
    try:
        limit = float(limit)
    except (TypeError, ValueError):
        raise InvalidLimit(limit, parameter)
    if not math.isfinite(limit) or limit <= 0:
        raise InvalidLimit(limit, parameter)
    return limit


def classify(value: float, limit: float) -> ComplianceStatus:
    """
    Classify a parameter value against its regulatory limit.

    Args:
        value: Measured value (zero or negative passes through unchecked)
        limit: Regulatory limit, must be > 0

    Returns:
        PASS if value/limit <= 0.7, BORDERLINE if <= 1.0, else REJECT

    Raises:
        InvalidLimit: If limit is not a positive finite number
    """
    limit = validate_limit(limit)
    ratio = value / limit

    if ratio <= RATIO_PASS_MAX + RATIO_TOLERANCE:
        return ComplianceStatus.PASS
    elif ratio <= RATIO_BORDERLINE_MAX + RATIO_TOLERANCE:
        return ComplianceStatus.BORDERLINE
    else:
        return ComplianceStatus.REJECT


@dataclass(frozen=True)
class ParameterReading:
    """A single measured parameter together with its limit."""
    name: str
    value: float
    unit: str
    limit: float

    def __post_init__(self):
        validate_limit(self.limit, self.name)

    @property
    def ratio(self) -> float:
        return self.value / self.limit

    @property
    def status(self) -> ComplianceStatus:
        """Derived on every access, never stored."""
        return classify(self.value, self.limit)
