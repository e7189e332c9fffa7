"""
Rules Module — Compliance Classification & Score Aggregation

Public API:
- classify: Per-parameter ratio classification (PASS/BORDERLINE/REJECT)
- aggregate: FFA + TPC + PV -> ScoreResult (0-100 oil health score)
- RegulatoryLimits / STANDARDS: Regional limit presets
"""

from .classifier import (
    ComplianceStatus,
    ParameterReading,
    classify,
    validate_limit,
    RATIO_PASS_MAX,
    RATIO_BORDERLINE_MAX,
)
from .standards import (
    RegulatoryLimits,
    RegulatoryStandard,
    STANDARDS,
    DEFAULT_STANDARD,
    get_standard,
    merge_limits,
    resolve_limits,
)
from .aggregator import (
    ScoreResult,
    aggregate,
    classify_score,
    component_score,
    generate_recommendations,
    SCORE_PASS_MIN,
    SCORE_BORDERLINE_MIN,
)

__all__ = [
    "ComplianceStatus",
    "ParameterReading",
    "classify",
    "validate_limit",
    "RATIO_PASS_MAX",
    "RATIO_BORDERLINE_MAX",
    "RegulatoryLimits",
    "RegulatoryStandard",
    "STANDARDS",
    "DEFAULT_STANDARD",
    "get_standard",
    "merge_limits",
    "resolve_limits",
    "ScoreResult",
    "aggregate",
    "classify_score",
    "component_score",
    "generate_recommendations",
    "SCORE_PASS_MIN",
    "SCORE_BORDERLINE_MIN",
]
