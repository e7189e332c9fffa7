"""
Regulatory Standards — Preset Limit Tables

FFA (% as oleic acid), TPC (%) and PV (meq O2/kg) limits per region.
These are plain constants; resolve_limits() applies per-field overrides.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from oiliq.rules.classifier import validate_limit


class RegulatoryLimits(BaseModel):
    """Upper limits for the three measured parameters."""
    model_config = ConfigDict(frozen=True)

    ffa: float = Field(default=0.3, description="Free Fatty Acid limit (%)")
    tpc: float = Field(default=25.0, description="Total Polar Compounds limit (%)")
    pv: float = Field(default=10.0, description="Peroxide Value limit (meq/kg)")

    @field_validator('ffa', 'tpc', 'pv')
    @classmethod
    def positive_limit(cls, v: float, info: ValidationInfo) -> float:
        return validate_limit(v, info.field_name)


class RegulatoryStandard(BaseModel):
    """A named regulatory preset."""
    code: str
    name: str
    reference: str
    limits: RegulatoryLimits


DEFAULT_STANDARD = "fssai"

STANDARDS: Dict[str, RegulatoryStandard] = {
    "fssai": RegulatoryStandard(
        code="fssai",
        name="FSSAI (India)",
        reference="FSSAI Regulations 2011",
        limits=RegulatoryLimits(ffa=0.3, tpc=25.0, pv=10.0),
    ),
    "eu": RegulatoryStandard(
        code="eu",
        name="European Union",
        reference="Council Regulation (EC) No 1925/2006",
        limits=RegulatoryLimits(ffa=0.3, tpc=25.0, pv=10.0),
    ),
    "china": RegulatoryStandard(
        code="china",
        name="China (GB 2716-2018)",
        reference="GB 2716-2018",
        limits=RegulatoryLimits(ffa=0.5, tpc=27.0, pv=12.0),
    ),
    "codex": RegulatoryStandard(
        code="codex",
        name="Codex Alimentarius",
        reference="CODEX STAN 210-1999",
        limits=RegulatoryLimits(ffa=0.3, tpc=25.0, pv=10.0),
    ),
}


def get_standard(code: str) -> RegulatoryStandard:
    """
    Look up a preset by code (case-insensitive).

    Raises:
        KeyError: If the code is not a known standard
    """
    key = (code or "").strip().lower()
    if key not in STANDARDS:
        raise KeyError(f"Unknown regulatory standard '{code}'. Known: {sorted(STANDARDS)}")
    return STANDARDS[key]


def merge_limits(
    base: RegulatoryLimits,
    ffa: Optional[float] = None,
    tpc: Optional[float] = None,
    pv: Optional[float] = None,
) -> RegulatoryLimits:
    """
    Apply per-parameter overrides on top of an existing limit set.

    Raises:
        InvalidLimit: An override is not a positive finite number
    """
    merged = base.model_dump()
    for name, override in (("ffa", ffa), ("tpc", tpc), ("pv", pv)):
        if override is not None:
            merged[name] = validate_limit(override, name)
    return RegulatoryLimits(**merged)


def resolve_limits(
    standard: str = DEFAULT_STANDARD,
    ffa: Optional[float] = None,
    tpc: Optional[float] = None,
    pv: Optional[float] = None,
) -> RegulatoryLimits:
    """Preset limits for a standard with optional per-parameter overrides."""
    return merge_limits(get_standard(standard).limits, ffa=ffa, tpc=tpc, pv=pv)
