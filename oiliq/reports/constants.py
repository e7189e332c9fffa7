"""
Report Constants — Colors, Wording, Layout

All report configuration centralized for maintainability and auditability.
This file is the single source of truth for what the compliance report says.
"""

from reportlab.lib.colors import HexColor, Color

from oiliq.rules.classifier import ComplianceStatus

# =============================================================================
# BRANDING
# =============================================================================

PRODUCT_NAME = "FoodOil IQ"
PRODUCT_TAGLINE = "Smart Oil Quality Testing"
REPORT_TITLE = "OIL QUALITY TEST REPORT"
FOOTER_TEXT = "FoodOil IQ - Smart Oil Quality Testing Platform"
FILENAME_PREFIX = "FoodOilIQ_Report"

# =============================================================================
# COLOR PALETTE
# =============================================================================

PRIMARY: Color = HexColor("#1e4066")       # Deep blue - header band, headings
SECONDARY: Color = HexColor("#228b71")     # Teal - accents
SUCCESS: Color = HexColor("#228b48")       # Green - passed
WARNING: Color = HexColor("#f59e0b")       # Amber - borderline
DANGER: Color = HexColor("#dc2626")        # Red - rejected

# Grayscale
GRAY_DARK: Color = HexColor("#3c3c3c")     # Certificate body
GRAY_MEDIUM: Color = HexColor("#646464")   # Secondary text
GRAY_LIGHT: Color = HexColor("#969696")    # Footer text
GRAY_RULE: Color = HexColor("#c8c8c8")     # Footer rule
CERT_BG: Color = HexColor("#f5f7fa")       # Certificate panel
WHITE: Color = HexColor("#ffffff")

# Status badge: (label, color) keyed by classification
STATUS_BADGES: dict[ComplianceStatus, tuple[str, Color]] = {
    ComplianceStatus.PASS: ("PASSED", SUCCESS),
    ComplianceStatus.BORDERLINE: ("BORDERLINE", WARNING),
    ComplianceStatus.REJECT: ("REJECTED", DANGER),
}

# =============================================================================
# PARAMETER TABLE
# =============================================================================

WITHIN_LIMITS = "Within Limits"
EXCEEDED = "Exceeded"

# (field, display name, unit, decimals)
PARAMETER_ROWS: list[tuple[str, str, str, int]] = [
    ("ffa", "Free Fatty Acid (FFA)", "%", 2),
    ("tpc", "Total Polar Compounds (TPC)", "%", 1),
    ("pv", "Peroxide Value (PV)", "meq/kg", 1),
]

# =============================================================================
# CERTIFICATE & DISCLAIMER TEXT
# =============================================================================

CERTIFICATE_TITLE = "COMPLIANCE CERTIFICATE"

CERTIFICATE_TEXT: dict[ComplianceStatus, str] = {
    ComplianceStatus.PASS: (
        "This oil sample has been tested and meets the quality standards as per "
        "FSSAI/Codex Alimentarius guidelines. The oil is suitable for continued "
        "use in food preparation."
    ),
    ComplianceStatus.BORDERLINE: (
        "This oil sample shows parameters approaching regulatory limits. Increased "
        "monitoring frequency is recommended. Consider replacement if values "
        "continue to rise."
    ),
    ComplianceStatus.REJECT: (
        "This oil sample has FAILED to meet regulatory standards and is NOT "
        "recommended for food preparation. Immediate replacement is required."
    ),
}

DISCLAIMER_TEXT = (
    "Disclaimer: This is an AI-assisted screening tool. For borderline or rejected "
    "samples, laboratory confirmation is recommended. Results should be interpreted "
    "by qualified food safety personnel."
)

NOT_AVAILABLE = "N/A"

# =============================================================================
# PDF LAYOUT CONSTANTS
# =============================================================================

PAGE_MARGIN_CM: float = 2.0
HEADER_BAND_HEIGHT_CM: float = 3.5
FOOTER_OFFSET_CM: float = 1.5

# Font sizes
FONT_SIZE_BRAND: int = 24
FONT_SIZE_HEADING: int = 14
FONT_SIZE_BADGE: int = 12
FONT_SIZE_SCORE: int = 20
FONT_SIZE_BODY: int = 10
FONT_SIZE_CERT: int = 9
FONT_SIZE_SMALL: int = 8

SCORE_BADGE_RADIUS: float = 28.0
