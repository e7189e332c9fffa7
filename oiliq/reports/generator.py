"""
Reporting Layer — PDF Compliance Report and Excel Export

Produces auditable outputs from finalized test results.
The "Snapshot Rule": Reports use the stored result, NOT recomputed values.

Constraints:
- Single A4 page, sections in fixed order:
  header band, status badge, test information, score + parameter table,
  confidence, compliance certificate, disclaimer, footer
- Required metadata missing -> MissingField, no partial document
- Operator name is the only field with a display default ("N/A")
- Invariant PDF mode: same data + same generated_at = same bytes
- Filename: FoodOilIQ_Report_{BatchID}_{YYYY-MM-DD}.pdf
"""

import logging
from io import BytesIO
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib.colors import Color
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, HRFlowable
)
from reportlab.platypus.flowables import Flowable
from pydantic import BaseModel, ConfigDict, Field

from oiliq.exceptions import MissingField
from oiliq.rules.aggregator import ScoreResult
from oiliq.rules.classifier import ComplianceStatus
from oiliq.rules.standards import RegulatoryLimits
from oiliq.reports.constants import (
    PRODUCT_NAME, PRODUCT_TAGLINE, REPORT_TITLE, FOOTER_TEXT, FILENAME_PREFIX,
    PRIMARY, SUCCESS, DANGER, GRAY_DARK, GRAY_MEDIUM, GRAY_LIGHT, GRAY_RULE,
    CERT_BG, WHITE,
    STATUS_BADGES, PARAMETER_ROWS, WITHIN_LIMITS, EXCEEDED,
    CERTIFICATE_TITLE, CERTIFICATE_TEXT, DISCLAIMER_TEXT, NOT_AVAILABLE,
    PAGE_MARGIN_CM, HEADER_BAND_HEIGHT_CM, FOOTER_OFFSET_CM,
    FONT_SIZE_BRAND, FONT_SIZE_HEADING, FONT_SIZE_BADGE, FONT_SIZE_SCORE,
    FONT_SIZE_BODY, FONT_SIZE_CERT, FONT_SIZE_SMALL, SCORE_BADGE_RADIUS,
)


logger = logging.getLogger(__name__)


PAGE_WIDTH, PAGE_HEIGHT = A4
CONTENT_WIDTH = PAGE_WIDTH - (2 * PAGE_MARGIN_CM * cm)

REQUIRED_FIELDS: Tuple[str, ...] = (
    "batch_id",
    "test_date",
    "station_name",
    "location",
    "equipment",
    "oil_type",
    "results",
)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


# =============================================================================
# INPUT SNAPSHOT
# =============================================================================

class ReportData(BaseModel):
    """
    Read-only snapshot consumed once by the report composer.

    Metadata fields are Optional so an incomplete snapshot can be built and
    rejected by the composer with MissingField instead of a schema error.
    """
    model_config = ConfigDict(frozen=True)

    batch_id: Optional[str] = None
    test_date: Optional[datetime] = None
    station_name: Optional[str] = None
    location: Optional[str] = None
    equipment: Optional[str] = None
    oil_type: Optional[str] = None
    results: Optional[ScoreResult] = None
    limits: RegulatoryLimits = Field(default_factory=RegulatoryLimits)

    operator_name: Optional[str] = None
    company_name: Optional[str] = None
    company_address: Optional[str] = None


def validate_report_data(data: ReportData) -> None:
    """
    Raise MissingField for the first absent or blank required field.
    """
    for field in REQUIRED_FIELDS:
        value = getattr(data, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise MissingField(field)


# =============================================================================
# HELPERS
# =============================================================================

def to_base36(number: int) -> str:
    """Non-negative integer to lowercase base-36."""
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def generate_certificate_id(batch_id: str, generated_at: datetime) -> str:
    """
    Certificate ID: CERT-{batchId}-{BASE36(epoch milliseconds)}
    """
    millis = int(generated_at.timestamp() * 1000)
    return f"CERT-{batch_id}-{to_base36(millis).upper()}"


def generate_filename(batch_id: str, timestamp: datetime) -> str:
    """
    Generate filename following pattern: FoodOilIQ_Report_{BatchID}_{YYYY-MM-DD}.pdf
    """
    safe_batch_id = batch_id.replace(' ', '_').replace('/', '-')
    return f"{FILENAME_PREFIX}_{safe_batch_id}_{timestamp.date().isoformat()}.pdf"


def get_status_badge(classification: ComplianceStatus) -> Tuple[str, Color]:
    """Badge label and color for a classification."""
    return STATUS_BADGES[ComplianceStatus(classification)]


def get_certificate_text(classification: ComplianceStatus) -> str:
    """Certificate body for a classification."""
    return CERTIFICATE_TEXT[ComplianceStatus(classification)]


def _format_number(value: float, decimals: Optional[int] = None) -> str:
    if decimals is None:
        return f"{value:g}"
    return f"{value:.{decimals}f}"


def _format_utc(ts: datetime, fmt: str = '%Y-%m-%d %H:%M UTC') -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime(fmt)


def build_parameter_rows(results: ScoreResult, limits: RegulatoryLimits) -> List[List[str]]:
    """
    Rows for the parameter table: name, value, limit, limit flag.

    The flag is a plain value <= limit check, separate from the ratio-based
    per-parameter classification and the score bands.
    """
    rows = []
    for field, label, unit, decimals in PARAMETER_ROWS:
        value = getattr(results, field)
        limit = getattr(limits, field)
        rows.append([
            label,
            f"{_format_number(value, decimals)} {unit}",
            f"<= {_format_number(limit)} {unit}",
            WITHIN_LIMITS if value <= limit else EXCEEDED,
        ])
    return rows


# =============================================================================
# STYLE DEFINITIONS
# =============================================================================

def get_report_styles() -> Dict[str, ParagraphStyle]:
    """Get all paragraph styles for the report."""
    base_styles = getSampleStyleSheet()

    return {
        'company': ParagraphStyle(
            'Company',
            parent=base_styles['Normal'],
            fontSize=FONT_SIZE_BODY,
            textColor=GRAY_MEDIUM,
            leading=13,
        ),
        'section_header': ParagraphStyle(
            'SectionHeader',
            parent=base_styles['Heading2'],
            fontSize=FONT_SIZE_HEADING,
            spaceBefore=10,
            spaceAfter=6,
            textColor=PRIMARY,
            fontName='Helvetica-Bold',
        ),
        'badge': ParagraphStyle(
            'Badge',
            parent=base_styles['Normal'],
            fontSize=FONT_SIZE_BADGE,
            alignment=TA_CENTER,
            textColor=WHITE,
            fontName='Helvetica-Bold',
        ),
        'confidence': ParagraphStyle(
            'Confidence',
            parent=base_styles['Normal'],
            fontSize=FONT_SIZE_BODY,
            textColor=GRAY_MEDIUM,
        ),
        'cert_title': ParagraphStyle(
            'CertTitle',
            parent=base_styles['Normal'],
            fontSize=FONT_SIZE_BADGE,
            alignment=TA_CENTER,
            textColor=PRIMARY,
            fontName='Helvetica-Bold',
        ),
        'cert_body': ParagraphStyle(
            'CertBody',
            parent=base_styles['Normal'],
            fontSize=FONT_SIZE_CERT,
            leading=12,
            alignment=TA_CENTER,
            textColor=GRAY_DARK,
        ),
        'cert_id': ParagraphStyle(
            'CertId',
            parent=base_styles['Normal'],
            fontSize=FONT_SIZE_SMALL,
            alignment=TA_CENTER,
            textColor=GRAY_DARK,
        ),
        'disclaimer': ParagraphStyle(
            'Disclaimer',
            parent=base_styles['Normal'],
            fontSize=FONT_SIZE_SMALL,
            leading=10,
            alignment=TA_LEFT,
            textColor=GRAY_LIGHT,
            fontName='Helvetica-Oblique',
        ),
    }


# =============================================================================
# CUSTOM FLOWABLES & CANVAS
# =============================================================================

class ScoreBadgeFlowable(Flowable):
    """Filled circle with the numeric score and a SCORE caption."""

    def __init__(self, score: int, color: Color, radius: float = SCORE_BADGE_RADIUS):
        Flowable.__init__(self)
        self.score = score
        self.color = color
        self.radius = radius
        self.width = radius * 2
        self.height = radius * 2

    def draw(self):
        canvas = self.canv
        cx, cy = self.radius, self.radius

        canvas.saveState()
        canvas.setFillColor(self.color)
        canvas.circle(cx, cy, self.radius, stroke=0, fill=1)

        canvas.setFillColor(WHITE)
        canvas.setFont("Helvetica-Bold", FONT_SIZE_SCORE)
        canvas.drawCentredString(cx, cy, str(self.score))
        canvas.setFont("Helvetica-Bold", FONT_SIZE_SMALL)
        canvas.drawCentredString(cx, cy - 12, "SCORE")
        canvas.restoreState()

    def wrap(self, availWidth, availHeight):
        return self.width, self.height


class NumberedCanvas(Canvas):
    """
    Canvas that defers page output so the footer can print "Page N of M".
    """

    def __init__(self, *args, **kwargs):
        Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(page_count)
            Canvas.showPage(self)
        Canvas.save(self)

    def _draw_footer(self, page_count: int) -> None:
        width = self._pagesize[0]
        footer_y = FOOTER_OFFSET_CM * cm
        margin = PAGE_MARGIN_CM * cm

        self.saveState()
        self.setStrokeColor(GRAY_RULE)
        self.setLineWidth(0.5)
        self.line(margin, footer_y + 10, width - margin, footer_y + 10)
        self.setFont("Helvetica", FONT_SIZE_SMALL)
        self.setFillColor(GRAY_LIGHT)
        self.drawString(margin, footer_y, FOOTER_TEXT)
        self.drawRightString(
            width - margin, footer_y,
            f"Page {self._pageNumber} of {page_count}"
        )
        self.restoreState()


def _header_band_painter(generated_at: datetime):
    """onPage callback drawing the branded header band."""

    def paint(canvas: Canvas, doc) -> None:
        width, height = doc.pagesize
        band_height = HEADER_BAND_HEIGHT_CM * cm
        margin = PAGE_MARGIN_CM * cm

        canvas.saveState()
        canvas.setFillColor(PRIMARY)
        canvas.rect(0, height - band_height, width, band_height, stroke=0, fill=1)

        canvas.setFillColor(WHITE)
        canvas.setFont("Helvetica-Bold", FONT_SIZE_BRAND)
        canvas.drawString(margin, height - 1.6 * cm, PRODUCT_NAME)
        canvas.setFont("Helvetica", FONT_SIZE_BODY)
        canvas.drawString(margin, height - 2.3 * cm, PRODUCT_TAGLINE)

        canvas.setFont("Helvetica-Bold", FONT_SIZE_BADGE)
        canvas.drawRightString(width - margin, height - 1.6 * cm, REPORT_TITLE)
        canvas.setFont("Helvetica", FONT_SIZE_CERT)
        canvas.drawRightString(
            width - margin, height - 2.3 * cm,
            f"Generated: {_format_utc(generated_at, '%Y-%m-%d %H:%M:%S UTC')}"
        )
        canvas.restoreState()

    return paint


# =============================================================================
# STORY SECTIONS
# =============================================================================

def _build_status_badge(classification: ComplianceStatus, styles) -> Table:
    label, color = get_status_badge(classification)
    badge = Table([[Paragraph(label, styles['badge'])]], colWidths=[4.5 * cm], hAlign='RIGHT')
    badge.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), color),
        ('ROUNDEDCORNERS', [4, 4, 4, 4]),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    return badge


def _build_info_table(data: ReportData) -> Table:
    rows = [
        ['Batch ID', data.batch_id],
        ['Test Date', _format_utc(data.test_date)],
        ['Station', data.station_name],
        ['Location', data.location],
        ['Equipment', data.equipment],
        ['Oil Type', data.oil_type],
        ['Operator', data.operator_name or NOT_AVAILABLE],
    ]
    table = Table(rows, colWidths=[4 * cm, 10 * cm], hAlign='LEFT')
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), FONT_SIZE_BODY),
        ('TEXTCOLOR', (0, 0), (-1, -1), GRAY_DARK),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ('TOPPADDING', (0, 0), (-1, -1), 2),
    ]))
    return table


def _build_results_block(data: ReportData) -> Table:
    _, badge_color = get_status_badge(data.results.classification)
    rows = build_parameter_rows(data.results, data.limits)

    param_table = Table(
        [['Parameter', 'Value', 'Limit', 'Status']] + rows,
        colWidths=[5.6 * cm, 2.4 * cm, 2.8 * cm, 2.6 * cm],
    )
    table_style = [
        ('BACKGROUND', (0, 0), (-1, 0), PRIMARY),
        ('TEXTCOLOR', (0, 0), (-1, 0), WHITE),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), FONT_SIZE_CERT),
        ('FONTNAME', (3, 1), (3, -1), 'Helvetica-Bold'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('INNERGRID', (0, 0), (-1, -1), 0.5, GRAY_RULE),
        ('BOX', (0, 0), (-1, -1), 0.5, GRAY_RULE),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]
    for row_idx, row in enumerate(rows, start=1):
        flag_color = DANGER if row[3] == EXCEEDED else SUCCESS
        table_style.append(('TEXTCOLOR', (3, row_idx), (3, row_idx), flag_color))
    param_table.setStyle(TableStyle(table_style))

    score_badge = ScoreBadgeFlowable(data.results.score, badge_color)

    block = Table(
        [[param_table, score_badge]],
        colWidths=[CONTENT_WIDTH - 2.6 * cm, 2.6 * cm],
    )
    block.setStyle(TableStyle([
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('ALIGN', (1, 0), (1, 0), 'CENTER'),
        ('LEFTPADDING', (0, 0), (0, 0), 0),
    ]))
    return block


def _build_certificate(data: ReportData, generated_at: datetime, styles) -> Table:
    certificate_id = generate_certificate_id(data.batch_id, generated_at)
    rows = [
        [Paragraph(CERTIFICATE_TITLE, styles['cert_title'])],
        [Paragraph(get_certificate_text(data.results.classification), styles['cert_body'])],
        [Paragraph(f"Certificate ID: {escape(certificate_id)}", styles['cert_id'])],
    ]
    panel = Table(rows, colWidths=[CONTENT_WIDTH])
    panel.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), CERT_BG),
        ('ROUNDEDCORNERS', [4, 4, 4, 4]),
        ('LEFTPADDING', (0, 0), (-1, -1), 16),
        ('RIGHTPADDING', (0, 0), (-1, -1), 16),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    return panel


def build_report_story(
    data: ReportData,
    generated_at: datetime,
    styles: Optional[Dict[str, ParagraphStyle]] = None
) -> list:
    """
    Build the flowables for the report body (header band and footer are
    painted on the canvas).

    Raises:
        MissingField: If required metadata is absent
    """
    validate_report_data(data)
    styles = styles or get_report_styles()
    story = []

    # === COMPANY INFO (optional) ===
    if data.company_name:
        company = escape(data.company_name)
        if data.company_address:
            company += f"<br/>{escape(data.company_address)}"
        story.append(Paragraph(company, styles['company']))

    # === STATUS BADGE ===
    story.append(_build_status_badge(data.results.classification, styles))
    story.append(Spacer(1, 8))

    # === TEST INFORMATION ===
    story.append(Paragraph("Test Information", styles['section_header']))
    story.append(HRFlowable(width=6 * cm, thickness=1, color=PRIMARY, hAlign='LEFT'))
    story.append(Spacer(1, 4))
    story.append(_build_info_table(data))
    story.append(Spacer(1, 10))

    # === TEST RESULTS ===
    story.append(Paragraph("Test Results", styles['section_header']))
    story.append(HRFlowable(width=6 * cm, thickness=1, color=PRIMARY, hAlign='LEFT'))
    story.append(Spacer(1, 6))
    story.append(_build_results_block(data))
    story.append(Spacer(1, 8))

    # === CONFIDENCE ===
    story.append(Paragraph(
        f"AI Confidence: {data.results.confidence:.1f}%",
        styles['confidence']
    ))
    story.append(Spacer(1, 16))

    # === COMPLIANCE CERTIFICATE ===
    story.append(_build_certificate(data, generated_at, styles))
    story.append(Spacer(1, 16))

    # === DISCLAIMER ===
    story.append(Paragraph(DISCLAIMER_TEXT, styles['disclaimer']))

    return story


# =============================================================================
# ENTRY POINTS
# =============================================================================

def generate_pdf_report(
    data: ReportData,
    generated_at: Optional[datetime] = None
) -> bytes:
    """
    Compose the single-page Oil Quality Test Report.

    Args:
        data: Finalized report snapshot
        generated_at: Generation time (defaults to now, UTC). Drives the
                      header timestamp and the certificate ID.

    Returns:
        PDF file as bytes

    Raises:
        MissingField: If required metadata is absent; nothing is emitted
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    story = build_report_story(data, generated_at)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=PAGE_MARGIN_CM * cm,
        leftMargin=PAGE_MARGIN_CM * cm,
        topMargin=(HEADER_BAND_HEIGHT_CM + 0.8) * cm,
        bottomMargin=(FOOTER_OFFSET_CM + 1.0) * cm,
        title=f"Oil Quality Test Report - {data.batch_id}",
        author=PRODUCT_NAME,
        subject="Oil Quality Compliance Certificate",
        invariant=1,
    )

    paint_header = _header_band_painter(generated_at)
    doc.build(
        story,
        onFirstPage=paint_header,
        onLaterPages=paint_header,
        canvasmaker=NumberedCanvas,
    )

    logger.info(
        f"📄 Report composed for {data.batch_id} "
        f"({data.results.classification.value}, score {data.results.score})"
    )
    return buffer.getvalue()


def generate_history_excel(batch, records) -> bytes:
    """
    Export a batch's test history to Excel.

    Sheets:
    1. Summary: Batch metadata and current status (Field / Value)
    2. Test_History: One row per test record, newest first

    Args:
        batch: Batch record
        records: TestRecord list for the batch

    Returns:
        Excel file as bytes
    """
    buffer = BytesIO()

    summary_df = pd.DataFrame({
        'Field': [
            'Batch ID',
            'Station',
            'Location',
            'Equipment',
            'Oil Type',
            'Created (UTC)',
            'Tests Run',
            'Current Score',
            'Current Status',
        ],
        'Value': [
            batch.id,
            batch.station_name,
            batch.location,
            batch.equipment,
            batch.oil_type,
            _format_utc(batch.created_at, '%Y-%m-%d %H:%M:%S UTC'),
            batch.tests_count,
            batch.current_score if batch.current_score is not None else NOT_AVAILABLE,
            batch.current_status.value.upper() if batch.current_status else NOT_AVAILABLE,
        ],
    })

    history_df = pd.DataFrame({
        'Test ID': [r.id for r in records],
        'Timestamp (UTC)': [_format_utc(r.timestamp, '%Y-%m-%d %H:%M:%S') for r in records],
        'FFA (%)': [r.ffa for r in records],
        'TPC (%)': [r.tpc for r in records],
        'PV (meq/kg)': [r.pv for r in records],
        'Score': [r.score for r in records],
        'Classification': [r.classification.value.upper() for r in records],
        'Confidence (%)': [round(r.confidence, 1) for r in records],
        'Operator': [r.operator_id or NOT_AVAILABLE for r in records],
    })

    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        summary_df.to_excel(writer, sheet_name='Summary', index=False)
        ws_summary = writer.sheets['Summary']
        ws_summary.column_dimensions['A'].width = 20
        ws_summary.column_dimensions['B'].width = 36

        history_df.to_excel(writer, sheet_name='Test_History', index=False)
        ws_history = writer.sheets['Test_History']
        ws_history.column_dimensions['A'].width = 30
        ws_history.column_dimensions['B'].width = 20
        for col in ['C', 'D', 'E', 'F', 'G', 'H', 'I']:
            ws_history.column_dimensions[col].width = 15

    return buffer.getvalue()
