"""
Reports Module — Auditable Output Generation

Public API:
- ReportData: Snapshot the composer consumes
- generate_pdf_report: Single-page Oil Quality Test Report
- generate_filename: FoodOilIQ_Report_{BatchID}_{YYYY-MM-DD}.pdf
- generate_certificate_id: CERT-{BatchID}-{BASE36 millis}
- generate_history_excel: Batch test history workbook
"""

from .generator import (
    ReportData,
    validate_report_data,
    build_report_story,
    build_parameter_rows,
    generate_pdf_report,
    generate_filename,
    generate_certificate_id,
    generate_history_excel,
    get_status_badge,
    get_certificate_text,
    to_base36,
)

__all__ = [
    "ReportData",
    "validate_report_data",
    "build_report_story",
    "build_parameter_rows",
    "generate_pdf_report",
    "generate_filename",
    "generate_certificate_id",
    "generate_history_excel",
    "get_status_badge",
    "get_certificate_text",
    "to_base36",
]
