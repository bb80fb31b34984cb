"""
Report export package.

Usage:
    from smart_reports.exporting import ReportExporter

    result = ReportExporter().export(rows, fields, "csv", "monthly")
"""

from .exporter import (
    CSV_CONTENT_TYPE,
    EXCEL_CONTENT_TYPE,
    ExportResult,
    ReportExporter,
    export,
)
from .excel_export import EXCEL_AVAILABLE
from .pdf_export import WEASYPRINT_AVAILABLE
from .http import build_download_response
from .sanitize import (
    FORMULA_PREFIXES,
    MAX_FILENAME_LENGTH,
    escape_html,
    sanitize_csv_value,
    sanitize_filename,
)

__all__ = [
    "CSV_CONTENT_TYPE",
    "EXCEL_CONTENT_TYPE",
    "EXCEL_AVAILABLE",
    "WEASYPRINT_AVAILABLE",
    "ExportResult",
    "ReportExporter",
    "export",
    "build_download_response",
    "FORMULA_PREFIXES",
    "MAX_FILENAME_LENGTH",
    "escape_html",
    "sanitize_csv_value",
    "sanitize_filename",
]
