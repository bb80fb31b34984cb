"""Report Exporter

``ReportExporter`` turns formatted report rows into an Excel, CSV or
HTML/PDF document with a sanitized file name.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

from ..config import get_reporting_settings
from ..types import FieldSpec
from ..validation import validate_export_format
from .csv_export import CSVExportMixin
from .excel_export import ExcelExportMixin
from .pdf_export import PdfExportMixin
from .sanitize import default_file_name, sanitize_filename

logger = logging.getLogger(__name__)

EXCEL_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)
CSV_CONTENT_TYPE = "text/csv; charset=utf-8"


@dataclass
class ExportResult:
    buffer: bytes
    file_name: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.buffer)


def _visible_fields(fields: Iterable[Union[FieldSpec, dict[str, Any]]]) -> list[FieldSpec]:
    parsed = [
        item if isinstance(item, FieldSpec) else FieldSpec.from_dict(item)
        for item in fields
    ]
    return sorted((item for item in parsed if item.visible), key=lambda item: item.order)


class ReportExporter(CSVExportMixin, ExcelExportMixin, PdfExportMixin):
    """Exports report rows in one of the supported formats."""

    def __init__(self, reporting_settings: Optional[dict[str, Any]] = None):
        self.reporting_settings = reporting_settings or get_reporting_settings()

    def export(
        self,
        rows: Sequence[dict[str, Any]],
        fields: Iterable[Union[FieldSpec, dict[str, Any]]],
        format: str,
        file_name: Optional[str] = None,
    ) -> ExportResult:
        """Export rows in the requested format.

        Args:
            rows: Formatted report rows.
            fields: Field descriptors; only visible ones become columns.
            format: ``excel``, ``csv`` or ``pdf``.
            file_name: Requested base name, sanitized before use.

        Raises:
            ReportValidationError: If the format is not supported.
        """
        export_format = validate_export_format(format)

        columns = _visible_fields(fields)
        base_name = sanitize_filename(file_name or default_file_name())

        if export_format == "excel":
            result = ExportResult(
                self.export_to_excel(rows, columns),
                f"{base_name}.xlsx",
                EXCEL_CONTENT_TYPE,
            )
        elif export_format == "csv":
            result = ExportResult(
                self.export_to_csv(rows, columns), f"{base_name}.csv", CSV_CONTENT_TYPE
            )
        else:
            content, extension, content_type = self.export_to_pdf(rows, columns)
            result = ExportResult(content, f"{base_name}.{extension}", content_type)

        logger.info(
            "Exported %s rows as %s (%s bytes)", len(rows), export_format, result.size
        )
        return result


def export(
    rows: Sequence[dict[str, Any]],
    fields: Iterable[Union[FieldSpec, dict[str, Any]]],
    format: str,
    file_name: Optional[str] = None,
) -> ExportResult:
    return ReportExporter().export(rows, fields, format, file_name)


__all__ = [
    "ExportResult",
    "ReportExporter",
    "export",
    "EXCEL_CONTENT_TYPE",
    "CSV_CONTENT_TYPE",
]
