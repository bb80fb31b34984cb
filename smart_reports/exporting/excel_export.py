"""Excel Export Functionality

This module provides Excel export functionality as a mixin class.
"""

import io
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence

from django.utils import timezone

from ..exceptions import ExportError
from ..types import FieldSpec
from .sanitize import escape_formula

# Optional Excel support
try:
    import openpyxl
    from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
    from openpyxl.utils import get_column_letter

    EXCEL_AVAILABLE = True
except ImportError:
    EXCEL_AVAILABLE = False

DEFAULT_COLUMN_WIDTH = 20


def _excel_value(value: Any) -> Any:
    if isinstance(value, str):
        return escape_formula(value)
    if isinstance(value, datetime) and timezone.is_aware(value):
        return timezone.make_naive(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


class ExcelExportMixin:
    """Mixin providing Excel export functionality."""

    def export_to_excel(
        self, rows: Sequence[dict[str, Any]], fields: Sequence[FieldSpec]
    ) -> bytes:
        """Export rows to a single right-to-left worksheet.

        Args:
            rows: Formatted report rows.
            fields: Visible fields in column order.

        Returns:
            Excel file content as bytes.

        Raises:
            ExportError: If openpyxl is not available.
        """
        if not EXCEL_AVAILABLE:
            raise ExportError(
                "Excel export requires openpyxl package. "
                "Install with: pip install openpyxl"
            )

        header_color = str(self.reporting_settings.get("header_color") or "1A365D")

        workbook = openpyxl.Workbook()
        worksheet = workbook.active
        worksheet.title = str(self.reporting_settings.get("excel_sheet_title") or "Report")[:31]
        worksheet.sheet_view.rightToLeft = True
        worksheet.sheet_view.showGridLines = False

        header_font = Font(bold=True, color="FFFFFF", size=11, name="Calibri")
        header_fill = PatternFill(
            start_color=header_color, end_color=header_color, fill_type="solid"
        )
        header_alignment = Alignment(
            horizontal="center", vertical="center", wrap_text=True
        )
        data_font = Font(size=10, name="Calibri")
        data_alignment = Alignment(vertical="center", wrap_text=False)
        thin_side = Side(style="thin", color="D9D9D9")
        cell_border = Border(
            left=thin_side, right=thin_side, top=thin_side, bottom=thin_side
        )

        for col_idx, field in enumerate(fields, 1):
            cell = worksheet.cell(
                row=1, column=col_idx, value=escape_formula(field.display_name)
            )
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment
            cell.border = cell_border
            worksheet.column_dimensions[get_column_letter(col_idx)].width = (
                field.width or DEFAULT_COLUMN_WIDTH
            )
        worksheet.row_dimensions[1].height = 24
        worksheet.freeze_panes = "A2"

        for row_idx, row in enumerate(rows, 2):
            for col_idx, field in enumerate(fields, 1):
                cell = worksheet.cell(
                    row=row_idx,
                    column=col_idx,
                    value=_excel_value(row.get(field.source_field)),
                )
                cell.font = data_font
                cell.alignment = data_alignment
                cell.border = cell_border

        output = io.BytesIO()
        workbook.save(output)
        return output.getvalue()
