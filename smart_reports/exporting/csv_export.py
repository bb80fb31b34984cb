"""CSV Export Functionality

This module provides CSV export functionality as a mixin class.
"""

import csv
import io
from typing import Any, Sequence

from ..types import FieldSpec
from .sanitize import sanitize_csv_value

UTF8_BOM = "\ufeff"


class CSVExportMixin:
    """Mixin providing CSV export functionality."""

    def export_to_csv(
        self, rows: Sequence[dict[str, Any]], fields: Sequence[FieldSpec]
    ) -> bytes:
        """Export rows to UTF-8 CSV with a byte-order mark.

        Every cell is quoted and passes through the formula guard; embedded
        quotes are doubled by the writer.

        Args:
            rows: Formatted report rows.
            fields: Visible fields in column order.

        Returns:
            CSV content as bytes.
        """
        output = io.StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

        writer.writerow([sanitize_csv_value(field.display_name) for field in fields])
        for row in rows:
            writer.writerow(
                [sanitize_csv_value(row.get(field.source_field)) for field in fields]
            )

        return (UTF8_BOM + output.getvalue()).encode("utf-8")
