"""PDF Export Functionality

Reports are rendered as a right-to-left HTML document. The document is
returned as-is, or converted to PDF with WeasyPrint when the
``pdf_renderer`` setting asks for it.
"""

from typing import Any, Sequence

from django.utils import timezone
from django.utils.html import format_html, format_html_join
from django.utils.safestring import mark_safe

from ..exceptions import ExportError
from ..types import FieldSpec
from .sanitize import escape_html

try:
    from weasyprint import HTML

    WEASYPRINT_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    HTML = None
    WEASYPRINT_AVAILABLE = False

REPORT_STYLES = """
body { font-family: "Noto Naskh Arabic", "Arial", sans-serif; margin: 24px; color: #1a202c; }
h1 { font-size: 20px; margin-bottom: 4px; }
.meta { color: #718096; font-size: 12px; margin-bottom: 16px; }
table { width: 100%; border-collapse: collapse; font-size: 12px; }
th { background: #1a365d; color: #ffffff; padding: 8px; text-align: right; }
td { border-bottom: 1px solid #e2e8f0; padding: 6px 8px; text-align: right; }
tr:nth-child(even) td { background: #f7fafc; }
"""


class PdfExportMixin:
    """Mixin providing HTML and PDF export functionality."""

    def render_html(
        self, rows: Sequence[dict[str, Any]], fields: Sequence[FieldSpec]
    ) -> str:
        """Render rows as an escaped right-to-left HTML table.

        Every header and cell value is escaped before interpolation.
        """
        title = str(self.reporting_settings.get("report_title") or "Report")
        header_cells = mark_safe(
            "".join(f"<th>{escape_html(field.display_name)}</th>" for field in fields)
        )
        body_rows = format_html_join(
            "\n",
            "<tr>{}</tr>",
            (
                (
                    mark_safe(
                        "".join(
                            f"<td>{escape_html(row.get(field.source_field))}</td>"
                            for field in fields
                        )
                    ),
                )
                for row in rows
            ),
        )
        return format_html(
            '<!DOCTYPE html>\n<html lang="ar" dir="rtl">\n<head>\n'
            '<meta charset="utf-8">\n<title>{}</title>\n<style>{}</style>\n'
            "</head>\n<body>\n<h1>{}</h1>\n"
            '<p class="meta">{}</p>\n'
            "<table>\n<thead><tr>{}</tr></thead>\n<tbody>\n{}\n</tbody>\n</table>\n"
            "</body>\n</html>\n",
            title,
            mark_safe(REPORT_STYLES),
            title,
            timezone.localtime().strftime("%Y-%m-%d %H:%M"),
            header_cells,
            body_rows,
        )

    def export_to_pdf(
        self, rows: Sequence[dict[str, Any]], fields: Sequence[FieldSpec]
    ) -> tuple[bytes, str, str]:
        """Export rows as HTML, or as PDF when WeasyPrint is configured.

        Returns:
            ``(content, extension, content_type)``.

        Raises:
            ExportError: If WeasyPrint is configured but not installed.
        """
        html = self.render_html(rows, fields)
        if self.reporting_settings.get("pdf_renderer") != "weasyprint":
            return html.encode("utf-8"), "html", "text/html; charset=utf-8"

        if not WEASYPRINT_AVAILABLE or not HTML:
            raise ExportError(
                "PDF export requires the weasyprint package. "
                "Install with: pip install weasyprint"
            )
        return HTML(string=html).write_pdf(), "pdf", "application/pdf"
