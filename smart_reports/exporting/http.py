"""HTTP helpers for report downloads."""

from django.http import HttpResponse
from django.utils.http import content_disposition_header

from .exporter import ExportResult


def build_download_response(result: ExportResult, *, inline: bool = False) -> HttpResponse:
    """Wrap an export in a response; the header encoder handles the file name."""
    response = HttpResponse(result.buffer, content_type=result.content_type)
    response["Content-Disposition"] = content_disposition_header(
        not inline, result.file_name
    )
    response["Content-Length"] = str(result.size)
    response["X-Content-Type-Options"] = "nosniff"
    return response
