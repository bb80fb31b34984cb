"""Export Sanitization Helpers

This module contains the file name, CSV and HTML sanitizers used by every
export format.
"""

import re
import time
from datetime import date, datetime, time as dt_time
from decimal import Decimal
from typing import Any, Optional

from django.utils import timezone
from django.utils.html import escape

# Characters that indicate a formula in spreadsheet applications
FORMULA_PREFIXES = ("=", "+", "-", "@")
FORMULA_ESCAPE_PREFIX = "'"

MAX_FILENAME_LENGTH = 200

_PATH_SEPARATORS_RE = re.compile(r"[/\\]")
_LEADING_DOTS_RE = re.compile(r"^\.+")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_RESERVED_CHARS_RE = re.compile(r'[<>:"|?*]')
_LINE_BREAKS_RE = re.compile(r"[\r\n]+")


def default_file_name() -> str:
    return f"report-{timezone.localdate().isoformat()}"


def sanitize_filename(name: Optional[str]) -> str:
    """Sanitize a file name for filesystem and Content-Disposition usage.

    Path separators and ``..`` segments become ``_``, leading dots and
    control characters are removed, reserved characters become ``_`` and
    the result is capped at 200 characters.

    Args:
        name: Requested file name, without extension.

    Returns:
        A non-empty safe file name; ``report-<epoch-ms>`` when nothing is left.
    """
    cleaned = str(name or "")
    cleaned = _PATH_SEPARATORS_RE.sub("_", cleaned)
    cleaned = cleaned.replace("..", "_")
    cleaned = _LEADING_DOTS_RE.sub("", cleaned)
    cleaned = _CONTROL_CHARS_RE.sub("", cleaned)
    cleaned = _RESERVED_CHARS_RE.sub("_", cleaned)
    cleaned = cleaned.strip()[:MAX_FILENAME_LENGTH].strip()
    if not cleaned:
        cleaned = f"report-{int(time.time() * 1000)}"
    return cleaned


def stringify_cell(value: Any) -> str:
    """Render a cell value as text for CSV and HTML output."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, dt_time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def is_formula_like(text: str) -> bool:
    stripped = text.lstrip()
    return bool(stripped) and stripped[0] in FORMULA_PREFIXES


def escape_formula(text: str) -> str:
    if is_formula_like(text):
        return f"{FORMULA_ESCAPE_PREFIX}{text}"
    return text


def sanitize_csv_value(value: Any) -> str:
    """Neutralize formula prefixes and flatten line breaks.

    Quote doubling is left to the CSV writer.
    """
    text = escape_formula(stringify_cell(value))
    return _LINE_BREAKS_RE.sub(" ", text)


def escape_html(value: Any) -> str:
    """Escape ``& < > " '`` in the text form of a value."""
    return str(escape(stringify_cell(value)))


__all__ = [
    "FORMULA_PREFIXES",
    "MAX_FILENAME_LENGTH",
    "default_file_name",
    "sanitize_filename",
    "stringify_cell",
    "is_formula_like",
    "escape_formula",
    "sanitize_csv_value",
    "escape_html",
]
