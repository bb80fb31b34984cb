"""Reporting Configuration and Settings

This module contains the reporting defaults and the helper that merges the
project's ``SMART_REPORTS`` setting over them.
"""

from typing import Any

from django.conf import settings

# Entity type -> "app_label.ModelName" of the business model it reads.
DEFAULT_ENTITY_MODELS: dict[str, str] = {}

REPORTING_DEFAULTS = {
    "entity_models": DEFAULT_ENTITY_MODELS,
    "default_page_size": 50,
    "max_page_size": 1000,
    "pdf_renderer": "html",
    "excel_sheet_title": "تقرير",
    "report_title": "تقرير",
    "header_color": "1A365D",
    "log_executions": True,
}

PDF_RENDERERS = ("html", "weasyprint")


def get_reporting_settings() -> dict[str, Any]:
    """Return merged reporting settings with defaults applied.

    Returns:
        Dictionary of reporting settings with all defaults applied.
    """
    overrides = getattr(settings, "SMART_REPORTS", None)

    merged = dict(REPORTING_DEFAULTS)
    if isinstance(overrides, dict):
        merged.update(overrides)
        entity_models = dict(DEFAULT_ENTITY_MODELS)
        if isinstance(overrides.get("entity_models"), dict):
            entity_models.update(overrides["entity_models"])
        merged["entity_models"] = entity_models

    renderer = str(merged.get("pdf_renderer") or "html").strip().lower()
    merged["pdf_renderer"] = renderer if renderer in PDF_RENDERERS else "html"
    return merged


def get_entity_model_label(entity_type: str) -> str:
    """Return the configured model label for an entity type, or ``""``."""
    entity_models = get_reporting_settings().get("entity_models") or {}
    return str(entity_models.get(str(entity_type), "") or "")
