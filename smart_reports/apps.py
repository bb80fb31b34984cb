"""
Django app configuration for smart-reports.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class SmartReportsConfig(AppConfig):
    """Django app configuration for the reporting engine."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "smart_reports"
    verbose_name = "Smart Reports"
    label = "smart_reports"

    def ready(self):
        """Warn about entities that have no configured model."""
        from .config import get_reporting_settings
        from .types import EntityType

        entity_models = get_reporting_settings().get("entity_models") or {}
        missing = [
            member.value for member in EntityType if not entity_models.get(member.value)
        ]
        if missing:
            logger.warning(
                "No model configured for report entities: %s", ", ".join(missing)
            )
