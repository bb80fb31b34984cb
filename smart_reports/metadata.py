"""
Field metadata registry.

Returns the catalog of reportable fields for an entity, read from
``ReportFieldMetadata`` and falling back to the default catalog when the
table holds nothing for that entity.
"""

from __future__ import annotations

import logging
from typing import Any

from .catalog import get_default_fields
from .types import EntityType, FieldMetadata

logger = logging.getLogger(__name__)


def get_available_fields(entity_type: Any) -> list[FieldMetadata]:
    """Return the fields of an entity ordered by default order then name.

    Raises:
        ReportValidationError: If ``entity_type`` is not a known entity.
    """
    from .models import ReportFieldMetadata

    entity = EntityType.parse(entity_type)
    rows = list(
        ReportFieldMetadata.objects.filter(data_source=entity.value).order_by(
            "default_order", "display_name"
        )
    )
    if not rows:
        logger.debug("No persisted field metadata for %s, using defaults", entity.value)
        return get_default_fields(entity)
    return [row.to_field_metadata() for row in rows]


def get_field_index(entity_type: Any) -> dict[str, FieldMetadata]:
    return {item.field_name: item for item in get_available_fields(entity_type)}


def get_data_sources() -> list[dict[str, str]]:
    return [{"value": member.value, "label": str(member.label)} for member in EntityType]


__all__ = ["get_available_fields", "get_field_index", "get_data_sources"]
