"""
Report configuration validation.

``validate_configuration`` is a pure structural check run before any storage
call. ``check_field_references`` checks the configuration against the
entity's field catalog once it has been resolved.
"""

from __future__ import annotations

from typing import Any, Iterable, Union

from .exceptions import ReportValidationError
from .types import (
    EXPORT_FORMATS,
    EntityType,
    FieldMetadata,
    ReportConfiguration,
    SORT_DIRECTIONS,
)


def _collect_structural_errors(config: ReportConfiguration) -> list[str]:
    errors: list[str] = []

    if config.entity_type not in EntityType.values:
        errors.append(f"Unknown data source '{config.entity_type}'.")

    if not config.fields:
        errors.append("At least one field is required.")
    for index, item in enumerate(config.fields):
        if not item.source_field:
            errors.append(f"Field #{index + 1} is missing sourceField.")
        if not item.display_name:
            errors.append(f"Field #{index + 1} is missing displayName.")

    for index, item in enumerate(config.filters):
        if not item.field:
            errors.append(f"Filter #{index + 1} is missing field.")
        if not item.operator:
            errors.append(f"Filter #{index + 1} is missing operator.")

    for index, item in enumerate(config.order_by):
        if not item.field:
            errors.append(f"Order clause #{index + 1} is missing field.")
        if item.direction not in SORT_DIRECTIONS:
            errors.append(
                f"Order clause #{index + 1} must have direction 'asc' or 'desc'."
            )

    for index, item in enumerate(config.group_by):
        if not item.field:
            errors.append(f"Group-by #{index + 1} is missing field.")

    seen_aliases: set[str] = set()
    for index, item in enumerate(config.aggregations):
        if not item.field:
            errors.append(f"Aggregation #{index + 1} is missing field.")
        if item.alias in seen_aliases:
            errors.append(f"Duplicate aggregation alias '{item.alias}'.")
        seen_aliases.add(item.alias)

    pagination = config.pagination
    if pagination.page is None or pagination.page < 1:
        errors.append("Pagination page must be at least 1.")
    if pagination.page_size is None or pagination.page_size < 1:
        errors.append("Pagination pageSize must be at least 1.")

    return errors


def validate_configuration(
    config: Union[ReportConfiguration, dict[str, Any]],
) -> ReportConfiguration:
    """Parse and structurally validate a report configuration.

    Returns:
        The typed configuration.

    Raises:
        ReportValidationError: With every problem found.
    """
    parsed = ReportConfiguration.from_dict(config)
    errors = _collect_structural_errors(parsed)
    if errors:
        raise ReportValidationError(
            "Invalid report configuration: " + " ".join(errors), errors=errors
        )
    return parsed


def check_field_references(
    config: ReportConfiguration, catalog: Iterable[FieldMetadata]
) -> None:
    """Reject references to fields the entity does not expose.

    Ordering, aggregation and grouping also require the matching
    ``sortable``, ``aggregatable`` and ``groupable`` catalog flag. Filters
    are not checked here; the condition builder drops filters on unknown
    fields with a warning.
    """
    index = {item.field_name: item for item in catalog}
    errors: list[str] = []

    for item in config.fields:
        if item.source_field not in index:
            errors.append(f"Unknown field '{item.source_field}'.")
    for item in config.order_by:
        if item.field not in index:
            errors.append(f"Cannot order by unknown field '{item.field}'.")
        elif not index[item.field].sortable:
            errors.append(f"Field '{item.field}' is not sortable.")
    for item in config.aggregations:
        if item.field not in index:
            errors.append(f"Cannot aggregate unknown field '{item.field}'.")
        elif not index[item.field].aggregatable:
            errors.append(f"Field '{item.field}' is not aggregatable.")

    visible = {item.source_field for item in config.visible_fields}
    for item in config.group_by:
        if item.field not in visible:
            errors.append(f"Group-by field '{item.field}' must be a visible field.")
        elif item.field in index and not index[item.field].groupable:
            errors.append(f"Field '{item.field}' is not groupable.")

    if errors:
        raise ReportValidationError(
            "Invalid report configuration: " + " ".join(errors), errors=errors
        )


def validate_export_format(format: Any) -> str:
    """Return the normalized export format.

    Raises:
        ReportValidationError: If the format is not supported.
    """
    export_format = str(format or "").strip().lower()
    if export_format not in EXPORT_FORMATS:
        raise ReportValidationError(f"Unsupported export format '{format}'.")
    return export_format


__all__ = [
    "validate_configuration",
    "check_field_references",
    "validate_export_format",
]
