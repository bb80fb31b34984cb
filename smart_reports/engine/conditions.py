"""
Condition building mixin for ReportQueryEngine.

Translates filters plus the requester's role and branch into one Django
``Q`` tree: soft-delete exclusion, branch scoping and one condition per
filter. Filters that cannot be compiled are dropped with a warning.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from ..exceptions import ReportPermissionError
from ..types import (
    ARRAY_VALUE_OPERATORS,
    ENTITY_TRAITS,
    FILTER_OPERATORS,
    NULL_CHECK_OPERATORS,
    RANGE_OPERATORS,
    EntityType,
    FilterSpec,
    ReportUserContext,
)
from ..utils import _combine_q, _is_numeric

logger = logging.getLogger(__name__)

DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
INTEGER_RE = re.compile(r"^[+-]?\d+$")
NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")

# Single-value operators -> Django lookup.
SINGLE_VALUE_LOOKUPS = {
    "equals": "exact",
    "notEquals": "exact",
    "greaterThan": "gt",
    "greaterThanOrEqual": "gte",
    "lessThan": "lt",
    "lessThanOrEqual": "lte",
    "contains": "icontains",
    "startsWith": "istartswith",
    "endsWith": "iendswith",
}
TEXT_OPERATORS = ("contains", "startsWith", "endsWith")
NEGATED_OPERATORS = ("notEquals", "notIn")
TYPED_DATA_TYPES = ("number", "date", "boolean")


def coerce_value(value: Any) -> Any:
    """Convert a string filter value to a date, number or boolean.

    Strings starting with ``YYYY-MM-DD`` that parse become ``datetime`` or
    ``date``; numeric strings become ``int`` or ``Decimal``; ``"true"`` and
    ``"false"`` become booleans. Anything else is returned unchanged.
    """
    if not isinstance(value, str):
        return value

    cleaned = value.strip()
    if DATE_PREFIX_RE.match(cleaned):
        try:
            parsed = parse_date(cleaned) or parse_datetime(cleaned)
        except ValueError:
            parsed = None
        if isinstance(parsed, datetime) and settings.USE_TZ and timezone.is_naive(parsed):
            parsed = timezone.make_aware(parsed)
        if parsed is not None:
            return parsed

    if cleaned and NUMBER_RE.match(cleaned):
        if INTEGER_RE.match(cleaned):
            return int(cleaned)
        try:
            number = Decimal(cleaned)
        except InvalidOperation:
            number = None
        if number is not None and number.is_finite():
            return number

    lowered = cleaned.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    return value


def value_fits_type(value: Any, data_type: Optional[str]) -> bool:
    """Whether a coerced filter value can be compared with a field of ``data_type``."""
    if value is None or not data_type:
        return True
    if data_type == "number":
        return _is_numeric(value)
    if data_type == "date":
        return isinstance(value, date)
    if data_type == "boolean":
        return isinstance(value, bool)
    return True


def soft_delete_condition(entity_type: EntityType) -> Optional[Q]:
    traits = ENTITY_TRAITS[EntityType(entity_type)]
    if not traits.soft_delete_field:
        return None
    return Q(**{f"{traits.soft_delete_field}__isnull": True})


def branch_condition(
    entity_type: EntityType, user_context: ReportUserContext
) -> Optional[Q]:
    """Branch restriction for branch-scoped roles, always the requester's own.

    Raises:
        ReportPermissionError: If a branch-scoped requester has no branch.
    """
    traits = ENTITY_TRAITS[EntityType(entity_type)]
    if not traits.branch_field or not user_context.is_branch_scoped:
        return None
    if user_context.branch_id in (None, ""):
        raise ReportPermissionError(
            f"Role '{user_context.role}' requires an assigned branch to query "
            f"{EntityType(entity_type).value}."
        )
    return Q(**{traits.branch_field: user_context.branch_id})


def _drop(message: str, warnings: list[str]) -> None:
    logger.warning(message)
    warnings.append(message)


def _type_mismatch(field_name: str, value: Any, data_type: Optional[str]) -> str:
    return (
        f"Filter value {value!r} on '{field_name}' does not match field type "
        f"'{data_type}'; ignored."
    )


def filter_condition(
    spec: FilterSpec, *, warnings: list[str], data_type: Optional[str] = None
) -> Optional[Q]:
    """Compile one filter, or return ``None`` and record why it was dropped.

    When ``data_type`` is given, coerced values that cannot be compared with
    a field of that type drop the filter.
    """
    operator = spec.operator
    field_name = spec.field

    if operator not in FILTER_OPERATORS:
        _drop(f"Unknown filter operator '{operator}' on '{field_name}' ignored.", warnings)
        return None

    if operator in NULL_CHECK_OPERATORS:
        return Q(**{f"{field_name}__isnull": operator == "isNull"})

    value = spec.value

    if operator in RANGE_OPERATORS:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            _drop(f"Filter 'between' on '{field_name}' needs [min, max]; ignored.", warnings)
            return None
        low, high = (coerce_value(item) for item in value)
        for bound in (low, high):
            if not value_fits_type(bound, data_type):
                _drop(_type_mismatch(field_name, bound, data_type), warnings)
                return None
        return Q(**{f"{field_name}__range": (low, high)})

    if operator in ARRAY_VALUE_OPERATORS:
        if not isinstance(value, (list, tuple)):
            _drop(f"Filter '{operator}' on '{field_name}' needs a list; ignored.", warnings)
            return None
        items = list(value)
        if data_type in TYPED_DATA_TYPES:
            items = [coerce_value(item) for item in items]
            for item in items:
                if not value_fits_type(item, data_type):
                    _drop(_type_mismatch(field_name, item, data_type), warnings)
                    return None
        condition = Q(**{f"{field_name}__in": items})
        return ~condition if operator in NEGATED_OPERATORS else condition

    if isinstance(value, (list, tuple, dict)):
        _drop(
            f"Filter '{operator}' on '{field_name}' needs a single value; ignored.",
            warnings,
        )
        return None

    lookup = SINGLE_VALUE_LOOKUPS[operator]
    if operator in TEXT_OPERATORS:
        value = "" if value is None else str(value)
    else:
        value = coerce_value(value)
        if not value_fits_type(value, data_type):
            _drop(_type_mismatch(field_name, value, data_type), warnings)
            return None
    condition = Q(**{f"{field_name}__{lookup}": value})
    return ~condition if operator in NEGATED_OPERATORS else condition


def build_condition(
    entity_type: Any,
    filters: Iterable[FilterSpec],
    user_context: ReportUserContext,
    *,
    filterable_fields: Optional[set[str]] = None,
    field_types: Optional[dict[str, str]] = None,
    warnings: Optional[list[str]] = None,
) -> Q:
    """Build the full condition tree for a report query.

    Args:
        entity_type: Entity being queried.
        filters: Filters from the report configuration.
        user_context: Requester identity, role and branch.
        filterable_fields: Field names filters may target; ``None`` skips
            the check.
        field_types: Catalog data type per field, used to drop filters whose
            values do not fit the field.
        warnings: List collecting messages for dropped filters.

    Returns:
        The conjunction of every condition, ``Q()`` when there is none.
    """
    entity = EntityType(entity_type)
    warnings = warnings if warnings is not None else []
    field_types = field_types or {}
    conditions: list[Q] = []

    soft_delete = soft_delete_condition(entity)
    if soft_delete is not None:
        conditions.append(soft_delete)

    branch = branch_condition(entity, user_context)
    if branch is not None:
        conditions.append(branch)

    for spec in filters:
        if filterable_fields is not None and spec.field not in filterable_fields:
            _drop(
                f"Filter on unknown or non-filterable field '{spec.field}' ignored.",
                warnings,
            )
            continue
        condition = filter_condition(
            spec, warnings=warnings, data_type=field_types.get(spec.field)
        )
        if condition is not None:
            conditions.append(condition)

    return _combine_q(conditions, op="and")


class ConditionBuilderMixin:
    """
    Mixin providing condition building for the query engine.
    """

    def build_condition(self, *, warnings: list[str]) -> Q:
        filterable = {item.field_name for item in self.catalog if item.filterable}
        field_types = {item.field_name: item.data_type for item in self.catalog}
        return build_condition(
            self.entity,
            self.config.filters,
            self.user_context,
            filterable_fields=filterable,
            field_types=field_types,
            warnings=warnings,
        )


__all__ = [
    "coerce_value",
    "value_fits_type",
    "soft_delete_condition",
    "branch_condition",
    "filter_condition",
    "build_condition",
    "ConditionBuilderMixin",
]
