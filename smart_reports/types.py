"""
Data classes and constants for the reporting engine.

This module contains the typed form of a report configuration and of the
values the engine returns. Raw JSON (from HTTP payloads or persisted
templates) is parsed into these classes at the boundary; the engine never
operates on the untyped form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from django.db import models
from django.db.models import Avg, Count, Max, Min, Sum

from .exceptions import ReportValidationError
from .utils import _coerce_bool, _coerce_int, _json_sanitize


class EntityType(models.TextChoices):
    """Closed set of business entities a report can read."""

    TRANSACTIONS = "transactions", "المعاملات المالية"
    PAYABLES = "payables", "الذمم الدائنة"
    RECEIVABLES = "receivables", "الذمم المدينة"
    INVENTORY = "inventory", "المخزون"
    SALARIES = "salaries", "الرواتب"
    BRANCHES = "branches", "الفروع"

    @classmethod
    def parse(cls, value: Any) -> "EntityType":
        try:
            return cls(str(value or "").strip())
        except ValueError as exc:
            raise ReportValidationError(f"Unknown data source '{value}'.") from exc


@dataclass(frozen=True)
class EntityTraits:
    """Row-level security traits of an entity."""

    soft_delete_field: Optional[str] = None
    branch_field: Optional[str] = None


_SCOPED = EntityTraits(soft_delete_field="deleted_at", branch_field="branch_id")

ENTITY_TRAITS: dict[EntityType, EntityTraits] = {
    EntityType.TRANSACTIONS: _SCOPED,
    EntityType.PAYABLES: _SCOPED,
    EntityType.RECEIVABLES: _SCOPED,
    EntityType.INVENTORY: _SCOPED,
    EntityType.SALARIES: _SCOPED,
    EntityType.BRANCHES: EntityTraits(),
}


FIELD_DATA_TYPES = ("string", "number", "date", "boolean", "enum")
FIELD_FORMATS = ("currency", "percentage", "date-short", "date-long", "number", "text")

SINGLE_VALUE_OPERATORS = (
    "equals",
    "notEquals",
    "greaterThan",
    "greaterThanOrEqual",
    "lessThan",
    "lessThanOrEqual",
    "contains",
    "startsWith",
    "endsWith",
)
ARRAY_VALUE_OPERATORS = ("in", "notIn")
RANGE_OPERATORS = ("between",)
NULL_CHECK_OPERATORS = ("isNull", "isNotNull")

FILTER_OPERATORS = (
    SINGLE_VALUE_OPERATORS
    + ARRAY_VALUE_OPERATORS
    + RANGE_OPERATORS
    + NULL_CHECK_OPERATORS
)

SORT_DIRECTIONS = ("asc", "desc")

AGGREGATION_FUNCTIONS = ("sum", "avg", "count", "min", "max")

# Storage aggregate bucket per function; unknown functions read the sum bucket.
AGGREGATION_BUCKETS = {
    "sum": "_sum",
    "avg": "_avg",
    "count": "_count",
    "min": "_min",
    "max": "_max",
}
DEFAULT_AGGREGATION_BUCKET = "_sum"

BUCKET_AGGREGATES = {
    "_sum": Sum,
    "_avg": Avg,
    "_count": Count,
    "_min": Min,
    "_max": Max,
}

EXPORT_FORMATS = ("excel", "csv", "pdf")


def aggregation_bucket(function: Any) -> str:
    return AGGREGATION_BUCKETS.get(str(function or "").strip().lower(), DEFAULT_AGGREGATION_BUCKET)


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass
class FieldSpec:
    """Column requested by a report."""

    source_field: str
    display_name: str
    visible: bool = True
    order: int = 0
    width: Optional[int] = None
    format: Optional[str] = None
    data_type: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "FieldSpec":
        data = _as_dict(data)
        return cls(
            source_field=_as_str(data.get("sourceField")),
            display_name=_as_str(data.get("displayName")),
            visible=_coerce_bool(data.get("visible"), default=True),
            order=_coerce_int(data.get("order"), default=0),
            width=_coerce_int(data.get("width"), default=None),
            format=data.get("format") or None,
            data_type=data.get("dataType") or None,
            id=data.get("id") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = {
            "sourceField": self.source_field,
            "displayName": self.display_name,
            "visible": self.visible,
            "order": self.order,
        }
        for key, value in (
            ("width", self.width),
            ("format", self.format),
            ("dataType", self.data_type),
            ("id", self.id),
        ):
            if value is not None:
                payload[key] = value
        return payload


@dataclass
class FilterSpec:
    """Declarative filter applied to the entity rows."""

    field: str
    operator: str
    value: Any = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "FilterSpec":
        data = _as_dict(data)
        return cls(
            field=_as_str(data.get("field")),
            operator=_as_str(data.get("operator")),
            value=data.get("value"),
            id=data.get("id") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = {"field": self.field, "operator": self.operator}
        if self.operator not in NULL_CHECK_OPERATORS:
            payload["value"] = self.value
        if self.id is not None:
            payload["id"] = self.id
        return payload


@dataclass
class OrderSpec:
    field: str
    direction: str = "asc"

    @classmethod
    def from_dict(cls, data: Any) -> "OrderSpec":
        data = _as_dict(data)
        return cls(
            field=_as_str(data.get("field")),
            direction=_as_str(data.get("direction")).lower(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "direction": self.direction}


@dataclass
class AggregationSpec:
    field: str
    function: str = "sum"
    alias: str = ""

    def __post_init__(self):
        if not self.alias:
            self.alias = f"{self.function}_{self.field}"

    @classmethod
    def from_dict(cls, data: Any) -> "AggregationSpec":
        data = _as_dict(data)
        return cls(
            field=_as_str(data.get("field")),
            function=_as_str(data.get("function")).lower() or "sum",
            alias=_as_str(data.get("alias")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "function": self.function, "alias": self.alias}


@dataclass
class GroupBySpec:
    field: str
    display_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "GroupBySpec":
        data = _as_dict(data)
        return cls(
            field=_as_str(data.get("field")),
            display_name=data.get("displayName") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = {"field": self.field}
        if self.display_name:
            payload["displayName"] = self.display_name
        return payload


@dataclass
class PaginationSpec:
    enabled: bool = False
    page: int = 1
    page_size: int = 50

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @classmethod
    def from_dict(cls, data: Any) -> "PaginationSpec":
        data = _as_dict(data)
        return cls(
            enabled=_coerce_bool(data.get("enabled"), default=False),
            page=_coerce_int(data.get("page"), default=1),
            page_size=_coerce_int(data.get("pageSize"), default=50),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "page": self.page, "pageSize": self.page_size}


@dataclass
class ExportOptions:
    file_name: Optional[str] = None
    formats: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ExportOptions":
        data = _as_dict(data)
        return cls(
            file_name=data.get("fileName") or None,
            formats=[_as_str(item).lower() for item in _as_list(data.get("formats"))],
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"formats": list(self.formats)}
        if self.file_name:
            payload["fileName"] = self.file_name
        return payload


@dataclass
class ReportConfiguration:
    """Typed report configuration.

    ``entity_type`` keeps the raw data source string so the validator can
    report unknown values; ``entity`` returns the parsed enum member.
    """

    entity_type: str
    fields: list[FieldSpec] = field(default_factory=list)
    filters: list[FilterSpec] = field(default_factory=list)
    order_by: list[OrderSpec] = field(default_factory=list)
    group_by: list[GroupBySpec] = field(default_factory=list)
    aggregations: list[AggregationSpec] = field(default_factory=list)
    pagination: PaginationSpec = field(default_factory=PaginationSpec)
    export_options: ExportOptions = field(default_factory=ExportOptions)

    @property
    def entity(self) -> EntityType:
        return EntityType.parse(self.entity_type)

    @property
    def visible_fields(self) -> list[FieldSpec]:
        """Visible fields sorted by their configured order."""
        return sorted(
            (item for item in self.fields if item.visible), key=lambda item: item.order
        )

    @classmethod
    def from_dict(cls, data: Any) -> "ReportConfiguration":
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            raise ReportValidationError("Report configuration must be an object.")
        data_source = data.get("dataSource")
        if isinstance(data_source, dict):
            entity_type = _as_str(data_source.get("type"))
        else:
            entity_type = _as_str(data_source or data.get("entityType"))
        return cls(
            entity_type=entity_type,
            fields=[FieldSpec.from_dict(item) for item in _as_list(data.get("fields"))],
            filters=[FilterSpec.from_dict(item) for item in _as_list(data.get("filters"))],
            order_by=[OrderSpec.from_dict(item) for item in _as_list(data.get("orderBy"))],
            group_by=[GroupBySpec.from_dict(item) for item in _as_list(data.get("groupBy"))],
            aggregations=[
                AggregationSpec.from_dict(item)
                for item in _as_list(data.get("aggregations"))
            ],
            pagination=PaginationSpec.from_dict(data.get("pagination")),
            export_options=ExportOptions.from_dict(data.get("exportOptions")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "dataSource": {"type": self.entity_type},
            "fields": [item.to_dict() for item in self.fields],
            "filters": [item.to_dict() for item in self.filters],
            "orderBy": [item.to_dict() for item in self.order_by],
            "groupBy": [item.to_dict() for item in self.group_by],
            "aggregations": [item.to_dict() for item in self.aggregations],
            "pagination": self.pagination.to_dict(),
            "exportOptions": self.export_options.to_dict(),
        }


ADMIN_ROLE = "admin"


@dataclass
class ReportUserContext:
    """Identity and role supplied by the authentication boundary.

    Every role other than admin is branch-scoped.
    """

    user_id: Any
    role: str
    branch_id: Any = None

    def __post_init__(self):
        self.role = _as_str(self.role).lower()

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def is_branch_scoped(self) -> bool:
        return not self.is_admin


@dataclass
class FieldMetadata:
    """Catalog entry describing one reportable field of an entity."""

    field_name: str
    display_name: str
    data_type: str = "string"
    filterable: bool = True
    sortable: bool = True
    aggregatable: bool = False
    groupable: bool = False
    default_visible: bool = True
    default_order: int = 0
    category: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    enum_values: Optional[list[str]] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldName": self.field_name,
            "displayName": self.display_name,
            "dataType": self.data_type,
            "filterable": self.filterable,
            "sortable": self.sortable,
            "aggregatable": self.aggregatable,
            "groupable": self.groupable,
            "defaultVisible": self.default_visible,
            "defaultOrder": self.default_order,
            "category": self.category,
            "description": self.description,
            "format": self.format,
            "enumValues": self.enum_values,
        }


@dataclass
class GroupedResult:
    group_key: dict[str, Any]
    rows: list[dict[str, Any]]
    aggregations: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupKey": _json_sanitize(self.group_key),
            "rows": _json_sanitize(self.rows),
            "aggregations": _json_sanitize(self.aggregations),
        }


@dataclass
class QueryResult:
    """Outcome of one report execution."""

    rows: list[dict[str, Any]]
    total_count: int
    execution_time_ms: float = 0.0
    aggregations: Optional[dict[str, Any]] = None
    grouped_rows: Optional[list[GroupedResult]] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "rows": _json_sanitize(self.rows),
            "totalCount": self.total_count,
            "executionTime": round(self.execution_time_ms, 3),
            "warnings": list(self.warnings),
        }
        if self.aggregations is not None:
            payload["aggregations"] = _json_sanitize(self.aggregations)
        if self.grouped_rows is not None:
            payload["groupedRows"] = [group.to_dict() for group in self.grouped_rows]
        return payload


__all__ = [
    "EntityType",
    "EntityTraits",
    "ENTITY_TRAITS",
    "FIELD_DATA_TYPES",
    "FIELD_FORMATS",
    "SINGLE_VALUE_OPERATORS",
    "ARRAY_VALUE_OPERATORS",
    "RANGE_OPERATORS",
    "NULL_CHECK_OPERATORS",
    "FILTER_OPERATORS",
    "SORT_DIRECTIONS",
    "AGGREGATION_FUNCTIONS",
    "AGGREGATION_BUCKETS",
    "DEFAULT_AGGREGATION_BUCKET",
    "BUCKET_AGGREGATES",
    "EXPORT_FORMATS",
    "aggregation_bucket",
    "FieldSpec",
    "FilterSpec",
    "OrderSpec",
    "AggregationSpec",
    "GroupBySpec",
    "PaginationSpec",
    "ExportOptions",
    "ReportConfiguration",
    "ReportUserContext",
    "ADMIN_ROLE",
    "FieldMetadata",
    "GroupedResult",
    "QueryResult",
]
