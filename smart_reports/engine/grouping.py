"""
Grouping mixin for ReportQueryEngine.

Partitions the fetched page of rows by the group-by field values and
recomputes the configured aggregations locally for each partition.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..types import AggregationSpec, GroupBySpec, GroupedResult
from .aggregation import aggregate_values

GROUP_KEY_SEPARATOR = "|||"
NULL_GROUP_KEY = "null"


def group_key(row: dict[str, Any], fields: Sequence[str]) -> str:
    return GROUP_KEY_SEPARATOR.join(
        NULL_GROUP_KEY if row.get(name) is None else str(row.get(name))
        for name in fields
    )


def group_rows(
    rows: Sequence[dict[str, Any]],
    group_by: Sequence[GroupBySpec],
    aggregations: Sequence[AggregationSpec] = (),
) -> list[GroupedResult]:
    """Partition rows by group-by values, in order of first appearance."""
    fields = [spec.field for spec in group_by]
    groups: dict[str, GroupedResult] = {}
    for row in rows:
        key = group_key(row, fields)
        group = groups.get(key)
        if group is None:
            group = GroupedResult(
                group_key={name: row.get(name) for name in fields}, rows=[]
            )
            groups[key] = group
        group.rows.append(row)

    for group in groups.values():
        group.aggregations = {
            spec.alias: aggregate_values(
                (row.get(spec.field) for row in group.rows), spec.function
            )
            for spec in aggregations
        }
    return list(groups.values())


class GroupingMixin:
    def group_rows(self, rows: Sequence[dict[str, Any]]) -> list[GroupedResult]:
        return group_rows(rows, self.config.group_by, self.config.aggregations)


__all__ = [
    "GROUP_KEY_SEPARATOR",
    "NULL_GROUP_KEY",
    "group_key",
    "group_rows",
    "GroupingMixin",
]
