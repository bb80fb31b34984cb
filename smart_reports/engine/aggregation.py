"""
Aggregation mixin for ReportQueryEngine.

Storage-level aggregates run over the whole filtered population; local
aggregates run over the rows of one group.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Optional

from django.db.models import Q

from ..types import AggregationSpec, aggregation_bucket
from ..utils import _is_numeric


def _numeric_values(values: Iterable[Any]) -> list[Any]:
    numbers = [value for value in values if _is_numeric(value)]
    if any(isinstance(value, float) for value in numbers):
        return [float(value) for value in numbers]
    return numbers


def aggregate_values(values: Iterable[Any], function: str) -> Optional[Any]:
    """Apply an aggregation function to the numeric members of ``values``.

    ``None``, booleans and non-numeric values are excluded. Over an empty
    numeric set ``count`` gives ``0`` and every other function ``None``,
    matching the storage aggregates. Unknown functions behave as ``sum``.
    """
    numbers = _numeric_values(values)
    bucket = aggregation_bucket(function)
    if bucket == "_count":
        return len(numbers)
    if not numbers:
        return None

    if bucket == "_min":
        return min(numbers)
    if bucket == "_max":
        return max(numbers)
    total = sum(numbers, Decimal(0) if isinstance(numbers[0], Decimal) else 0)
    if bucket == "_avg":
        return total / len(numbers)
    return total


def requested_buckets(specs: Iterable[AggregationSpec]) -> dict[str, list[str]]:
    """Group aggregation fields by the storage bucket they read."""
    requested: dict[str, list[str]] = {}
    for spec in specs:
        fields = requested.setdefault(aggregation_bucket(spec.function), [])
        if spec.field not in fields:
            fields.append(spec.field)
    return requested


class AggregationMixin:
    """
    Mixin computing storage-level aggregates for the configured aliases.
    """

    def compute_aggregations(self, condition: Q) -> dict[str, Any]:
        specs = self.config.aggregations
        raw = self.delegate.aggregate(
            condition=condition, requested=requested_buckets(specs)
        )
        results = {}
        for spec in specs:
            bucket = aggregation_bucket(spec.function)
            value = (raw.get(bucket) or {}).get(spec.field)
            if bucket == "_count" and value is None:
                value = 0
            results[spec.alias] = value
        return results


__all__ = ["aggregate_values", "requested_buckets", "AggregationMixin"]
