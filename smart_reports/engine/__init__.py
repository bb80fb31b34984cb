"""
ReportQueryEngine package.

This module provides the ReportQueryEngine class that executes a report
configuration for one requester against the entity's storage delegate.
"""

from __future__ import annotations

from typing import Any, Union

from ..types import QueryResult, ReportConfiguration, ReportUserContext
from .base import ReportQueryEngineBase
from .conditions import ConditionBuilderMixin, build_condition, coerce_value
from .aggregation import AggregationMixin, aggregate_values
from .grouping import GroupingMixin, group_rows
from .execution import ExecutionMixin


class ReportQueryEngine(
    ExecutionMixin,
    GroupingMixin,
    AggregationMixin,
    ConditionBuilderMixin,
    ReportQueryEngineBase,
):
    """
    Executes a report configuration for one requester.

    This class combines functionality from multiple mixins:
    - ReportQueryEngineBase: configuration, catalog and delegate access
    - ConditionBuilderMixin: soft delete, branch scoping and filters
    - AggregationMixin: storage-level aggregates
    - GroupingMixin: partitioning and local aggregates
    - ExecutionMixin: count, page fetch and result shaping
    """


def execute_query(
    config: Union[ReportConfiguration, dict[str, Any]],
    user_context: ReportUserContext,
    **kwargs: Any,
) -> QueryResult:
    return ReportQueryEngine(config, user_context, **kwargs).execute()


__all__ = [
    "ReportQueryEngine",
    "ReportQueryEngineBase",
    "ConditionBuilderMixin",
    "AggregationMixin",
    "GroupingMixin",
    "ExecutionMixin",
    "build_condition",
    "coerce_value",
    "aggregate_values",
    "group_rows",
    "execute_query",
]
