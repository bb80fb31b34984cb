"""
Execution mixin for ReportQueryEngine.

Runs the count, the page fetch and the optional aggregate and grouping
steps, and shapes the rows returned to the caller.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable

from ..types import QueryResult
from ..validation import check_field_references

logger = logging.getLogger(__name__)


class ExecutionMixin:
    """
    Mixin providing ``execute`` for the query engine.

    The row fetch and the aggregate query run one after the other on the
    request's database connection.
    """

    def format_rows(self, rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        """Keep the visible fields in configured order, plus ``id``."""
        visible = [item.source_field for item in self.config.visible_fields]
        formatted = []
        for row in rows:
            shaped = {name: row.get(name) for name in visible}
            shaped["id"] = row.get("id")
            formatted.append(shaped)
        return formatted

    def execute(self) -> QueryResult:
        started = time.perf_counter()
        warnings: list[str] = []

        check_field_references(self.config, self.catalog)
        condition = self.build_condition(warnings=warnings)
        delegate = self.delegate

        total_count = delegate.count(condition)
        skip, take = self._page_window()
        raw_rows = delegate.find_many(
            condition=condition,
            select=self._select_fields(),
            order_by=self._order_clauses(),
            skip=skip,
            take=take,
        )
        rows = self.format_rows(raw_rows)

        aggregations = None
        if self.config.aggregations:
            aggregations = self.compute_aggregations(condition)

        grouped_rows = None
        if self.config.group_by:
            grouped_rows = self.group_rows(rows)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "Report on %s returned %s/%s rows in %.1f ms",
            self.entity.value,
            len(rows),
            total_count,
            elapsed_ms,
        )
        return QueryResult(
            rows=rows,
            total_count=total_count,
            execution_time_ms=elapsed_ms,
            aggregations=aggregations,
            grouped_rows=grouped_rows,
            warnings=warnings,
        )


__all__ = ["ExecutionMixin"]
