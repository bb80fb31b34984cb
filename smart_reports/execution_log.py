"""
Execution logger.

Appends one ``ReportExecution`` record per query run or export.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from .models import ReportExecution, ReportTemplate
from .types import FilterSpec, ReportConfiguration, ReportUserContext
from .utils import _json_sanitize

logger = logging.getLogger(__name__)


def log_execution(
    *,
    config: Union[ReportConfiguration, dict[str, Any]],
    user_context: ReportUserContext,
    result_count: int,
    execution_time_ms: float,
    template: Optional[Union[ReportTemplate, Any]] = None,
    applied_filters: Optional[Iterable[Union[FilterSpec, dict[str, Any]]]] = None,
    export_format: Optional[str] = None,
    file_size_bytes: Optional[int] = None,
) -> ReportExecution:
    """Record one execution. Records are never updated afterwards.

    Args:
        config: Configuration that was run.
        user_context: Requester of the run.
        result_count: Total matching rows.
        execution_time_ms: Measured run time.
        template: Template (or its id) the run came from, if any.
        applied_filters: Filters applied; defaults to the configuration's.
        export_format: Export format for export runs.
        file_size_bytes: Size of the exported file.
    """
    parsed = ReportConfiguration.from_dict(config)
    if applied_filters is None:
        applied_filters = parsed.filters
    filters_payload = [
        item.to_dict() if isinstance(item, FilterSpec) else dict(item)
        for item in applied_filters
    ]

    template_id = template.pk if isinstance(template, ReportTemplate) else template
    branch = "" if user_context.branch_id is None else str(user_context.branch_id)

    execution = ReportExecution.objects.create(
        template_id=template_id,
        data_source=parsed.entity_type,
        config=_json_sanitize(parsed.to_dict()),
        applied_filters=_json_sanitize(filters_payload),
        result_count=max(int(result_count or 0), 0),
        execution_time_ms=float(execution_time_ms or 0.0),
        export_format=export_format or "",
        file_size_bytes=file_size_bytes,
        executed_by_id=user_context.user_id,
        executor_role=user_context.role,
        executor_branch=branch,
    )
    logger.debug(
        "Logged report execution %s (%s, %s rows)",
        execution.pk,
        export_format or "query",
        result_count,
    )
    return execution


__all__ = ["log_execution"]
