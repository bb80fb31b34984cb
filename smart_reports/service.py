"""
Reporting service facade.

Wires the query engine, export pipeline, template store and execution log
into the operations offered to the HTTP boundary.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from .config import get_reporting_settings
from .engine import ReportQueryEngine
from .execution_log import log_execution
from .exporting import ExportResult, ReportExporter
from .metadata import get_available_fields, get_data_sources
from .models import ReportExecution, ReportTemplate
from .template_store import ReportTemplateStore
from .types import (
    FieldMetadata,
    FieldSpec,
    QueryResult,
    ReportConfiguration,
    ReportUserContext,
)
from .validation import validate_configuration, validate_export_format

ConfigInput = Union[ReportConfiguration, dict[str, Any]]


class ReportingService:
    """Entry point for running, exporting and managing reports."""

    def __init__(
        self,
        *,
        template_store: Optional[ReportTemplateStore] = None,
        exporter: Optional[ReportExporter] = None,
        reporting_settings: Optional[dict[str, Any]] = None,
    ):
        self.reporting_settings = reporting_settings or get_reporting_settings()
        self.templates = template_store or ReportTemplateStore()
        self.exporter = exporter or ReportExporter(self.reporting_settings)

    # Queries

    def execute_query(
        self, config: ConfigInput, user_context: ReportUserContext
    ) -> QueryResult:
        return ReportQueryEngine(config, user_context).execute()

    def run_report(
        self,
        config: ConfigInput,
        user_context: ReportUserContext,
        *,
        template_id: Any = None,
    ) -> QueryResult:
        """Execute a report and record the run."""
        parsed = validate_configuration(config)
        result = self.execute_query(parsed, user_context)
        if self.reporting_settings.get("log_executions", True):
            self.log_execution(
                config=parsed,
                user_context=user_context,
                result_count=result.total_count,
                execution_time_ms=result.execution_time_ms,
                template=template_id,
            )
        return result

    def run_template(self, template_id: Any, user_context: ReportUserContext) -> QueryResult:
        template = self.templates.get_template_by_id(template_id, user_context)
        return self.run_report(
            template.get_configuration(), user_context, template_id=template.pk
        )

    # Exports

    def export(
        self,
        rows: list[dict[str, Any]],
        fields: Iterable[Union[FieldSpec, dict[str, Any]]],
        format: str,
        file_name: Optional[str] = None,
    ) -> ExportResult:
        return self.exporter.export(rows, fields, format, file_name)

    def export_report(
        self,
        config: ConfigInput,
        user_context: ReportUserContext,
        format: str,
        *,
        template_id: Any = None,
        file_name: Optional[str] = None,
    ) -> tuple[QueryResult, ExportResult]:
        """Execute a report, export its rows and record the export.

        The format is checked before any storage call.
        """
        export_format = validate_export_format(format)
        parsed = validate_configuration(config)
        result = self.execute_query(parsed, user_context)
        exported = self.export(
            result.rows,
            parsed.fields,
            export_format,
            file_name or parsed.export_options.file_name,
        )
        if self.reporting_settings.get("log_executions", True):
            self.log_execution(
                config=parsed,
                user_context=user_context,
                result_count=result.total_count,
                execution_time_ms=result.execution_time_ms,
                template=template_id,
                export_format=export_format,
                file_size_bytes=exported.size,
            )
        return result, exported

    # Templates

    def create_template(
        self, data: dict[str, Any], user_context: ReportUserContext
    ) -> ReportTemplate:
        return self.templates.create_template(data, user_context)

    def get_user_templates(self, user_context: ReportUserContext) -> list[ReportTemplate]:
        return self.templates.get_user_templates(user_context)

    def get_template_by_id(
        self, template_id: Any, user_context: ReportUserContext
    ) -> ReportTemplate:
        return self.templates.get_template_by_id(template_id, user_context)

    def update_template(
        self, template_id: Any, data: dict[str, Any], user_context: ReportUserContext
    ) -> ReportTemplate:
        return self.templates.update_template(template_id, data, user_context)

    def delete_template(
        self, template_id: Any, user_context: ReportUserContext
    ) -> ReportTemplate:
        return self.templates.delete_template(template_id, user_context)

    # Catalog

    def get_available_fields(self, entity_type: Any) -> list[FieldMetadata]:
        return get_available_fields(entity_type)

    def get_data_sources(self) -> list[dict[str, str]]:
        return get_data_sources()

    # Log

    def log_execution(self, **kwargs: Any) -> ReportExecution:
        return log_execution(**kwargs)


def get_reporting_service() -> ReportingService:
    return ReportingService()


__all__ = ["ReportingService", "get_reporting_service"]
