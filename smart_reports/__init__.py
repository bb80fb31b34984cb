"""
Ad-hoc reporting engine for multi-branch restaurant accounting.

Reports are described by a declarative configuration (fields, filters,
ordering, grouping, aggregations, pagination) over one business entity and
executed with row-level security by role and branch. Results can be exported
to Excel, CSV or HTML/PDF, saved as templates and are logged on every run.

Usage:
    from smart_reports.service import ReportingService
    from smart_reports.types import ReportUserContext

    service = ReportingService()
    result = service.run_report(config, ReportUserContext(user_id=1, role="admin"))

Models and the service are imported from their modules once the app
registry is ready; this package only exposes the plain types.
"""

from .exceptions import (
    ExportError,
    ReportExecutionImmutable,
    ReportingError,
    ReportPermissionError,
    ReportValidationError,
    TemplateNotFound,
)
from .types import (
    EntityType,
    FieldMetadata,
    QueryResult,
    ReportConfiguration,
    ReportUserContext,
)

__version__ = "0.1.0"

__all__ = [
    "ExportError",
    "ReportExecutionImmutable",
    "ReportingError",
    "ReportPermissionError",
    "ReportValidationError",
    "TemplateNotFound",
    "EntityType",
    "FieldMetadata",
    "QueryResult",
    "ReportConfiguration",
    "ReportUserContext",
]
