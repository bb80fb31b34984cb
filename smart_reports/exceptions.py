"""Reporting Exceptions

This module defines exception classes raised by the reporting engine,
the template store and the export pipeline.
"""


class ReportingError(Exception):
    """Base class for every error raised by the reporting engine."""


class ReportValidationError(ReportingError):
    """Raised when a report configuration or request is malformed.

    Covers unknown entity types, structurally invalid configurations,
    references to fields outside the entity catalog and unsupported
    export formats. Always a client input error.
    """

    def __init__(self, message: str, *, errors=None):
        super().__init__(message)
        self.errors = list(errors or [message])


class ReportPermissionError(ReportingError):
    """Raised when the requester is not allowed to perform an operation."""


class TemplateNotFound(ReportingError):
    """Raised when a template is absent, soft-deleted or not visible."""


class ExportError(ReportingError):
    """Raised when a rendering backend needed for an export is unavailable."""


class ReportExecutionImmutable(ReportingError):
    """Raised on attempts to modify or delete a logged execution."""
