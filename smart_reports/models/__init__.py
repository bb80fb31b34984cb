"""
Persisted models of the reporting engine.
"""

from .field_metadata import ReportFieldMetadata
from .template import ReportTemplate, ReportTemplateQuerySet
from .execution import ReportExecution

__all__ = [
    "ReportFieldMetadata",
    "ReportTemplate",
    "ReportTemplateQuerySet",
    "ReportExecution",
]
