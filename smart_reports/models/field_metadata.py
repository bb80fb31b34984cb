"""
ReportFieldMetadata model.

Persisted catalog of the fields each entity exposes to the report builder.
"""

from __future__ import annotations

from django.db import models

from ..types import EntityType, FieldMetadata


class ReportFieldMetadata(models.Model):
    """Describes one reportable field of an entity."""

    class DataType(models.TextChoices):
        STRING = "string", "String"
        NUMBER = "number", "Number"
        DATE = "date", "Date"
        BOOLEAN = "boolean", "Boolean"
        ENUM = "enum", "Enum"

    data_source = models.CharField(
        max_length=30, choices=EntityType.choices, verbose_name="Data source"
    )
    field_name = models.CharField(max_length=100, verbose_name="Field name")
    display_name = models.CharField(max_length=200, verbose_name="Display name")
    data_type = models.CharField(
        max_length=20, choices=DataType.choices, default=DataType.STRING
    )
    filterable = models.BooleanField(default=True)
    sortable = models.BooleanField(default=True)
    aggregatable = models.BooleanField(default=False)
    groupable = models.BooleanField(default=False)
    default_visible = models.BooleanField(default=True)
    default_order = models.IntegerField(default=0)
    category = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    format = models.CharField(max_length=20, blank=True, default="")
    enum_values = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "smart_reports"
        verbose_name = "Report field"
        verbose_name_plural = "Report fields"
        ordering = ["data_source", "default_order", "display_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["data_source", "field_name"],
                name="smart_reports_unique_field_per_source",
            )
        ]

    def __str__(self):
        return f"{self.data_source}.{self.field_name}"

    def to_field_metadata(self) -> FieldMetadata:
        return FieldMetadata(
            field_name=self.field_name,
            display_name=self.display_name,
            data_type=self.data_type,
            filterable=self.filterable,
            sortable=self.sortable,
            aggregatable=self.aggregatable,
            groupable=self.groupable,
            default_visible=self.default_visible,
            default_order=self.default_order,
            category=self.category or None,
            description=self.description or None,
            format=self.format or None,
            enum_values=list(self.enum_values) if self.enum_values else None,
        )


__all__ = ["ReportFieldMetadata"]
