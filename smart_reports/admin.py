"""
Admin registrations for the reporting models.
"""

from __future__ import annotations

import json

from django import forms
from django.contrib import admin
from django.forms.widgets import Textarea

from .models import ReportExecution, ReportFieldMetadata, ReportTemplate


class PrettyJSONWidget(Textarea):
    """Pretty-print JSON in admin textareas."""

    def __init__(self, *args, **kwargs):
        attrs = {"rows": 12, "cols": 90}
        attrs.update(kwargs.pop("attrs", {}))
        super().__init__(attrs=attrs)

    def format_value(self, value):
        if value in (None, ""):
            return ""
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return value
        try:
            return json.dumps(value, indent=2, ensure_ascii=False)
        except (TypeError, ValueError):
            return super().format_value(value)


class ReportTemplateAdminForm(forms.ModelForm):
    class Meta:
        model = ReportTemplate
        fields = "__all__"
        widgets = {"config": PrettyJSONWidget()}


@admin.register(ReportTemplate)
class ReportTemplateAdmin(admin.ModelAdmin):
    form = ReportTemplateAdminForm
    list_display = (
        "name",
        "report_type",
        "is_public",
        "is_default",
        "created_by",
        "updated_at",
        "deleted_at",
    )
    list_filter = ("report_type", "is_public", "is_default")
    search_fields = ("name", "description")
    readonly_fields = ("created_at", "updated_at")


@admin.register(ReportFieldMetadata)
class ReportFieldMetadataAdmin(admin.ModelAdmin):
    list_display = (
        "data_source",
        "field_name",
        "display_name",
        "data_type",
        "filterable",
        "aggregatable",
        "groupable",
        "default_order",
    )
    list_filter = ("data_source", "data_type")
    search_fields = ("field_name", "display_name")
    ordering = ("data_source", "default_order", "display_name")


@admin.register(ReportExecution)
class ReportExecutionAdmin(admin.ModelAdmin):
    list_display = (
        "executed_at",
        "data_source",
        "export_format",
        "result_count",
        "execution_time_ms",
        "executed_by",
    )
    list_filter = ("data_source", "export_format")
    date_hierarchy = "executed_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
