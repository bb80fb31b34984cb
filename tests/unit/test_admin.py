"""
Unit tests for the reporting admin registrations.
"""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from smart_reports.admin import PrettyJSONWidget, ReportExecutionAdmin
from smart_reports.models import ReportExecution, ReportFieldMetadata, ReportTemplate

pytestmark = pytest.mark.unit


def test_models_are_registered():
    for model in (ReportTemplate, ReportFieldMetadata, ReportExecution):
        assert admin.site.is_registered(model)


def test_execution_admin_is_read_only():
    model_admin = ReportExecutionAdmin(ReportExecution, admin.site)
    request = RequestFactory().get("/")

    assert model_admin.has_add_permission(request) is False
    assert model_admin.has_change_permission(request) is False
    assert model_admin.has_delete_permission(request) is False


def test_pretty_json_widget_keeps_arabic_text():
    widget = PrettyJSONWidget()

    assert widget.format_value({"title": "تقرير"}) == '{\n  "title": "تقرير"\n}'
    assert widget.format_value('{"a": 1}') == '{\n  "a": 1\n}'
    assert widget.format_value("not json") == "not json"
    assert widget.format_value(None) == ""
