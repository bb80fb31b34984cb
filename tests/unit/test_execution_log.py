"""
Unit tests for the execution log and the reporting service that writes it.
"""

from datetime import date
from decimal import Decimal
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.test import TestCase

from smart_reports.config import get_reporting_settings
from smart_reports.exceptions import (
    ReportExecutionImmutable,
    ReportValidationError,
    TemplateNotFound,
)
from smart_reports.execution_log import log_execution
from smart_reports.models import ReportExecution
from smart_reports.service import ReportingService
from smart_reports.types import ReportUserContext
from tests.models import Branch, Transaction

pytestmark = pytest.mark.unit

CONFIG = {
    "dataSource": {"type": "transactions"},
    "fields": [
        {"sourceField": "category", "displayName": "Category", "order": 1},
        {"sourceField": "amount", "displayName": "Amount", "order": 2},
    ],
    "filters": [{"field": "amount", "operator": "greaterThan", "value": "5"}],
    "orderBy": [{"field": "amount", "direction": "asc"}],
    "exportOptions": {"fileName": "big spend"},
}


class TestExecutionLog(TestCase):
    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.admin_user = User.objects.create_user(username="admin", password="x")
        cls.accountant = User.objects.create_user(username="acc", password="x")
        cls.admin = ReportUserContext(user_id=cls.admin_user.pk, role="admin")
        cls.accountant_ctx = ReportUserContext(
            user_id=cls.accountant.pk, role="Accountant", branch_id="B1"
        )
        branch_1 = Branch.objects.create(id="B1", name="Downtown")
        branch_2 = Branch.objects.create(id="B2", name="Airport")
        for amount, branch in [(3, branch_1), (8, branch_1), (12, branch_1), (40, branch_2)]:
            Transaction.objects.create(
                amount=Decimal(amount),
                category="food",
                date=date(2024, 2, 1),
                branch=branch,
            )

    def setUp(self):
        self.service = ReportingService()

    def test_log_execution_records_requester_and_filters(self):
        execution = log_execution(
            config=CONFIG,
            user_context=self.accountant_ctx,
            result_count=2,
            execution_time_ms=1.5,
        )

        self.assertEqual(execution.data_source, "transactions")
        self.assertEqual(execution.executed_by_id, self.accountant.pk)
        self.assertEqual(execution.executor_role, "accountant")
        self.assertEqual(execution.executor_branch, "B1")
        self.assertEqual(execution.applied_filters[0]["operator"], "greaterThan")
        self.assertEqual(execution.export_format, "")
        self.assertIsNone(execution.file_size_bytes)
        self.assertIsNotNone(execution.executed_at)

    def test_executions_cannot_be_changed_or_deleted(self):
        execution = log_execution(
            config=CONFIG, user_context=self.admin, result_count=0, execution_time_ms=0
        )

        execution.result_count = 99
        with self.assertRaises(ReportExecutionImmutable):
            execution.save()
        with self.assertRaises(ReportExecutionImmutable):
            execution.delete()

        execution.refresh_from_db()
        self.assertEqual(execution.result_count, 0)
        self.assertEqual(ReportExecution.objects.count(), 1)

    def test_run_report_is_scoped_and_logged(self):
        result = self.service.run_report(CONFIG, self.accountant_ctx)

        self.assertEqual(
            [row["amount"] for row in result.rows], [Decimal(8), Decimal(12)]
        )
        execution = ReportExecution.objects.get()
        self.assertEqual(execution.result_count, 2)
        self.assertGreaterEqual(execution.execution_time_ms, 0)
        self.assertIsNone(execution.template_id)

    def test_export_report_logs_format_and_size(self):
        result, exported = self.service.export_report(CONFIG, self.admin, "CSV")

        self.assertEqual(result.total_count, 3)
        self.assertEqual(exported.file_name, "big spend.csv")
        text = exported.buffer.decode("utf-8")
        self.assertIn('"Category","Amount"', text)
        self.assertIn('"food","40.00"', text)

        execution = ReportExecution.objects.get()
        self.assertEqual(execution.export_format, "csv")
        self.assertEqual(execution.file_size_bytes, exported.size)
        self.assertEqual(execution.executor_branch, "")

    def test_run_template_records_template(self):
        template = self.service.create_template(
            {"name": "Spend", "config": CONFIG, "is_public": True}, self.admin
        )

        result = self.service.run_template(template.pk, self.accountant_ctx)

        self.assertEqual(result.total_count, 2)
        self.assertEqual(ReportExecution.objects.get().template_id, template.pk)

    def test_run_template_requires_visibility(self):
        template = self.service.create_template(
            {"name": "Private", "config": CONFIG}, self.admin
        )
        with self.assertRaises(TemplateNotFound):
            self.service.run_template(template.pk, self.accountant_ctx)
        self.assertFalse(ReportExecution.objects.exists())

    def test_logging_can_be_disabled(self):
        service = ReportingService(
            reporting_settings=dict(get_reporting_settings(), log_executions=False)
        )
        service.run_report(CONFIG, self.admin)
        self.assertFalse(ReportExecution.objects.exists())

    def test_unsupported_export_format_runs_no_query(self):
        with mock.patch.object(ReportingService, "execute_query") as execute_query:
            with self.assertRaises(ReportValidationError):
                self.service.export_report(CONFIG, self.admin, "docx")
        execute_query.assert_not_called()
        self.assertFalse(ReportExecution.objects.exists())
