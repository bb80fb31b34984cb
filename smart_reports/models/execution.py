"""
ReportExecution model.

Append-only log of every report execution and export.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from ..exceptions import ReportExecutionImmutable


class ReportExecution(models.Model):
    """One report run, written once and never modified."""

    template = models.ForeignKey(
        "smart_reports.ReportTemplate",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="executions",
    )
    data_source = models.CharField(max_length=30, blank=True, verbose_name="Data source")
    config = models.JSONField(default=dict, verbose_name="Configuration snapshot")
    applied_filters = models.JSONField(default=list, verbose_name="Applied filters")
    result_count = models.PositiveIntegerField(default=0)
    execution_time_ms = models.FloatField(default=0.0)
    export_format = models.CharField(max_length=20, blank=True, default="")
    file_size_bytes = models.PositiveBigIntegerField(null=True, blank=True)
    executed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name="report_executions",
    )
    executor_role = models.CharField(max_length=30, blank=True, default="")
    executor_branch = models.CharField(max_length=64, blank=True, default="")
    executed_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        app_label = "smart_reports"
        verbose_name = "Report execution"
        verbose_name_plural = "Report executions"
        ordering = ["-executed_at"]
        indexes = [
            models.Index(
                fields=["executed_by", "executed_at"],
                name="smart_reports_exec_user_at",
            )
        ]

    def __str__(self):
        label = self.export_format or "query"
        return f"{self.data_source or 'report'} {label} @ {self.executed_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ReportExecutionImmutable("Report executions cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ReportExecutionImmutable("Report executions cannot be deleted.")


__all__ = ["ReportExecution"]
