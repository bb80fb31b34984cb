"""
ReportTemplate model.

Stores reusable report configurations with ownership, public visibility and
at most one default template per report type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import Q

from ..types import ReportConfiguration

if TYPE_CHECKING:
    from ..types import ReportUserContext


class ReportTemplateQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def visible_to(self, user_context: "ReportUserContext"):
        """Non-deleted templates that are public or owned by the caller."""
        return self.alive().filter(
            Q(is_public=True) | Q(created_by_id=user_context.user_id)
        )


class ReportTemplate(models.Model):
    """Saved report configuration."""

    class ReportType(models.TextChoices):
        FINANCIAL = "FINANCIAL", "Financial"
        DEBTS = "DEBTS", "Debts"
        INVENTORY = "INVENTORY", "Inventory"
        SALARY = "SALARY", "Salary"
        BRANCHES = "BRANCHES", "Branches"
        CUSTOM = "CUSTOM", "Custom"

    name = models.CharField(max_length=200, verbose_name="Name")
    description = models.TextField(blank=True, verbose_name="Description")
    report_type = models.CharField(
        max_length=20,
        choices=ReportType.choices,
        default=ReportType.CUSTOM,
        verbose_name="Report type",
    )
    config = models.JSONField(
        default=dict,
        verbose_name="Configuration",
        help_text="Report configuration {dataSource, fields, filters, ...}.",
    )
    is_public = models.BooleanField(
        default=False,
        verbose_name="Public",
        help_text="If true, every user can see and run this template",
    )
    is_default = models.BooleanField(default=False, verbose_name="Default")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="report_templates",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = ReportTemplateQuerySet.as_manager()

    class Meta:
        app_label = "smart_reports"
        verbose_name = "Report template"
        verbose_name_plural = "Report templates"
        ordering = ["-is_default", "-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["report_type"],
                condition=Q(is_default=True, deleted_at__isnull=True),
                name="smart_reports_one_default_per_type",
            )
        ]
        indexes = [
            models.Index(
                fields=["report_type", "is_default"],
                name="smart_reports_tpl_type_def",
            )
        ]

    def __str__(self):
        return f"{self.name} ({self.report_type})"

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def get_configuration(self) -> ReportConfiguration:
        return ReportConfiguration.from_dict(self.config or {})

    def is_owner(self, user_context: "ReportUserContext") -> bool:
        return str(self.created_by_id) == str(user_context.user_id)

    def can_view(self, user_context: "ReportUserContext") -> bool:
        if self.is_deleted:
            return False
        return bool(self.is_public) or self.is_owner(user_context)

    def can_modify(self, user_context: "ReportUserContext") -> bool:
        return user_context.is_admin or self.is_owner(user_context)


__all__ = ["ReportTemplate", "ReportTemplateQuerySet"]
