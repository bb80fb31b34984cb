"""
Report template store.

CRUD over ``ReportTemplate`` with ownership and visibility rules. Setting a
template as default clears the other defaults of its report type in the same
transaction.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.utils import timezone

from .exceptions import ReportPermissionError, ReportValidationError, TemplateNotFound
from .models import ReportTemplate
from .types import ReportUserContext
from .validation import validate_configuration

logger = logging.getLogger(__name__)


def _clean_report_type(value: Any) -> str:
    report_type = str(value or ReportTemplate.ReportType.CUSTOM).strip().upper()
    if report_type not in ReportTemplate.ReportType.values:
        raise ReportValidationError(f"Unknown report type '{value}'.")
    return report_type


def _clean_name(value: Any) -> str:
    name = str(value or "").strip()
    if not name:
        raise ReportValidationError("Template name is required.")
    if len(name) > 200:
        raise ReportValidationError("Template name must be at most 200 characters.")
    return name


class ReportTemplateStore:
    """Template lifecycle operations for one requester at a time."""

    def _clear_other_defaults(self, template: ReportTemplate) -> int:
        others = (
            ReportTemplate.objects.alive()
            .filter(report_type=template.report_type, is_default=True)
            .exclude(pk=template.pk)
        )
        return others.update(is_default=False, updated_at=timezone.now())

    def _get_visible(
        self, template_id: Any, user_context: ReportUserContext, *, lock: bool = False
    ) -> ReportTemplate:
        queryset = ReportTemplate.objects.visible_to(user_context)
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=template_id)
        except (ReportTemplate.DoesNotExist, ValueError, TypeError) as exc:
            raise TemplateNotFound(f"Report template {template_id} not found.") from exc

    def _get_for_mutation(
        self, template_id: Any, user_context: ReportUserContext
    ) -> ReportTemplate:
        """Lock a template the caller may modify.

        Admins reach every non-deleted template; other callers only see what
        is visible to them, so private templates stay indistinguishable from
        missing ones.
        """
        if user_context.is_admin:
            queryset = ReportTemplate.objects.alive().select_for_update()
            try:
                return queryset.get(pk=template_id)
            except (ReportTemplate.DoesNotExist, ValueError, TypeError) as exc:
                raise TemplateNotFound(
                    f"Report template {template_id} not found."
                ) from exc

        template = self._get_visible(template_id, user_context, lock=True)
        if not template.can_modify(user_context):
            raise ReportPermissionError(
                "Only the owner or an administrator can modify this template."
            )
        return template

    def create_template(
        self, data: dict[str, Any], user_context: ReportUserContext
    ) -> ReportTemplate:
        """Create a template; administrators only."""
        if not user_context.is_admin:
            raise ReportPermissionError("Only administrators can create report templates.")

        config = validate_configuration(data.get("config") or {})
        with transaction.atomic():
            template = ReportTemplate(
                name=_clean_name(data.get("name")),
                description=str(data.get("description") or ""),
                report_type=_clean_report_type(data.get("report_type")),
                config=config.to_dict(),
                is_public=bool(data.get("is_public", False)),
                is_default=bool(data.get("is_default", False)),
                created_by_id=user_context.user_id,
            )
            if template.is_default:
                self._clear_other_defaults(template)
            template.save()

        logger.info(
            "Report template %s (%s) created by %s",
            template.pk,
            template.report_type,
            user_context.user_id,
        )
        return template

    def get_user_templates(self, user_context: ReportUserContext) -> list[ReportTemplate]:
        """Public or owned templates, defaults first then most recently updated."""
        return list(
            ReportTemplate.objects.visible_to(user_context)
            .select_related("created_by")
            .order_by("-is_default", "-updated_at", "-pk")
        )

    def get_template_by_id(
        self, template_id: Any, user_context: ReportUserContext
    ) -> ReportTemplate:
        return self._get_visible(template_id, user_context)

    def update_template(
        self,
        template_id: Any,
        data: dict[str, Any],
        user_context: ReportUserContext,
    ) -> ReportTemplate:
        """Update a template; owner or administrator only.

        ``config`` is re-validated when supplied. ``is_default=True`` clears
        every other default of the template's report type.
        """
        changes: dict[str, Any] = {}
        if "name" in data:
            changes["name"] = _clean_name(data["name"])
        if "description" in data:
            changes["description"] = str(data["description"] or "")
        if "report_type" in data:
            changes["report_type"] = _clean_report_type(data["report_type"])
        if "config" in data and data["config"] is not None:
            changes["config"] = validate_configuration(data["config"]).to_dict()
        if "is_public" in data:
            changes["is_public"] = bool(data["is_public"])

        with transaction.atomic():
            template = self._get_for_mutation(template_id, user_context)
            for name, value in changes.items():
                setattr(template, name, value)

            make_default = data.get("is_default")
            if make_default is not None:
                template.is_default = bool(make_default)
            # Other defaults of the (possibly new) type go first.
            cleared = 0
            if template.is_default:
                cleared = self._clear_other_defaults(template)
            template.save()

            if make_default:
                logger.info(
                    "Report template %s is now default for %s (%s cleared)",
                    template.pk,
                    template.report_type,
                    cleared,
                )

        return template

    def delete_template(self, template_id: Any, user_context: ReportUserContext) -> ReportTemplate:
        """Soft-delete a template; owner or administrator only."""
        with transaction.atomic():
            template = self._get_for_mutation(template_id, user_context)
            template.deleted_at = timezone.now()
            template.is_default = False
            template.save(update_fields=["deleted_at", "is_default", "updated_at"])

        logger.info("Report template %s deleted by %s", template.pk, user_context.user_id)
        return template


def get_template_store() -> ReportTemplateStore:
    return ReportTemplateStore()


__all__ = ["ReportTemplateStore", "get_template_store"]
