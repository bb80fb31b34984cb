"""
Base ReportQueryEngine class with configuration and catalog access.

This module contains the foundation of the query engine: the parsed
configuration, the requester context, the entity's field catalog and its
storage delegate.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from ..config import get_reporting_settings
from ..delegates import StorageDelegate, get_delegate
from ..metadata import get_available_fields
from ..types import (
    ENTITY_TRAITS,
    FieldMetadata,
    ReportConfiguration,
    ReportUserContext,
)
from ..validation import validate_configuration

logger = logging.getLogger(__name__)


class ReportQueryEngineBase:
    """
    Base class for ReportQueryEngine with initialization and utility methods.

    The configuration is validated on construction, so an invalid one is
    rejected before the catalog or any storage delegate is touched.
    """

    def __init__(
        self,
        config: Union[ReportConfiguration, dict[str, Any]],
        user_context: ReportUserContext,
        *,
        delegate: Optional[StorageDelegate] = None,
        catalog: Optional[Iterable[FieldMetadata]] = None,
    ):
        self.config = validate_configuration(config)
        self.user_context = user_context
        self.entity = self.config.entity
        self.traits = ENTITY_TRAITS[self.entity]
        self._catalog = list(catalog) if catalog is not None else None
        self._delegate = delegate

    @property
    def catalog(self) -> list[FieldMetadata]:
        if self._catalog is None:
            self._catalog = get_available_fields(self.entity)
        return self._catalog

    @property
    def delegate(self) -> StorageDelegate:
        if self._delegate is None:
            self._delegate = get_delegate(self.entity)
        return self._delegate

    def _select_fields(self) -> list[str]:
        selected = ["id"]
        for item in self.config.visible_fields:
            if item.source_field not in selected:
                selected.append(item.source_field)
        return selected

    def _order_clauses(self) -> list[tuple[str, str]]:
        return [(item.field, item.direction) for item in self.config.order_by]

    def _page_window(self) -> tuple[Optional[int], Optional[int]]:
        """Return ``(skip, take)``, both ``None`` when pagination is off."""
        pagination = self.config.pagination
        if not pagination.enabled:
            return None, None
        max_page_size = get_reporting_settings().get("max_page_size")
        page_size = pagination.page_size
        if max_page_size:
            page_size = min(page_size, int(max_page_size))
        return (pagination.page - 1) * page_size, page_size


__all__ = ["ReportQueryEngineBase"]
