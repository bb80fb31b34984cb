"""
Storage delegates.

The engine only talks to entity storage through the ``StorageDelegate``
contract. ``ModelDelegate`` implements it over a Django model; the entity to
model mapping comes from the ``SMART_REPORTS["entity_models"]`` setting and
can be overridden with ``register_delegate``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from django.apps import apps
from django.core.exceptions import ImproperlyConfigured
from django.db import models
from django.db.models import Q

from .config import get_entity_model_label
from .types import BUCKET_AGGREGATES, EntityType

logger = logging.getLogger(__name__)


class StorageDelegate(Protocol):
    def count(self, condition: Q) -> int:
        ...

    def find_many(
        self,
        *,
        condition: Q,
        select: Sequence[str],
        order_by: Sequence[tuple[str, str]] = (),
        skip: Optional[int] = None,
        take: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        ...

    def aggregate(
        self, *, condition: Q, requested: dict[str, list[str]]
    ) -> dict[str, dict[str, Any]]:
        ...


class ModelDelegate:
    """Storage delegate backed by a Django model's default manager."""

    def __init__(self, model: type[models.Model]):
        self.model = model

    def __repr__(self):
        return f"ModelDelegate({self.model._meta.label})"

    def _queryset(self, condition: Q) -> models.QuerySet:
        return self.model._default_manager.filter(condition)

    def _pk_name(self) -> str:
        return self.model._meta.pk.name

    def count(self, condition: Q) -> int:
        return self._queryset(condition).count()

    def find_many(
        self,
        *,
        condition: Q,
        select: Sequence[str],
        order_by: Sequence[tuple[str, str]] = (),
        skip: Optional[int] = None,
        take: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        ordering = [
            f"-{field}" if direction == "desc" else field
            for field, direction in order_by
        ]
        pk_name = self._pk_name()
        # Primary key as last sort key keeps pages stable.
        if not any(item.lstrip("-") in (pk_name, "pk") for item in ordering):
            ordering.append(pk_name)

        queryset = self._queryset(condition).values(*select).order_by(*ordering)
        start = max(skip or 0, 0)
        if take is not None:
            queryset = queryset[start : start + take]
        elif start:
            queryset = queryset[start:]
        return list(queryset)

    def aggregate(
        self, *, condition: Q, requested: dict[str, list[str]]
    ) -> dict[str, dict[str, Any]]:
        expressions = {}
        for bucket, fields in requested.items():
            aggregate_class = BUCKET_AGGREGATES[bucket]
            for field_name in fields:
                expressions[f"{bucket}__{field_name}"] = aggregate_class(field_name)
        if not expressions:
            return {}

        raw = self._queryset(condition).aggregate(**expressions)
        results: dict[str, dict[str, Any]] = {}
        for key, value in raw.items():
            bucket, field_name = key.split("__", 1)
            results.setdefault(bucket, {})[field_name] = value
        return results


_REGISTERED_DELEGATES: dict[EntityType, StorageDelegate] = {}


def register_delegate(entity_type: Any, delegate: StorageDelegate) -> None:
    _REGISTERED_DELEGATES[EntityType(entity_type)] = delegate


def unregister_delegate(entity_type: Any) -> None:
    _REGISTERED_DELEGATES.pop(EntityType(entity_type), None)


def get_delegate(entity_type: Any) -> StorageDelegate:
    """Return the storage delegate serving an entity type.

    Raises:
        ImproperlyConfigured: If no delegate is registered and no model is
            configured for the entity.
    """
    entity = EntityType(entity_type)
    delegate = _REGISTERED_DELEGATES.get(entity)
    if delegate is not None:
        return delegate

    label = get_entity_model_label(entity.value)
    if not label:
        raise ImproperlyConfigured(
            f"No model configured for report entity '{entity.value}'. "
            "Set SMART_REPORTS['entity_models']."
        )
    try:
        model = apps.get_model(label)
    except (LookupError, ValueError) as exc:
        raise ImproperlyConfigured(
            f"Report entity '{entity.value}' points to unknown model '{label}'."
        ) from exc
    return ModelDelegate(model)


__all__ = [
    "StorageDelegate",
    "ModelDelegate",
    "register_delegate",
    "unregister_delegate",
    "get_delegate",
]
