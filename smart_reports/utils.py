"""
Utility helpers for the reporting engine.

This module contains small helpers for input coercion, condition
combination and JSON serialization of query results.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional, Sequence
from uuid import UUID

from django.db.models import Q
from django.utils.encoding import force_str
from django.utils.functional import Promise


def _coerce_int(value: Any, *, default: Optional[int]) -> Optional[int]:
    """
    Coerce a JSON input value to an integer.

    Persisted template configurations and HTTP payloads may carry numbers as
    strings. Values that cannot be read as integers return ``default`` so the
    validator can report them instead of failing during parsing.
    """

    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        return int(value)

    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned == "":
            return default
        try:
            return int(cleaned)
        except ValueError:
            try:
                return int(float(cleaned))
            except ValueError:
                return default

    return default


def _coerce_bool(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _combine_q(conditions: Sequence[Q], *, op: str = "and") -> Q:
    """Combine conditions into one tree; no condition means match all."""
    if not conditions:
        return Q()
    op = (op or "and").lower()
    combined = conditions[0]
    for condition in conditions[1:]:
        combined = (combined | condition) if op == "or" else (combined & condition)
    return combined


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return value == value and value not in (float("inf"), float("-inf"))
    return isinstance(value, int)


def _json_sanitize(value: Any) -> Any:
    """
    Convert values to JSON-serializable primitives.

    Query results carry ``Decimal`` amounts and ``date``/``datetime`` values
    straight from the ORM; HTTP boundaries serialize them with the standard
    library encoder, so every nested value is reduced to a primitive.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, Promise):
        return force_str(value)

    if isinstance(value, (datetime, date, time)):
        return value.isoformat()

    if isinstance(value, Decimal):
        try:
            return float(value)
        except (OverflowError, ValueError):
            return str(value)

    if isinstance(value, UUID):
        return str(value)

    if isinstance(value, dict):
        return {
            str(_json_sanitize(key)): _json_sanitize(item)
            for key, item in value.items()
        }

    if isinstance(value, (list, tuple, set)):
        return [_json_sanitize(item) for item in value]

    return force_str(value)


__all__ = [
    "_coerce_int",
    "_coerce_bool",
    "_combine_q",
    "_is_numeric",
    "_json_sanitize",
]
