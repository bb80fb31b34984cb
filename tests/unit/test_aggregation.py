"""
Unit tests for aggregation mapping, local aggregates and grouping.
"""

from decimal import Decimal

import pytest

from smart_reports.engine import ReportQueryEngine
from smart_reports.engine.aggregation import aggregate_values, requested_buckets
from smart_reports.engine.grouping import group_key, group_rows
from smart_reports.catalog import get_default_fields
from smart_reports.types import (
    AggregationSpec,
    EntityType,
    GroupBySpec,
    ReportUserContext,
    aggregation_bucket,
)

pytestmark = pytest.mark.unit


class RecordingDelegate:
    """In-memory delegate that records the calls it receives."""

    def __init__(self, rows=None, aggregates=None):
        self.rows = list(rows or [])
        self.aggregates = aggregates or {}
        self.calls = []

    def count(self, condition):
        self.calls.append(("count", condition))
        return len(self.rows)

    def find_many(self, *, condition, select, order_by=(), skip=None, take=None):
        self.calls.append(("find_many", select, tuple(order_by), skip, take))
        rows = self.rows[skip or 0 :]
        return rows[:take] if take is not None else rows

    def aggregate(self, *, condition, requested):
        self.calls.append(("aggregate", requested))
        return self.aggregates


def test_aggregation_bucket_mapping():
    assert aggregation_bucket("sum") == "_sum"
    assert aggregation_bucket("avg") == "_avg"
    assert aggregation_bucket("count") == "_count"
    assert aggregation_bucket("min") == "_min"
    assert aggregation_bucket("max") == "_max"
    assert aggregation_bucket("median") == "_sum"
    assert aggregation_bucket(None) == "_sum"


def test_requested_buckets_group_fields_per_function():
    requested = requested_buckets(
        [
            AggregationSpec(field="amount", function="sum"),
            AggregationSpec(field="amount", function="median", alias="median_amount"),
            AggregationSpec(field="amount", function="max"),
            AggregationSpec(field="id", function="count"),
        ]
    )
    assert requested == {"_sum": ["amount"], "_max": ["amount"], "_count": ["id"]}


def test_local_aggregates_ignore_non_numeric_values():
    values = [10, Decimal("5.5"), None, "12", True]
    assert aggregate_values(values, "sum") == Decimal("15.5")
    assert aggregate_values(values, "avg") == Decimal("7.75")
    assert aggregate_values(values, "count") == 2
    assert aggregate_values(values, "min") == Decimal("5.5")
    assert aggregate_values(values, "max") == 10
    assert aggregate_values(values, "unknown") == Decimal("15.5")


def test_local_aggregates_of_empty_set():
    for function in ("sum", "avg", "min", "max"):
        assert aggregate_values([None, "x"], function) is None
    assert aggregate_values([None, "x"], "count") == 0


def test_mixed_float_and_decimal_values_are_summed():
    assert aggregate_values([1.5, Decimal("2.5")], "sum") == pytest.approx(4.0)


def test_grouping_excludes_nulls_from_sums():
    rows = [
        {"cat": "A", "amt": 10},
        {"cat": "A", "amt": 5},
        {"cat": "B", "amt": None},
    ]
    groups = group_rows(
        rows,
        [GroupBySpec(field="cat")],
        [AggregationSpec(field="amt", function="sum", alias="sum")],
    )
    assert [group.group_key for group in groups] == [{"cat": "A"}, {"cat": "B"}]
    assert groups[0].aggregations == {"sum": 15}
    assert len(groups[0].rows) == 2
    assert groups[1].aggregations == {"sum": None}


def test_group_key_uses_null_sentinel():
    assert group_key({"a": None, "b": 2}, ["a", "b"]) == "null|||2"
    groups = group_rows(
        [{"a": None}, {"a": "null"}, {"a": None}], [GroupBySpec(field="a")]
    )
    assert len(groups) == 1
    assert groups[0].group_key == {"a": None}
    assert groups[0].aggregations == {}


def test_engine_requests_every_bucket_in_one_call():
    delegate = RecordingDelegate(
        rows=[{"id": 1, "amount": Decimal("3")}],
        aggregates={
            "_sum": {"amount": Decimal("30")},
            "_avg": {"amount": Decimal("7.5")},
            "_count": {"amount": 4},
        },
    )
    config = {
        "dataSource": {"type": "transactions"},
        "fields": [{"sourceField": "amount", "displayName": "Amount"}],
        "aggregations": [
            {"field": "amount", "function": "sum", "alias": "total"},
            {"field": "amount", "function": "avg", "alias": "mean"},
            {"field": "amount", "function": "count", "alias": "n"},
            {"field": "amount", "function": "mode", "alias": "fallback"},
        ],
        "pagination": {"enabled": True, "page": 1, "pageSize": 1},
    }
    engine = ReportQueryEngine(
        config,
        ReportUserContext(user_id=1, role="admin"),
        delegate=delegate,
        catalog=get_default_fields(EntityType.TRANSACTIONS),
    )
    result = engine.execute()

    aggregate_calls = [call for call in delegate.calls if call[0] == "aggregate"]
    assert aggregate_calls == [
        ("aggregate", {"_sum": ["amount"], "_avg": ["amount"], "_count": ["amount"]})
    ]
    assert result.aggregations == {
        "total": Decimal("30"),
        "mean": Decimal("7.5"),
        "n": 4,
        "fallback": Decimal("30"),
    }


def test_engine_count_without_storage_value_is_zero():
    delegate = RecordingDelegate(rows=[], aggregates={})
    config = {
        "dataSource": {"type": "transactions"},
        "fields": [{"sourceField": "amount", "displayName": "Amount"}],
        "aggregations": [
            {"field": "amount", "function": "count", "alias": "n"},
            {"field": "amount", "function": "min", "alias": "lowest"},
        ],
    }
    engine = ReportQueryEngine(
        config,
        ReportUserContext(user_id=1, role="admin"),
        delegate=delegate,
        catalog=get_default_fields(EntityType.TRANSACTIONS),
    )
    assert engine.execute().aggregations == {"n": 0, "lowest": None}
