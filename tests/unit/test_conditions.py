"""
Unit tests for condition building: soft delete, branch scoping and filters.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.db.models import Q

from smart_reports.engine.conditions import (
    build_condition,
    coerce_value,
    filter_condition,
    value_fits_type,
)
from smart_reports.exceptions import ReportPermissionError
from smart_reports.types import (
    FILTER_OPERATORS,
    EntityType,
    FilterSpec,
    ReportUserContext,
)

pytestmark = pytest.mark.unit

ADMIN = ReportUserContext(user_id=1, role="ADMIN")
ACCOUNTANT_B1 = ReportUserContext(user_id=2, role="ACCOUNTANT", branch_id="B1")
ACCOUNTANT_NO_BRANCH = ReportUserContext(user_id=3, role="accountant")

SCOPED_ENTITIES = [
    EntityType.TRANSACTIONS,
    EntityType.PAYABLES,
    EntityType.RECEIVABLES,
    EntityType.INVENTORY,
    EntityType.SALARIES,
]

VALID_FILTERS = {
    "equals": "10",
    "notEquals": "10",
    "greaterThan": "10",
    "greaterThanOrEqual": "10",
    "lessThan": "10",
    "lessThanOrEqual": "10",
    "contains": "rent",
    "startsWith": "rent",
    "endsWith": "rent",
    "in": ["a", "b"],
    "notIn": ["a", "b"],
    "between": ["1", "5"],
    "isNull": None,
    "isNotNull": None,
}


@pytest.mark.parametrize("entity", SCOPED_ENTITIES)
def test_soft_deleted_rows_are_excluded(entity):
    condition = build_condition(entity, [], ADMIN)
    assert condition == Q(deleted_at__isnull=True)


def test_branches_have_no_soft_delete_or_branch_constraint():
    assert build_condition(EntityType.BRANCHES, [], ADMIN) == Q()
    assert build_condition(EntityType.BRANCHES, [], ACCOUNTANT_NO_BRANCH) == Q()


@pytest.mark.parametrize("entity", SCOPED_ENTITIES)
def test_branch_scoped_user_is_restricted_to_own_branch(entity):
    condition = build_condition(entity, [], ACCOUNTANT_B1)
    assert condition == Q(deleted_at__isnull=True) & Q(branch_id="B1")


def test_branch_constraint_survives_branch_filters():
    condition = build_condition(
        EntityType.TRANSACTIONS,
        [FilterSpec(field="branch_id", operator="equals", value="B2")],
        ACCOUNTANT_B1,
    )
    assert ("branch_id", "B1") in condition.children
    assert ("branch_id__exact", "B2") in condition.children


def test_admin_is_not_branch_scoped():
    condition = build_condition(EntityType.SALARIES, [], ADMIN)
    assert "branch_id" not in str(condition)


def test_branch_scoped_user_without_branch_is_rejected():
    with pytest.raises(ReportPermissionError):
        build_condition(EntityType.TRANSACTIONS, [], ACCOUNTANT_NO_BRANCH)


def test_unknown_roles_are_branch_scoped():
    viewer = ReportUserContext(user_id=4, role="viewer")
    assert viewer.is_branch_scoped
    with pytest.raises(ReportPermissionError):
        build_condition(EntityType.INVENTORY, [], viewer)


def test_every_operator_produces_a_distinct_condition():
    assert set(VALID_FILTERS) == set(FILTER_OPERATORS)
    warnings = []
    conditions = [
        filter_condition(
            FilterSpec(field="amount", operator=operator, value=value),
            warnings=warnings,
        )
        for operator, value in VALID_FILTERS.items()
    ]
    assert warnings == []
    assert all(condition is not None for condition in conditions)
    assert len({str(condition) for condition in conditions}) == 14


def test_operator_lookups():
    warnings = []

    def compile(operator, value=None):
        return filter_condition(
            FilterSpec(field="amount", operator=operator, value=value),
            warnings=warnings,
        )

    assert compile("equals", "10") == Q(amount__exact=10)
    assert compile("notEquals", "10") == ~Q(amount__exact=10)
    assert compile("greaterThanOrEqual", "2.5") == Q(amount__gte=Decimal("2.5"))
    assert compile("contains", "Rent") == Q(amount__icontains="Rent")
    assert compile("startsWith", "007") == Q(amount__istartswith="007")
    assert compile("endsWith", "x") == Q(amount__iendswith="x")
    assert compile("in", [1, 2]) == Q(amount__in=[1, 2])
    assert compile("notIn", [1, 2]) == ~Q(amount__in=[1, 2])
    assert compile("between", ["2024-01-01", "2024-01-31"]) == Q(
        amount__range=(date(2024, 1, 1), date(2024, 1, 31))
    )
    assert compile("isNull") == Q(amount__isnull=True)
    assert compile("isNotNull") == Q(amount__isnull=False)


def test_unknown_operator_is_dropped_with_warning():
    warnings = []
    condition = build_condition(
        EntityType.TRANSACTIONS,
        [
            FilterSpec(field="amount", operator="regex", value=".*"),
            FilterSpec(field="amount", operator="equals", value="5"),
        ],
        ADMIN,
        warnings=warnings,
    )
    assert len(warnings) == 1
    assert "regex" in warnings[0]
    assert condition == Q(deleted_at__isnull=True) & Q(amount__exact=5)


@pytest.mark.parametrize(
    "operator,value",
    [("in", "a"), ("notIn", 3), ("between", ["1"]), ("between", "1,2"), ("equals", [1])],
)
def test_malformed_values_are_dropped(operator, value):
    warnings = []
    condition = filter_condition(
        FilterSpec(field="amount", operator=operator, value=value), warnings=warnings
    )
    assert condition is None
    assert len(warnings) == 1


def test_filters_on_non_filterable_fields_are_dropped():
    warnings = []
    condition = build_condition(
        EntityType.BRANCHES,
        [FilterSpec(field="id", operator="equals", value="B1")],
        ADMIN,
        filterable_fields={"name"},
        warnings=warnings,
    )
    assert condition == Q()
    assert len(warnings) == 1


def test_coerce_value():
    assert coerce_value("2024-03-05") == date(2024, 3, 5)
    assert coerce_value("2024-03-05T10:30:00").hour == 10
    assert coerce_value("42") == 42
    assert coerce_value("-3") == -3
    assert coerce_value("12.50") == Decimal("12.50")
    assert coerce_value("TRUE") is True
    assert coerce_value("false") is False
    assert coerce_value("") == ""
    assert coerce_value("   ") == "   "
    assert coerce_value("2024-13-45") == "2024-13-45"
    assert coerce_value("rent") == "rent"
    assert coerce_value("nan") == "nan"
    assert coerce_value(7) == 7


@pytest.mark.parametrize(
    "value, data_type, expected",
    [
        (Decimal("1.5"), "number", True),
        (3, "number", True),
        ("abc", "number", False),
        (True, "number", False),
        (date(2024, 2, 1), "date", True),
        ("2024-02-30", "date", False),
        (False, "boolean", True),
        (1, "boolean", False),
        ("anything", "string", True),
        (None, "number", True),
    ],
)
def test_value_fits_type(value, data_type, expected):
    assert value_fits_type(value, data_type) is expected


@pytest.mark.parametrize(
    "field, operator, value, data_type",
    [
        ("amount", "greaterThan", "abc", "number"),
        ("date", "equals", "2024-02-30", "date"),
        ("amount", "between", ["1", "x"], "number"),
        ("amount", "in", ["1", "two"], "number"),
        ("is_active", "equals", "maybe", "boolean"),
    ],
)
def test_values_not_matching_field_type_are_dropped(field, operator, value, data_type):
    warnings = []
    condition = filter_condition(
        FilterSpec(field=field, operator=operator, value=value),
        warnings=warnings,
        data_type=data_type,
    )
    assert condition is None
    assert len(warnings) == 1
    assert "does not match field type" in warnings[0]


def test_type_check_uses_catalog_types():
    warnings = []
    condition = build_condition(
        EntityType.TRANSACTIONS,
        [
            FilterSpec(field="amount", operator="greaterThan", value="abc"),
            FilterSpec(field="date", operator="equals", value="2024-02-01"),
        ],
        ADMIN,
        field_types={"amount": "number", "date": "date"},
        warnings=warnings,
    )
    assert condition == Q(deleted_at__isnull=True) & Q(date__exact=date(2024, 2, 1))
    assert len(warnings) == 1


def test_list_items_are_coerced_for_typed_fields():
    warnings = []
    numbers = filter_condition(
        FilterSpec(field="amount", operator="in", value=["1", "2.5"]),
        warnings=warnings,
        data_type="number",
    )
    flags = filter_condition(
        FilterSpec(field="is_active", operator="notIn", value=["false"]),
        warnings=warnings,
        data_type="boolean",
    )
    assert numbers == Q(amount__in=[1, Decimal("2.5")])
    assert flags == ~Q(is_active__in=[False])
    assert warnings == []
