"""
Default field catalog per entity.

Used by the field metadata registry when no persisted metadata exists for an
entity, and by the ``seed_report_fields`` command to populate the table.
"""

from __future__ import annotations

from typing import Optional

from .types import EntityType, FieldMetadata


def _field(
    field_name: str,
    display_name: str,
    data_type: str = "string",
    *,
    order: int,
    filterable: bool = True,
    sortable: bool = True,
    aggregatable: bool = False,
    groupable: bool = False,
    visible: bool = True,
    format: Optional[str] = None,
    enum_values: Optional[list[str]] = None,
    category: Optional[str] = None,
) -> FieldMetadata:
    return FieldMetadata(
        field_name=field_name,
        display_name=display_name,
        data_type=data_type,
        filterable=filterable,
        sortable=sortable,
        aggregatable=aggregatable,
        groupable=groupable,
        default_visible=visible,
        default_order=order,
        category=category,
        format=format,
        enum_values=enum_values,
    )


def _id_field() -> FieldMetadata:
    return _field(
        "id",
        "المعرف",
        order=999,
        filterable=False,
        sortable=False,
        visible=False,
    )


def _branch_field() -> FieldMetadata:
    return _field("branch_id", "الفرع", order=900, groupable=True, visible=False)


def _debt_fields(party_label: str) -> list[FieldMetadata]:
    return [
        _field("contact_name", party_label, order=1, groupable=True),
        _field(
            "original_amount",
            "المبلغ الأصلي",
            "number",
            order=2,
            aggregatable=True,
            format="currency",
        ),
        _field(
            "remaining_amount",
            "المبلغ المتبقي",
            "number",
            order=3,
            aggregatable=True,
            format="currency",
        ),
        _field(
            "status",
            "الحالة",
            "enum",
            order=4,
            groupable=True,
            enum_values=["ACTIVE", "PAID", "PARTIAL"],
        ),
        _field("date", "تاريخ الدين", "date", order=5, format="date-short"),
        _field("due_date", "تاريخ الاستحقاق", "date", order=6, format="date-short"),
        _field("notes", "الملاحظات", order=7, sortable=False, visible=False),
        _branch_field(),
        _id_field(),
    ]


DEFAULT_FIELD_CATALOG: dict[EntityType, list[FieldMetadata]] = {
    EntityType.TRANSACTIONS: [
        _field(
            "amount", "المبلغ", "number", order=1, aggregatable=True, format="currency"
        ),
        _field(
            "type",
            "النوع",
            "enum",
            order=2,
            groupable=True,
            enum_values=["INCOME", "EXPENSE"],
        ),
        _field("category", "الفئة", order=3, groupable=True),
        _field(
            "payment_method",
            "طريقة الدفع",
            "enum",
            order=4,
            groupable=True,
            enum_values=["CASH", "MASTER"],
        ),
        _field("employee_vendor_name", "اسم الموظف/المورد", order=5),
        _field("notes", "الملاحظات", order=6, sortable=False, visible=False),
        _field(
            "date", "التاريخ", "date", order=7, groupable=True, format="date-short"
        ),
        _field(
            "created_at",
            "تاريخ الإنشاء",
            "date",
            order=10,
            visible=False,
            format="date-long",
        ),
        _branch_field(),
        _id_field(),
    ],
    EntityType.PAYABLES: _debt_fields("اسم الدائن"),
    EntityType.RECEIVABLES: _debt_fields("اسم المدين"),
    EntityType.INVENTORY: [
        _field("name", "اسم الصنف", order=1),
        _field("quantity", "الكمية", "number", order=2, aggregatable=True),
        _field(
            "unit",
            "الوحدة",
            "enum",
            order=3,
            groupable=True,
            enum_values=["KG", "PIECE", "LITER", "OTHER"],
        ),
        _field(
            "cost_per_unit",
            "التكلفة لكل وحدة",
            "number",
            order=4,
            aggregatable=True,
            format="currency",
        ),
        _field("last_updated", "آخر تحديث", "date", order=5, format="date-long"),
        _branch_field(),
        _id_field(),
    ],
    EntityType.SALARIES: [
        _field("name", "اسم الموظف", order=1),
        _field("position", "المنصب", order=2, groupable=True),
        _field(
            "base_salary",
            "الراتب الأساسي",
            "number",
            order=3,
            aggregatable=True,
            format="currency",
        ),
        _field(
            "allowance", "البدل", "number", order=4, aggregatable=True, format="currency"
        ),
        _field(
            "status",
            "الحالة",
            "enum",
            order=5,
            groupable=True,
            enum_values=["ACTIVE", "RESIGNED"],
        ),
        _field("hire_date", "تاريخ التوظيف", "date", order=6, format="date-short"),
        _branch_field(),
        _id_field(),
    ],
    EntityType.BRANCHES: [
        _field("name", "اسم الفرع", order=1),
        _field("location", "الموقع", order=2, sortable=False),
        _field("manager_name", "اسم المدير", order=3),
        _field("phone", "الهاتف", order=4, sortable=False),
        _field("is_active", "نشط", "boolean", order=5, groupable=True),
        _id_field(),
    ],
}


def get_default_fields(entity_type: EntityType) -> list[FieldMetadata]:
    """Return the default catalog of an entity sorted like persisted metadata."""
    fields = DEFAULT_FIELD_CATALOG.get(EntityType(entity_type), [])
    return sorted(fields, key=lambda item: (item.default_order, item.display_name))


__all__ = ["DEFAULT_FIELD_CATALOG", "get_default_fields"]
