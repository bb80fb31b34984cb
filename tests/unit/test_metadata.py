"""
Unit tests for the field metadata registry and the seeding command.
"""

from io import StringIO

import pytest
from django.core.management import call_command
from django.test import TestCase

from smart_reports.catalog import DEFAULT_FIELD_CATALOG, get_default_fields
from smart_reports.exceptions import ReportValidationError
from smart_reports.metadata import get_available_fields, get_data_sources, get_field_index
from smart_reports.models import ReportFieldMetadata
from smart_reports.types import EntityType

pytestmark = pytest.mark.unit


def test_every_entity_has_a_default_catalog():
    assert set(DEFAULT_FIELD_CATALOG) == set(EntityType)
    for entity in EntityType:
        names = [item.field_name for item in DEFAULT_FIELD_CATALOG[entity]]
        assert "id" in names
        assert len(names) == len(set(names))


def test_branch_column_only_on_branch_scoped_entities():
    for entity in EntityType:
        names = {item.field_name for item in get_default_fields(entity)}
        assert ("branch_id" in names) is (entity != EntityType.BRANCHES)


def test_data_sources_list_every_entity():
    sources = get_data_sources()
    assert len(sources) == 6
    assert {item["value"] for item in sources} == set(EntityType.values)
    assert all(item["label"] for item in sources)


class TestFieldRegistry(TestCase):
    def test_defaults_are_used_when_nothing_is_persisted(self):
        fields = get_available_fields("transactions")

        self.assertEqual(fields[0].field_name, "amount")
        self.assertEqual(fields[-1].field_name, "id")
        self.assertTrue(fields[0].aggregatable)
        orders = [item.default_order for item in fields]
        self.assertEqual(orders, sorted(orders))

    def test_persisted_metadata_replaces_defaults(self):
        ReportFieldMetadata.objects.create(
            data_source="inventory",
            field_name="quantity",
            display_name="Qty",
            data_type="number",
            default_order=2,
            aggregatable=True,
        )
        ReportFieldMetadata.objects.create(
            data_source="inventory",
            field_name="name",
            display_name="Item",
            default_order=2,
        )
        ReportFieldMetadata.objects.create(
            data_source="inventory",
            field_name="unit",
            display_name="Unit",
            default_order=1,
            enum_values=["KG", "PIECE"],
        )

        fields = get_available_fields(EntityType.INVENTORY)

        self.assertEqual([item.field_name for item in fields], ["unit", "name", "quantity"])
        self.assertEqual(fields[0].enum_values, ["KG", "PIECE"])
        self.assertIsNone(fields[1].format)
        self.assertEqual(set(get_field_index("inventory")), {"unit", "name", "quantity"})
        self.assertEqual(get_available_fields("salaries")[0].field_name, "name")

    def test_unknown_entity_is_rejected(self):
        with self.assertRaises(ReportValidationError):
            get_available_fields("invoices")


class TestSeedReportFieldsCommand(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_report_fields", stdout=out)
        call_command("seed_report_fields", stdout=out)

        total = sum(len(fields) for fields in DEFAULT_FIELD_CATALOG.values())
        self.assertEqual(ReportFieldMetadata.objects.count(), total)
        self.assertEqual(
            ReportFieldMetadata.objects.filter(data_source="branches").count(), 6
        )
        self.assertIn(f"0 created, {total} updated", out.getvalue())

        seeded = [item.field_name for item in get_available_fields("transactions")]
        expected = [item.field_name for item in get_default_fields("transactions")]
        self.assertEqual(seeded, expected)

    def test_seed_single_entity(self):
        call_command("seed_report_fields", entity="payables", stdout=StringIO())
        self.assertEqual(
            set(ReportFieldMetadata.objects.values_list("data_source", flat=True)),
            {"payables"},
        )

    def test_dry_run_writes_nothing(self):
        out = StringIO()
        call_command("seed_report_fields", dry_run=True, stdout=out)

        self.assertEqual(ReportFieldMetadata.objects.count(), 0)
        self.assertIn("would be seeded", out.getvalue())
