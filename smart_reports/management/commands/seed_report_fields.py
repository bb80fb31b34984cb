from django.core.management.base import BaseCommand, CommandError
from django.db import OperationalError, ProgrammingError, transaction

from smart_reports.catalog import DEFAULT_FIELD_CATALOG
from smart_reports.models import ReportFieldMetadata
from smart_reports.types import EntityType


class Command(BaseCommand):
    help = "Create or update report field metadata from the default catalog."

    def add_arguments(self, parser):
        parser.add_argument(
            "--entity",
            default=None,
            choices=EntityType.values,
            help="Only seed fields of this entity (default: all entities).",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would be written without touching the database.",
        )

    def handle(self, *args, **options):
        entity = options.get("entity")
        entities = [EntityType(entity)] if entity else list(EntityType)
        dry_run = bool(options.get("dry_run"))

        total = sum(len(DEFAULT_FIELD_CATALOG[item]) for item in entities)
        if dry_run:
            for item in entities:
                names = ", ".join(
                    field.field_name for field in DEFAULT_FIELD_CATALOG[item]
                )
                self.stdout.write(f"{item.value}: {names}")
            self.stdout.write(self.style.SUCCESS(f"{total} fields would be seeded."))
            return

        created = 0
        try:
            with transaction.atomic():
                for item in entities:
                    for field in DEFAULT_FIELD_CATALOG[item]:
                        _, was_created = ReportFieldMetadata.objects.update_or_create(
                            data_source=item.value,
                            field_name=field.field_name,
                            defaults={
                                "display_name": field.display_name,
                                "data_type": field.data_type,
                                "filterable": field.filterable,
                                "sortable": field.sortable,
                                "aggregatable": field.aggregatable,
                                "groupable": field.groupable,
                                "default_visible": field.default_visible,
                                "default_order": field.default_order,
                                "category": field.category or "",
                                "description": field.description or "",
                                "format": field.format or "",
                                "enum_values": field.enum_values,
                            },
                        )
                        created += int(was_created)
        except (OperationalError, ProgrammingError) as exc:
            raise CommandError(f"Unable to seed report fields (DB not ready): {exc}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {total} report fields ({created} created, {total - created} updated)."
            )
        )
