"""Management command to import a storage snapshot (e.g. from the browser app)."""

import json

from django.core.management.base import BaseCommand, CommandError

from visitman.apps import get_store
from visitman.exceptions import VisitmanError


class Command(BaseCommand):
    help = "Import members, shops and visits from a JSON snapshot"

    def add_arguments(self, parser):
        parser.add_argument("path", help="Snapshot JSON file")

    def handle(self, *args, **options):
        try:
            with open(options["path"], encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise CommandError(f"Cannot read snapshot: {exc}")

        try:
            result = get_store().restore(data)
        except VisitmanError as exc:
            raise CommandError(exc.message)

        self.stdout.write(
            self.style.SUCCESS(
                f"Imported {result['members']} members, {result['shops']} shops, "
                f"{result['visits']} visits ({result['skipped']} skipped)."
            )
        )
