"""Management command to export all records as a storage snapshot."""

import json

from django.core.management.base import BaseCommand

from visitman.apps import get_store


class Command(BaseCommand):
    help = "Write members, shops and visits as a JSON snapshot (browser storage layout)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--output",
            "-o",
            default="-",
            help="File path (default: stdout)",
        )
        parser.add_argument(
            "--active-member",
            default=None,
            help="Member code stored as the active-session pointer",
        )

    def handle(self, *args, **options):
        snapshot = get_store().snapshot(active_member_code=options["active_member"])
        text = json.dumps(snapshot, indent=2, ensure_ascii=False)

        if options["output"] == "-":
            self.stdout.write(text)
            return

        with open(options["output"], "w", encoding="utf-8") as fh:
            fh.write(text)
        self.stdout.write(
            self.style.SUCCESS(
                f"Exported {len(snapshot['loyalty_users'])} members, "
                f"{len(snapshot['loyalty_shops'])} shops, "
                f"{len(snapshot['loyalty_scans'])} visits to {options['output']}."
            )
        )
