from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand

from care.services.resolution import flag_stale_prescriptions


class Command(BaseCommand):
    help = "Flag prescriptions whose dispatch request is still queued, for manual review."

    def add_arguments(self, parser):
        parser.add_argument(
            "--minutes",
            type=int,
            default=getattr(settings, "RECONCILE_STALE_MINUTES", 15),
            help="Only consider requests older than this many minutes.",
        )

    def handle(self, *args, **options):
        flagged = flag_stale_prescriptions(timedelta(minutes=options["minutes"]))
        self.stdout.write(self.style.SUCCESS(f"Flagged {flagged} prescription(s) for review."))
