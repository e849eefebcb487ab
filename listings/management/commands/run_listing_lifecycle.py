from django.core.management.base import BaseCommand
from listings.scheduler import run_sweep


class Command(BaseCommand):
    help = "Deactivate listings past their active window and remind producers of upcoming expiries."

    def add_arguments(self, parser):
        parser.add_argument("--skip-expiry", action="store_true", help="Do not run the expiry sweep.")
        parser.add_argument("--skip-reminders", action="store_true", help="Do not run the reminder sweep.")
        parser.add_argument(
            "--workers",
            type=int,
            default=None,
            help="Worker threads per sweep (defaults to LISTING_SWEEP_WORKERS).",
        )

    def handle(self, *args, **options):
        result = run_sweep(
            expire=not options["skip_expiry"],
            remind=not options["skip_reminders"],
            workers=options["workers"],
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Listings deactivated: {result.deactivated}, reminders sent: {result.reminded}, "
                f"skipped: {result.skipped}, failed: {result.failed}"
            )
        )
