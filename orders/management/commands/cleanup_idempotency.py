import logging

from django.core.management.base import BaseCommand
from django.utils import timezone
from orders.models import IdempotencyKey

logger = logging.getLogger("uretix.orders")


class Command(BaseCommand):
    help = "Purge stored checkout/cancel responses whose idempotency window has passed"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report how many keys would be purged")

    def handle(self, *args, **options):
        expired = IdempotencyKey.objects.filter(expires_at__lt=timezone.now())
        if options["dry_run"]:
            self.stdout.write(f"{expired.count()} idempotency key(s) would be deleted.")
            return
        deleted, _ = expired.delete()
        logger.info("idempotency.cleanup", extra={"event": "idempotency.cleanup", "deleted": deleted})
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} expired idempotency key(s)."))
