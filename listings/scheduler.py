"""Auto-deactivation scheduler.

Two sweeps run over every `ExpiringListing` model:

* expiry: active listings whose ``auto_deactivate_at`` has passed are switched
  off with a conditional update and their producer is told about it;
* reminders: active listings expiring within the reminder window get at most
  one reminder per de-duplication window.

Each listing is processed in its own transaction; a failure is logged and the
sweep moves on. ``run_sweep`` is driven by the ``run_listing_lifecycle``
management command and accepts ``now`` so tests can pin the clock.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from common.choices import NotificationType
from common.events import publish
from django.conf import settings
from django.db import connections, transaction
from django.utils import timezone
from notifications.selectors import has_recent_notification

from .events import ListingAutoDeactivated, ListingDeactivationReminder
from .models import ExpiringListing, Product, ProductionListing

logger = logging.getLogger("uretix.scheduler")

LISTING_MODELS = (Product, ProductionListing)


@dataclass
class SweepResult:
    deactivated: int = 0
    reminded: int = 0
    skipped: int = 0
    failed: int = 0


def expire_listing(listing: ExpiringListing, *, now: datetime) -> bool:
    """Deactivate ``listing`` if it is still active and still due. Returns True when it flipped.

    The due check is repeated in the update so an owner bump between selection
    and update keeps the listing active.
    """

    with transaction.atomic():
        flipped = (
            type(listing)
            .objects.filter(
                pk=listing.pk,
                is_active=True,
                auto_deactivate_enabled=True,
                auto_deactivate_at__lte=now,
            )
            .update(is_active=False, updated_at=now)
        )
        if not flipped:
            return False
        publish(
            ListingAutoDeactivated(
                owner_user_id=listing.producer.user_id,
                listing_type=listing.listing_type,
                listing_id=listing.pk,
                listing_name=listing.display_name,
                deactivated_at=now,
            )
        )
    logger.info(
        "listing.auto_deactivated",
        extra={
            "event": "listing.auto_deactivated",
            "listing_type": listing.listing_type,
            "listing_id": listing.pk,
            "producer_id": listing.producer_id,
        },
    )
    return True


def days_left(auto_deactivate_at: datetime, now: datetime) -> int:
    return math.ceil((auto_deactivate_at - now) / timedelta(days=1))


def remind_listing(listing: ExpiringListing, *, now: datetime) -> bool:
    """Publish a reminder unless one already went out in the de-duplication window."""

    owner_user_id = listing.producer.user_id
    since = now - timedelta(hours=settings.LISTING_REMINDER_DEDUP_HOURS)
    if has_recent_notification(
        user_id=owner_user_id,
        type=NotificationType.LISTING_DEACTIVATION_REMINDER,
        since=since,
        data={"listing_type": listing.listing_type, "listing_id": listing.pk},
    ):
        return False

    remaining = days_left(listing.auto_deactivate_at, now)
    with transaction.atomic():
        publish(
            ListingDeactivationReminder(
                owner_user_id=owner_user_id,
                listing_type=listing.listing_type,
                listing_id=listing.pk,
                listing_name=listing.display_name,
                auto_deactivate_at=listing.auto_deactivate_at,
                days_left=remaining,
                sent_at=now,
            )
        )
    logger.info(
        "listing.reminder_sent",
        extra={
            "event": "listing.reminder_sent",
            "listing_type": listing.listing_type,
            "listing_id": listing.pk,
            "days_left": remaining,
        },
    )
    return True


def _guarded(handler: Callable, listing: ExpiringListing, now: datetime) -> Optional[bool]:
    try:
        return handler(listing, now=now)
    except Exception:
        logger.exception(
            "scheduler.listing_failed",
            extra={
                "event": "scheduler.listing_failed",
                "handler": handler.__name__,
                "listing_type": listing.listing_type,
                "listing_id": listing.pk,
            },
        )
        return None


def _guarded_in_thread(handler: Callable, listing: ExpiringListing, now: datetime) -> Optional[bool]:
    try:
        return _guarded(handler, listing, now)
    finally:
        connections.close_all()


def _process(listings: Iterable[ExpiringListing], handler: Callable, *, now: datetime, workers: int) -> list:
    listings = list(listings)
    if workers <= 1 or len(listings) <= 1:
        return [_guarded(handler, listing, now) for listing in listings]
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="listing-sweep") as pool:
        return list(pool.map(lambda listing: _guarded_in_thread(handler, listing, now), listings))


def _tally(result: SweepResult, outcomes: list, field: str) -> None:
    for outcome in outcomes:
        if outcome is None:
            result.failed += 1
        elif outcome:
            setattr(result, field, getattr(result, field) + 1)
        else:
            result.skipped += 1


def run_sweep(
    *,
    now: Optional[datetime] = None,
    expire: bool = True,
    remind: bool = True,
    workers: Optional[int] = None,
    models: Iterable = LISTING_MODELS,
) -> SweepResult:
    """Run the expiry sweep, then the reminder sweep, over every listing model."""

    now = now or timezone.now()
    workers = workers or settings.LISTING_SWEEP_WORKERS
    window = timedelta(days=settings.LISTING_REMINDER_WINDOW_DAYS)
    result = SweepResult()

    for model in models:
        if expire:
            due = model.objects.due_for_deactivation(now=now).select_related("producer").order_by("pk")
            _tally(result, _process(due, expire_listing, now=now, workers=workers), "deactivated")
        if remind:
            due = model.objects.due_for_reminder(now=now, window=window).select_related("producer").order_by("pk")
            _tally(result, _process(due, remind_listing, now=now, workers=workers), "reminded")

    logger.info(
        "scheduler.sweep_finished",
        extra={
            "event": "scheduler.sweep_finished",
            "deactivated": result.deactivated,
            "reminded": result.reminded,
            "skipped": result.skipped,
            "failed": result.failed,
        },
    )
    return result
