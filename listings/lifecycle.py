"""Listing activation lifecycle and owner-side management.

Every transition into the active state (creation as active, explicit
activation, or an owner update flipping ``is_active`` on) stamps
``last_activated_at`` and a fresh ``auto_deactivate_at`` window. Going
inactive leaves both timestamps untouched.

Functions accept an optional ``now`` so callers (and tests) can pin time.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from common.exceptions import BusinessValidationError, PermissionDeniedError
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .models import ExpiringListing, Product, ProductionListing, ProductVariant

logger = logging.getLogger("uretix.listings")

SETTINGS_FIELDS = {
    ExpiringListing: ("auto_deactivate_enabled", "notify_new_like", "notify_auto_deactivate_reminder"),
    Product: ("notify_new_comment", "notify_new_order"),
    ProductionListing: ("notify_new_offer",),
}


def active_ttl() -> timedelta:
    return timedelta(days=settings.LISTING_ACTIVE_TTL_DAYS)


def settings_fields_for(model) -> tuple:
    """Owner-editable preference fields for a concrete listing model."""

    return SETTINGS_FIELDS[ExpiringListing] + SETTINGS_FIELDS.get(model, ())


def stamp_activation(listing: ExpiringListing, now: datetime) -> None:
    listing.is_active = True
    listing.last_activated_at = now
    listing.auto_deactivate_at = now + active_ttl()


def ensure_owner(listing: ExpiringListing, producer) -> None:
    if producer is None or listing.producer_id != producer.id:
        raise PermissionDeniedError("Only the owning producer can manage this listing.")


def _lock(listing: ExpiringListing) -> ExpiringListing:
    return type(listing).objects.select_for_update().get(pk=listing.pk)


def _log(event: str, listing: ExpiringListing, **extra) -> None:
    logger.info(
        event,
        extra={
            "event": event,
            "listing_type": listing.listing_type,
            "listing_id": listing.pk,
            "producer_id": listing.producer_id,
            **extra,
        },
    )


@transaction.atomic
def activate_listing(*, listing: ExpiringListing, producer, now: Optional[datetime] = None) -> ExpiringListing:
    """Activate (or re-bump) a listing, restarting its expiry window."""

    ensure_owner(listing, producer)
    now = now or timezone.now()
    locked = _lock(listing)
    stamp_activation(locked, now)
    locked.save(update_fields=["is_active", "last_activated_at", "auto_deactivate_at", "updated_at"])
    _log("listing.activated", locked, auto_deactivate_at=locked.auto_deactivate_at.isoformat())
    return locked


@transaction.atomic
def deactivate_listing(*, listing: ExpiringListing, producer) -> ExpiringListing:
    ensure_owner(listing, producer)
    locked = _lock(listing)
    if locked.is_active:
        locked.is_active = False
        locked.save(update_fields=["is_active", "updated_at"])
        _log("listing.deactivated", locked)
    return locked


@transaction.atomic
def update_listing_settings(
    *, listing: ExpiringListing, producer, changes: dict, now: Optional[datetime] = None
) -> ExpiringListing:
    """Update auto-deactivation and notification preferences.

    Re-enabling auto-deactivation on an active listing starts a fresh window,
    so a listing that ran without expiry for a while is not swept at once.
    """

    ensure_owner(listing, producer)
    allowed = settings_fields_for(type(listing))
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise BusinessValidationError(f"Unknown settings: {', '.join(unknown)}")

    now = now or timezone.now()
    locked = _lock(listing)
    was_enabled = locked.auto_deactivate_enabled
    for field, value in changes.items():
        setattr(locked, field, bool(value))
    update_fields = list(changes)
    if locked.is_active and locked.auto_deactivate_enabled and not was_enabled:
        stamp_activation(locked, now)
        update_fields += ["last_activated_at", "auto_deactivate_at"]
    locked.save(update_fields=update_fields + ["updated_at"])
    _log("listing.settings_updated", locked, changed=sorted(changes))
    return locked


def _sync_variants(product: Product, variants: Iterable[dict]) -> None:
    """Upsert variants by (size, color) and drop the ones not listed."""

    keep = []
    for variant_data in variants:
        size = variant_data.get("size") or ""
        color = variant_data.get("color") or ""
        variant, _ = ProductVariant.objects.update_or_create(
            product=product,
            size=size,
            color=color,
            defaults={"price": variant_data["price"], "stock": variant_data.get("stock", 0)},
        )
        keep.append(variant.pk)
    product.variants.exclude(pk__in=keep).delete()


@transaction.atomic
def create_listing(
    *, model, producer, data: dict, variants: Optional[list] = None, now: Optional[datetime] = None
) -> ExpiringListing:
    """Create a listing owned by ``producer``; active listings get a window."""

    if producer is None:
        raise PermissionDeniedError("This action requires a producer account.", code="producer_required")
    fields = dict(data)
    is_active = fields.pop("is_active", True)
    listing = model(producer=producer, is_active=False, **fields)
    if is_active:
        stamp_activation(listing, now or timezone.now())
    listing.save()
    if variants and isinstance(listing, Product):
        _sync_variants(listing, variants)
    _log("listing.created", listing, is_active=listing.is_active)
    return listing


@transaction.atomic
def update_listing(
    *,
    listing: ExpiringListing,
    producer,
    data: dict,
    variants: Optional[list] = None,
    now: Optional[datetime] = None,
) -> ExpiringListing:
    """Apply an owner edit.

    Flipping ``is_active`` on counts as activation, and re-enabling
    auto-deactivation on an active listing starts a fresh window, as in
    `update_listing_settings`.
    """

    ensure_owner(listing, producer)
    now = now or timezone.now()
    locked = _lock(listing)
    was_enabled = locked.auto_deactivate_enabled
    fields = dict(data)
    wants_active = fields.pop("is_active", None)
    for field, value in fields.items():
        setattr(locked, field, value)
    if wants_active and not locked.is_active:
        stamp_activation(locked, now)
    elif wants_active is False:
        locked.is_active = False
    elif locked.is_active and locked.auto_deactivate_enabled and not was_enabled:
        stamp_activation(locked, now)
    locked.save()
    if variants is not None and isinstance(locked, Product):
        _sync_variants(locked, variants)
    _log("listing.updated", locked, is_active=locked.is_active)
    return locked


@transaction.atomic
def delete_listing(*, listing: ExpiringListing, producer) -> None:
    ensure_owner(listing, producer)
    _log("listing.deleted", listing)
    listing.delete()
