"""Notifier: turns domain events into stored notifications.

Each receiver writes inside its own savepoint, so a failed insert is rolled
back on its own and reported by the event bus without undoing the mutation
that published the event. Listing owners only hear about interactions whose
``notify_*`` preference is on.
"""

from typing import Optional

from common.choices import NotificationType, OfferStatus
from common.events import domain_event
from django.db import transaction
from django.dispatch import receiver
from listings.events import (
    ListingAutoDeactivated,
    ListingDeactivationReminder,
    ListingLikeToggled,
    OfferReceived,
    OfferStatusChanged,
    ProductCommented,
    ProductOrdered,
)
from listings.selectors import get_listing_for_notification
from orders.events import OrderPlaced, OrderStatusChanged

from .services import notify


def _listing_data(event) -> dict:
    return {
        "listing_type": event.listing_type,
        "listing_id": event.listing_id,
        "listing_name": event.listing_name,
    }


def _owner_opted_in(event, flag: str) -> bool:
    listing = get_listing_for_notification(listing_type=event.listing_type, listing_id=event.listing_id)
    return listing is not None and bool(getattr(listing, flag, False))


def _store(*, user_id: int, type: str, title: str, message: str, data: dict, created_at=None) -> Optional[int]:
    with transaction.atomic():
        return notify(
            user_id=user_id, type=type, title=title, message=message, data=data, created_at=created_at
        ).id


@receiver(domain_event, sender=ListingAutoDeactivated, dispatch_uid="notify_listing_auto_deactivated")
def on_listing_auto_deactivated(sender, event: ListingAutoDeactivated, **kwargs):
    return _store(
        user_id=event.owner_user_id,
        type=NotificationType.LISTING_AUTO_DEACTIVATED,
        title="Listing deactivated automatically",
        message=(
            f'"{event.listing_name}" was deactivated because its active period ended. '
            "Reactivate it to make it visible again."
        ),
        data={**_listing_data(event), "deactivated_at": event.deactivated_at.isoformat()},
        created_at=event.deactivated_at,
    )


@receiver(domain_event, sender=ListingDeactivationReminder, dispatch_uid="notify_listing_deactivation_reminder")
def on_listing_deactivation_reminder(sender, event: ListingDeactivationReminder, **kwargs):
    return _store(
        user_id=event.owner_user_id,
        type=NotificationType.LISTING_DEACTIVATION_REMINDER,
        title="Listing expires soon",
        message=(
            f'"{event.listing_name}" will be deactivated in {event.days_left} day(s). '
            "Reactivate it to keep it visible."
        ),
        data={
            **_listing_data(event),
            "days_left": event.days_left,
            "auto_deactivate_at": event.auto_deactivate_at.isoformat(),
        },
        created_at=event.sent_at,
    )


@receiver(domain_event, sender=ListingLikeToggled, dispatch_uid="notify_listing_liked")
def on_listing_like_toggled(sender, event: ListingLikeToggled, **kwargs):
    if not event.liked or not _owner_opted_in(event, "notify_new_like"):
        return None
    notification_type = (
        NotificationType.PRODUCT_LIKE if event.listing_type == "product" else NotificationType.PRODUCTION_LISTING_LIKE
    )
    return _store(
        user_id=event.owner_user_id,
        type=notification_type,
        title="New like",
        message=f'"{event.listing_name}" was liked.',
        data={**_listing_data(event), "user_id": event.actor_id},
    )


@receiver(domain_event, sender=ProductCommented, dispatch_uid="notify_product_commented")
def on_product_commented(sender, event: ProductCommented, **kwargs):
    if not _owner_opted_in(event, "notify_new_comment"):
        return None
    return _store(
        user_id=event.owner_user_id,
        type=NotificationType.PRODUCT_COMMENT,
        title="New comment",
        message=f'"{event.listing_name}" received a new comment.',
        data={**_listing_data(event), "user_id": event.actor_id, "comment_id": event.comment_id, "rating": event.rating},
    )


@receiver(domain_event, sender=ProductOrdered, dispatch_uid="notify_product_ordered")
def on_product_ordered(sender, event: ProductOrdered, **kwargs):
    if not _owner_opted_in(event, "notify_new_order"):
        return None
    return _store(
        user_id=event.owner_user_id,
        type=NotificationType.PRODUCT_ORDER,
        title="New order",
        message=f'"{event.listing_name}" received an order for {event.quantity} unit(s).',
        data={
            **_listing_data(event),
            "user_id": event.actor_id,
            "reference": event.reference,
            "quantity": event.quantity,
            "total_price": str(event.total_price),
        },
    )


@receiver(domain_event, sender=OfferReceived, dispatch_uid="notify_offer_received")
def on_offer_received(sender, event: OfferReceived, **kwargs):
    if not _owner_opted_in(event, "notify_new_offer"):
        return None
    return _store(
        user_id=event.owner_user_id,
        type=NotificationType.PRODUCTION_OFFER,
        title="New offer",
        message=f'"{event.listing_name}" received an offer of {event.price} {event.currency}.',
        data={
            **_listing_data(event),
            "user_id": event.actor_id,
            "reference": event.reference,
            "price": str(event.price),
            "currency": event.currency,
        },
    )


@receiver(domain_event, sender=OfferStatusChanged, dispatch_uid="notify_offer_status_changed")
def on_offer_status_changed(sender, event: OfferStatusChanged, **kwargs):
    accepted = event.status == OfferStatus.ACCEPTED
    return _store(
        user_id=event.offer_user_id,
        type=NotificationType.OFFER_ACCEPTED if accepted else NotificationType.OFFER_REJECTED,
        title="Offer accepted" if accepted else "Offer rejected",
        message=f'Your offer on "{event.listing_name}" was {"accepted" if accepted else "rejected"}.',
        data={**_listing_data(event), "reference": event.reference, "status": event.status},
    )


@receiver(domain_event, sender=OrderPlaced, dispatch_uid="notify_order_placed")
def on_order_placed(sender, event: OrderPlaced, **kwargs):
    return _store(
        user_id=event.seller_user_id,
        type=NotificationType.ORDER_RECEIVED,
        title="New order received",
        message=f"Order {event.order_number} was placed for {event.total_amount} {event.currency}.",
        data={
            "order_id": event.order_id,
            "order_number": event.order_number,
            "buyer_id": event.buyer_id,
            "item_count": event.item_count,
        },
    )


@receiver(domain_event, sender=OrderStatusChanged, dispatch_uid="notify_order_status_changed")
def on_order_status_changed(sender, event: OrderStatusChanged, **kwargs):
    return _store(
        user_id=event.buyer_id,
        type=NotificationType.ORDER_STATUS_UPDATE,
        title="Order status updated",
        message=f"Order {event.order_number} is now {event.status}.",
        data={
            "order_id": event.order_id,
            "order_number": event.order_number,
            "previous_status": event.previous_status,
            "status": event.status,
        },
    )
