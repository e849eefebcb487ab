"""Interaction ledger: likes, comments, offers and product-page orders.

Each mutation locks the listing row, writes the ledger table, recomputes the
derived counter from a COUNT in the same transaction and publishes one domain
event. Interacting with your own listing is forbidden.
"""

import logging
import secrets
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from common.choices import CommentReaction, OfferStatus
from common.events import publish
from common.exceptions import BusinessValidationError, ConflictError, NotFoundError, PermissionDeniedError
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, F
from django.utils import timezone
from inventory.services import decrement_stock

from .events import ListingLikeToggled, OfferReceived, OfferStatusChanged, ProductCommented, ProductOrdered
from .lifecycle import ensure_owner
from .models import (
    CommentReply,
    ExpiringListing,
    Product,
    ProductComment,
    ProductionListing,
    ProductionOffer,
    ProductOrderRecord,
)

logger = logging.getLogger("uretix.listings")

REACTION_FIELDS = {
    CommentReaction.HELPFUL: "helpful_count",
    CommentReaction.LIKE: "like_count",
    CommentReaction.DISLIKE: "dislike_count",
}


def _reference(prefix: str) -> str:
    return f"{prefix}-{timezone.now():%Y%m%d}-{secrets.token_hex(4).upper()}"


def _lock(listing: ExpiringListing) -> ExpiringListing:
    return type(listing).objects.select_for_update().select_related("producer").get(pk=listing.pk)


def _ensure_not_owner(listing: ExpiringListing, user) -> None:
    if listing.producer.user_id == user.id:
        raise PermissionDeniedError("You cannot interact with your own listing.", code="own_listing")


def _ensure_active(listing: ExpiringListing) -> None:
    if not listing.is_active:
        raise ConflictError("This listing is not active.", code="listing_inactive")


def _base_event_fields(listing: ExpiringListing) -> dict:
    return {
        "owner_user_id": listing.producer.user_id,
        "listing_type": listing.listing_type,
        "listing_id": listing.pk,
        "listing_name": listing.display_name,
    }


@transaction.atomic
def toggle_like(*, listing: ExpiringListing, user) -> ExpiringListing:
    """Like the listing, or remove the like when ``user`` already liked it."""

    locked = _lock(listing)
    _ensure_not_owner(locked, user)
    likes = locked.likes
    removed, _ = likes.filter(user_id=user.id).delete()
    liked = not removed
    if liked:
        likes.create(user=user)
    locked.total_likes = likes.count()
    locked.save(update_fields=["total_likes"])

    logger.info(
        "listing.like_toggled",
        extra={
            "event": "listing.like_toggled",
            "listing_type": locked.listing_type,
            "listing_id": locked.pk,
            "user_id": user.id,
            "liked": liked,
        },
    )
    publish(
        ListingLikeToggled(
            **_base_event_fields(locked), actor_id=user.id, liked=liked, total_likes=locked.total_likes
        )
    )
    locked.is_liked = liked
    return locked


def _recompute_comment_stats(product: Product) -> None:
    stats = ProductComment.objects.filter(listing=product).aggregate(
        comments=Count("id"),
        ratings=Count("rating"),
        mean=Avg("rating"),
    )
    product.total_comments = stats["comments"]
    product.total_ratings = stats["ratings"]
    mean = stats["mean"]
    product.rating = (
        Decimal(str(mean)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) if mean is not None else Decimal("0.00")
    )


@transaction.atomic
def add_comment(*, product: Product, user, text: str, rating: Optional[int] = None) -> ProductComment:
    text = (text or "").strip()
    if not text:
        raise BusinessValidationError("Comment text is required.")
    if rating is not None and not 1 <= int(rating) <= 5:
        raise BusinessValidationError("Rating must be between 1 and 5.")

    locked = _lock(product)
    _ensure_not_owner(locked, user)
    if ProductComment.objects.filter(listing=locked, user_id=user.id).exists():
        raise ConflictError("You have already commented on this product.", code="already_commented")

    comment = ProductComment.objects.create(listing=locked, user=user, text=text, rating=rating)
    _recompute_comment_stats(locked)
    locked.save(update_fields=["total_comments", "total_ratings", "rating"])

    logger.info(
        "listing.comment_added",
        extra={"event": "listing.comment_added", "product_id": locked.pk, "comment_id": comment.id, "user_id": user.id},
    )
    publish(ProductCommented(**_base_event_fields(locked), actor_id=user.id, comment_id=comment.id, rating=rating))
    return comment


@transaction.atomic
def react_to_comment(*, comment_id: int, user, reaction: str) -> ProductComment:
    """Bump one reaction counter of a comment."""

    field = REACTION_FIELDS.get(reaction)
    if field is None:
        raise BusinessValidationError(f"Unknown reaction: {reaction}")
    comment = ProductComment.objects.select_related("listing__producer").filter(pk=comment_id).first()
    if comment is None:
        raise NotFoundError("Comment not found.")
    _ensure_not_owner(comment.listing, user)
    ProductComment.objects.filter(pk=comment.pk).update(**{field: F(field) + 1})
    comment.refresh_from_db(fields=list(REACTION_FIELDS.values()))
    return comment


@transaction.atomic
def reply_to_comment(*, comment_id: int, producer, text: str) -> CommentReply:
    """Owner reply to a comment left on one of its products."""

    text = (text or "").strip()
    if not text:
        raise BusinessValidationError("Reply text is required.")
    comment = ProductComment.objects.select_related("listing").filter(pk=comment_id).first()
    if comment is None:
        raise NotFoundError("Comment not found.")
    ensure_owner(comment.listing, producer)
    return CommentReply.objects.create(comment=comment, producer=producer, text=text)


@transaction.atomic
def add_offer(
    *,
    listing: ProductionListing,
    user,
    price: Decimal,
    currency: str,
    delivery_time: str,
    message: str = "",
) -> ProductionOffer:
    """Record the single offer ``user`` may make on an active production listing."""

    locked = _lock(listing)
    _ensure_not_owner(locked, user)
    _ensure_active(locked)
    if ProductionOffer.objects.filter(listing=locked, user_id=user.id).exists():
        raise ConflictError("You have already made an offer on this listing.", code="duplicate_offer")

    try:
        with transaction.atomic():
            offer = ProductionOffer.objects.create(
                listing=locked,
                user=user,
                reference=_reference("OFR"),
                price=price,
                currency=currency,
                delivery_time=delivery_time,
                message=message or "",
            )
    except IntegrityError:
        raise ConflictError("You have already made an offer on this listing.", code="duplicate_offer")

    locked.total_offers = ProductionOffer.objects.filter(listing=locked).count()
    locked.save(update_fields=["total_offers"])

    logger.info(
        "listing.offer_added",
        extra={"event": "listing.offer_added", "listing_id": locked.pk, "offer_id": offer.id, "user_id": user.id},
    )
    publish(
        OfferReceived(
            **_base_event_fields(locked),
            actor_id=user.id,
            reference=offer.reference,
            price=offer.price,
            currency=offer.currency,
        )
    )
    return offer


@transaction.atomic
def update_offer_status(*, listing: ProductionListing, offer_id: int, status: str, producer) -> ProductionOffer:
    """Accept or reject an offer. Re-applying the current status changes nothing."""

    if status not in (OfferStatus.ACCEPTED, OfferStatus.REJECTED):
        raise BusinessValidationError("Offer status must be accepted or rejected.")
    ensure_owner(listing, producer)
    offer = ProductionOffer.objects.select_for_update().filter(pk=offer_id, listing_id=listing.pk).first()
    if offer is None:
        raise NotFoundError("Offer not found.")
    if offer.status == status:
        return offer

    previous = offer.status
    offer.status = status
    offer.save(update_fields=["status", "updated_at"])
    logger.info(
        "listing.offer_status_changed",
        extra={
            "event": "listing.offer_status_changed",
            "offer_id": offer.id,
            "from": previous,
            "to": status,
        },
    )
    publish(
        OfferStatusChanged(
            **_base_event_fields(listing),
            offer_user_id=offer.user_id,
            reference=offer.reference,
            status=status,
        )
    )
    return offer


@transaction.atomic
def add_order_interaction(
    *, product: Product, user, quantity: int, variant_id: Optional[int] = None
) -> ProductOrderRecord:
    """Order straight from a product page, taking stock atomically."""

    if quantity is None or int(quantity) < 1:
        raise BusinessValidationError("Quantity must be at least 1.")
    quantity = int(quantity)

    locked = _lock(product)
    _ensure_not_owner(locked, user)
    _ensure_active(locked)

    variant = None
    if variant_id is not None:
        variant = locked.variants.filter(pk=variant_id).first()
        if variant is None:
            raise NotFoundError("Variant not found.")
    unit_price = variant.price if variant is not None else locked.price
    total_price = unit_price * quantity
    reference = _reference("ORD")

    decrement_stock(product=locked, variant=variant, quantity=quantity, reason="product order", reference=reference)
    record = ProductOrderRecord.objects.create(
        listing=locked,
        user=user,
        variant=variant,
        reference=reference,
        quantity=quantity,
        unit_price=unit_price,
        total_price=total_price,
    )
    locked.total_orders = ProductOrderRecord.objects.filter(listing=locked).count()
    locked.total_revenue = locked.total_revenue + total_price
    locked.save(update_fields=["total_orders", "total_revenue"])

    logger.info(
        "listing.order_added",
        extra={
            "event": "listing.order_added",
            "product_id": locked.pk,
            "reference": reference,
            "quantity": quantity,
            "user_id": user.id,
        },
    )
    publish(
        ProductOrdered(
            **_base_event_fields(locked),
            actor_id=user.id,
            reference=reference,
            quantity=quantity,
            total_price=total_price,
        )
    )
    return record


def record_view(*, listing: ProductionListing, user=None) -> None:
    """Count a detail view; owners viewing their own listing are not counted."""

    if user is not None and getattr(user, "is_authenticated", False) and listing.producer.user_id == user.id:
        return
    ProductionListing.objects.filter(pk=listing.pk).update(total_views=F("total_views") + 1)
