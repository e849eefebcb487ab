"""Domain events published by listing services and the lifecycle scheduler."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from common.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ListingEvent(DomainEvent):
    owner_user_id: int
    listing_type: str
    listing_id: int
    listing_name: str


@dataclass(frozen=True, kw_only=True)
class ListingAutoDeactivated(ListingEvent):
    deactivated_at: datetime


@dataclass(frozen=True, kw_only=True)
class ListingDeactivationReminder(ListingEvent):
    auto_deactivate_at: datetime
    days_left: int
    sent_at: datetime


@dataclass(frozen=True, kw_only=True)
class ListingLikeToggled(ListingEvent):
    actor_id: int
    liked: bool
    total_likes: int


@dataclass(frozen=True, kw_only=True)
class ProductCommented(ListingEvent):
    actor_id: int
    comment_id: int
    rating: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class ProductOrdered(ListingEvent):
    actor_id: int
    reference: str
    quantity: int
    total_price: Decimal


@dataclass(frozen=True, kw_only=True)
class OfferReceived(ListingEvent):
    actor_id: int
    reference: str
    price: Decimal
    currency: str


@dataclass(frozen=True, kw_only=True)
class OfferStatusChanged(ListingEvent):
    """Offer decision; ``offer_user_id`` is the recipient, not the owner."""

    offer_user_id: int
    reference: str
    status: str
