"""Shared enumerations and choices used across apps."""

from django.db import models


class Currency(models.TextChoices):
    TRY = "TL", "Turkish Lira"
    USD = "USD", "US Dollar"
    EUR = "EUR", "Euro"


class WorkType(models.TextChoices):
    """Engagement types for production listings."""

    FULL_TIME = "tam zamanlı", "Full time"
    PART_TIME = "yarı zamanlı", "Part time"
    REMOTE = "uzaktan", "Remote"
    INTERNSHIP = "staj", "Internship"
    PRODUCTION = "üretim", "Production"


class MovementType(models.TextChoices):
    INBOUND = "in", "Inbound"
    OUTBOUND = "out", "Outbound"


class OfferStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"


class InteractionOrderStatus(models.TextChoices):
    """Statuses for orders placed directly on a product page."""

    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"


class CommentReaction(models.TextChoices):
    HELPFUL = "helpful", "Helpful"
    LIKE = "like", "Like"
    DISLIKE = "dislike", "Dislike"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders.

    Values are stored in Turkish as exposed to existing clients.
    """

    PENDING = "pending", "Pending"
    CONFIRMED = "onaylandı", "Confirmed"
    PREPARING = "hazırlanıyor", "Preparing"
    SHIPPED = "kargoda", "Shipped"
    DELIVERED = "teslim edildi", "Delivered"
    CANCELLED = "iptal edildi", "Cancelled"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "ödendi", "Paid"
    PARTIALLY_PAID = "kısmi_ödendi", "Partially paid"
    CANCELLED = "iptal", "Cancelled"


class NotificationType(models.TextChoices):
    LISTING_AUTO_DEACTIVATED = "listing_auto_deactivated", "Listing auto-deactivated"
    LISTING_DEACTIVATION_REMINDER = "listing_deactivation_reminder", "Listing deactivation reminder"
    PRODUCT_LIKE = "product_like", "Product liked"
    PRODUCT_COMMENT = "product_comment", "Product commented"
    PRODUCT_ORDER = "product_order", "Product ordered"
    PRODUCTION_LISTING_LIKE = "production_listing_like", "Production listing liked"
    PRODUCTION_OFFER = "production_offer", "Production offer received"
    OFFER_ACCEPTED = "offer_accepted", "Offer accepted"
    OFFER_REJECTED = "offer_rejected", "Offer rejected"
    ORDER_RECEIVED = "order_received", "Order received"
    ORDER_STATUS_UPDATE = "order_status_update", "Order status updated"
