"""Read-only listing queries used by views, services and the notifier."""

from typing import Optional

from common.choices import OfferStatus
from common.exceptions import NotFoundError
from django.db.models import Count, Q

from .models import ExpiringListing, Product, ProductComment, ProductionListing, ProductionOffer

LISTING_MODELS = {
    Product.listing_type: Product,
    ProductionListing.listing_type: ProductionListing,
}


def get_listing_model(listing_type: str):
    try:
        return LISTING_MODELS[listing_type]
    except KeyError:
        raise NotFoundError(f"Unknown listing type: {listing_type}")


def list_products(*, producer=None):
    """Products visible to the caller: active ones plus the caller's own."""

    return (
        Product.objects.visible_to(producer)
        .select_related("producer")
        .prefetch_related("variants")
        .order_by("-created_at", "-id")
    )


def list_production_listings(*, producer=None):
    return ProductionListing.objects.visible_to(producer).select_related("producer").order_by("-created_at", "-id")


def get_visible_listing(*, model, pk: int, producer=None) -> ExpiringListing:
    listing = model.objects.visible_to(producer).select_related("producer").filter(pk=pk).first()
    if listing is None:
        raise NotFoundError(f"{model._meta.verbose_name.capitalize()} not found.")
    return listing


def get_listing_for_notification(*, listing_type: str, listing_id: int) -> Optional[ExpiringListing]:
    model = LISTING_MODELS.get(listing_type)
    if model is None:
        return None
    return model.objects.filter(pk=listing_id).first()


def is_liked(*, listing: ExpiringListing, user) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    return listing.likes.filter(user_id=user.id).exists()


def list_comments(*, product: Product):
    return (
        ProductComment.objects.filter(listing=product)
        .select_related("user")
        .prefetch_related("replies__producer")
        .order_by("-created_at", "-id")
    )


def offer_for_user(*, listing: ProductionListing, user) -> Optional[ProductionOffer]:
    return ProductionOffer.objects.filter(listing=listing, user_id=user.id).first()


def list_offers(*, listing: ProductionListing):
    return ProductionOffer.objects.filter(listing=listing).select_related("user").order_by("-created_at", "-id")


def product_stats(*, product: Product) -> dict:
    return {
        "total_likes": product.total_likes,
        "total_comments": product.total_comments,
        "total_orders": product.total_orders,
        "total_revenue": product.total_revenue,
        "rating": product.rating,
        "total_ratings": product.total_ratings,
    }


def production_listing_stats(*, listing: ProductionListing) -> dict:
    breakdown = ProductionOffer.objects.filter(listing=listing).aggregate(
        pending=Count("id", filter=Q(status=OfferStatus.PENDING)),
        accepted=Count("id", filter=Q(status=OfferStatus.ACCEPTED)),
        rejected=Count("id", filter=Q(status=OfferStatus.REJECTED)),
    )
    return {
        "total_offers": listing.total_offers,
        "total_likes": listing.total_likes,
        "total_views": listing.total_views,
        "pending_offers": breakdown["pending"],
        "accepted_offers": breakdown["accepted"],
        "rejected_offers": breakdown["rejected"],
    }
