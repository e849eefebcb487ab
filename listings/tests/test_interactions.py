from decimal import Decimal

import pytest
from common.choices import NotificationType, OfferStatus
from common.exceptions import ConflictError, PermissionDeniedError
from inventory.models import StockMovement
from listings.interactions import (
    add_comment,
    add_offer,
    add_order_interaction,
    react_to_comment,
    record_view,
    reply_to_comment,
    toggle_like,
    update_offer_status,
)
from listings.tests.factories import (
    ProductFactory,
    ProductionListingFactory,
    ProductionOfferFactory,
    ProductVariantFactory,
)
from notifications.models import Notification
from producers.tests.factories import ProducerFactory, UserFactory


@pytest.mark.django_db
def test_toggle_like_adds_then_removes_and_notifies_owner_once():
    product = ProductFactory()
    user = UserFactory()

    liked = toggle_like(listing=product, user=user)
    assert liked.is_liked is True
    assert liked.total_likes == 1

    unliked = toggle_like(listing=product, user=user)
    assert unliked.is_liked is False
    assert unliked.total_likes == 0

    notes = Notification.objects.filter(user=product.producer.user, type=NotificationType.PRODUCT_LIKE)
    assert notes.count() == 1
    assert notes.get().data["listing_id"] == product.id


@pytest.mark.django_db
def test_like_notification_respects_owner_preference():
    listing = ProductionListingFactory(notify_new_like=False)

    toggle_like(listing=listing, user=UserFactory())

    assert not Notification.objects.filter(user=listing.producer.user).exists()


@pytest.mark.django_db
def test_owner_cannot_like_own_listing():
    product = ProductFactory()

    with pytest.raises(PermissionDeniedError):
        toggle_like(listing=product, user=product.producer.user)


@pytest.mark.django_db
def test_comments_recompute_rating_and_reject_duplicates():
    product = ProductFactory()
    first, second = UserFactory(), UserFactory()

    add_comment(product=product, user=first, text="Great", rating=5)
    add_comment(product=product, user=second, text="Fine", rating=4)
    add_comment(product=product, user=UserFactory(), text="No rating")

    product.refresh_from_db()
    assert product.total_comments == 3
    assert product.total_ratings == 2
    assert product.rating == Decimal("4.50")

    with pytest.raises(ConflictError) as exc:
        add_comment(product=product, user=first, text="Again")
    assert exc.value.code == "already_commented"


@pytest.mark.django_db
def test_reactions_and_owner_reply():
    product = ProductFactory()
    comment = add_comment(product=product, user=UserFactory(), text="Nice")

    reacted = react_to_comment(comment_id=comment.id, user=UserFactory(), reaction="helpful")
    assert reacted.helpful_count == 1

    reply = reply_to_comment(comment_id=comment.id, producer=product.producer, text="Thanks")
    assert reply.comment_id == comment.id

    with pytest.raises(PermissionDeniedError):
        reply_to_comment(comment_id=comment.id, producer=ProducerFactory(), text="Not mine")


@pytest.mark.django_db
def test_one_offer_per_user_and_counter():
    listing = ProductionListingFactory()
    user = UserFactory()

    offer = add_offer(listing=listing, user=user, price=Decimal("750.00"), currency="TL", delivery_time="10 days")
    assert offer.reference.startswith("OFR-")
    listing.refresh_from_db()
    assert listing.total_offers == 1
    assert Notification.objects.filter(
        user=listing.producer.user, type=NotificationType.PRODUCTION_OFFER
    ).exists()

    with pytest.raises(ConflictError) as exc:
        add_offer(listing=listing, user=user, price=Decimal("700.00"), currency="TL", delivery_time="9 days")
    assert exc.value.code == "duplicate_offer"


@pytest.mark.django_db
def test_offers_on_inactive_listing_are_rejected():
    listing = ProductionListingFactory(is_active=False)

    with pytest.raises(ConflictError) as exc:
        add_offer(listing=listing, user=UserFactory(), price=Decimal("1.00"), currency="TL", delivery_time="1 day")
    assert exc.value.code == "listing_inactive"


@pytest.mark.django_db
def test_offer_decision_notifies_offerer_and_same_status_is_noop():
    offer = ProductionOfferFactory()
    listing = offer.listing

    updated = update_offer_status(
        listing=listing, offer_id=offer.id, status=OfferStatus.ACCEPTED, producer=listing.producer
    )
    assert updated.status == OfferStatus.ACCEPTED
    update_offer_status(listing=listing, offer_id=offer.id, status=OfferStatus.ACCEPTED, producer=listing.producer)

    notes = Notification.objects.filter(user=offer.user, type=NotificationType.OFFER_ACCEPTED)
    assert notes.count() == 1


@pytest.mark.django_db
def test_product_page_order_takes_variant_stock():
    variant = ProductVariantFactory(stock=3, price=Decimal("20.00"))
    product = variant.product
    buyer = UserFactory()

    record = add_order_interaction(product=product, user=buyer, quantity=2, variant_id=variant.id)

    variant.refresh_from_db()
    product.refresh_from_db()
    assert variant.stock == 1
    assert record.total_price == Decimal("40.00")
    assert product.total_orders == 1
    assert product.total_revenue == Decimal("40.00")
    assert StockMovement.objects.filter(reference=record.reference, quantity=-2).exists()

    with pytest.raises(ConflictError) as exc:
        add_order_interaction(product=product, user=buyer, quantity=2, variant_id=variant.id)
    assert exc.value.code == "insufficient_stock"


@pytest.mark.django_db
def test_views_are_not_counted_for_owner():
    listing = ProductionListingFactory()

    record_view(listing=listing, user=listing.producer.user)
    record_view(listing=listing, user=UserFactory())
    record_view(listing=listing)

    listing.refresh_from_db()
    assert listing.total_views == 2


@pytest.mark.django_db
def test_owner_cannot_comment_on_own_product():
    product = ProductFactory()

    with pytest.raises(PermissionDeniedError):
        add_comment(product=product, user=product.producer.user, text="Great quality", rating=5)

    product.refresh_from_db()
    assert product.total_comments == 0
    assert product.total_ratings == 0
    assert not product.comments.exists()


@pytest.mark.django_db
def test_owner_cannot_order_own_product():
    product = ProductFactory(available_quantity=10)

    with pytest.raises(PermissionDeniedError):
        add_order_interaction(product=product, user=product.producer.user, quantity=2)

    product.refresh_from_db()
    assert product.total_orders == 0
    assert product.total_revenue == Decimal("0.00")
    assert product.available_quantity == 10
    assert not StockMovement.objects.exists()
