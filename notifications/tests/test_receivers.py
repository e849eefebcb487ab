from datetime import timedelta
from decimal import Decimal

import pytest
from common.choices import NotificationType, OfferStatus
from common.events import domain_event, publish
from django.utils import timezone
from listings.events import ListingAutoDeactivated, OfferReceived, OfferStatusChanged, ProductOrdered
from listings.tests.factories import ProductFactory, ProductionListingFactory
from notifications.models import Notification
from orders.events import OrderPlaced, OrderStatusChanged
from producers.tests.factories import UserFactory


def _listing_fields(listing):
    return {
        "owner_user_id": listing.producer.user_id,
        "listing_type": listing.listing_type,
        "listing_id": listing.id,
        "listing_name": listing.display_name,
    }


@pytest.mark.django_db
def test_auto_deactivation_notification_uses_event_time():
    product = ProductFactory()
    when = timezone.now() - timedelta(hours=3)

    publish(ListingAutoDeactivated(**_listing_fields(product), deactivated_at=when))

    note = Notification.objects.get(user=product.producer.user)
    assert note.type == NotificationType.LISTING_AUTO_DEACTIVATED
    assert note.created_at == when
    assert note.data["listing_id"] == product.id
    assert note.is_read is False


@pytest.mark.django_db
def test_product_order_notification_skipped_when_owner_opted_out():
    product = ProductFactory(notify_new_order=False)
    buyer = UserFactory()

    publish(
        ProductOrdered(
            **_listing_fields(product),
            actor_id=buyer.id,
            reference="PO-1",
            quantity=2,
            total_price=Decimal("200.00"),
        )
    )

    assert not Notification.objects.exists()


@pytest.mark.django_db
def test_offer_received_notifies_owner_when_opted_in():
    listing = ProductionListingFactory()
    bidder = UserFactory()

    publish(
        OfferReceived(
            **_listing_fields(listing),
            actor_id=bidder.id,
            reference="OF-1",
            price=Decimal("1500.00"),
            currency="TL",
        )
    )

    note = Notification.objects.get(user=listing.producer.user)
    assert note.type == NotificationType.PRODUCTION_OFFER
    assert note.data["price"] == "1500.00"


@pytest.mark.django_db
def test_offer_status_goes_to_the_bidder_not_the_owner():
    listing = ProductionListingFactory(notify_new_offer=False)
    bidder = UserFactory()

    publish(
        OfferStatusChanged(
            **_listing_fields(listing),
            offer_user_id=bidder.id,
            reference="OF-2",
            status=OfferStatus.REJECTED,
        )
    )

    note = Notification.objects.get()
    assert note.user_id == bidder.id
    assert note.type == NotificationType.OFFER_REJECTED


@pytest.mark.django_db
def test_order_events_notify_seller_then_buyer():
    buyer = UserFactory()
    seller = UserFactory()

    publish(
        OrderPlaced(
            order_id=1,
            order_number="UX-AAAA1111",
            buyer_id=buyer.id,
            seller_user_id=seller.id,
            total_amount=Decimal("90.00"),
            currency="TL",
            item_count=1,
        )
    )
    publish(
        OrderStatusChanged(
            order_id=1,
            order_number="UX-AAAA1111",
            buyer_id=buyer.id,
            seller_user_id=seller.id,
            previous_status="pending",
            status="onaylandı",
        )
    )

    assert Notification.objects.get(user=seller).type == NotificationType.ORDER_RECEIVED
    buyer_note = Notification.objects.get(user=buyer)
    assert buyer_note.type == NotificationType.ORDER_STATUS_UPDATE
    assert buyer_note.data["status"] == "onaylandı"


@pytest.mark.django_db
def test_failing_subscriber_does_not_break_publisher():
    buyer = UserFactory()
    seller = UserFactory()

    def broken(sender, event, **kwargs):
        raise RuntimeError("boom")

    domain_event.connect(broken, sender=OrderPlaced, dispatch_uid="test_broken_subscriber")
    try:
        responses = publish(
            OrderPlaced(
                order_id=2,
                order_number="UX-BBBB2222",
                buyer_id=buyer.id,
                seller_user_id=seller.id,
                total_amount=Decimal("10.00"),
                currency="TL",
                item_count=1,
            )
        )
    finally:
        domain_event.disconnect(sender=OrderPlaced, dispatch_uid="test_broken_subscriber")

    assert any(isinstance(result, RuntimeError) for _, result in responses)
    assert Notification.objects.filter(user=seller).count() == 1
