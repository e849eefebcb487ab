from decimal import Decimal

import pytest
from common.choices import NotificationType, OrderStatus, PaymentStatus
from common.exceptions import ConflictError, PermissionDeniedError
from inventory.models import StockMovement
from listings.tests.factories import ProductVariantFactory
from notifications.models import Notification
from orders.services import cancel_order, update_order_status, update_payment_status
from orders.tests.factories import OrderFactory, OrderItemFactory
from producers.tests.factories import ProducerFactory


@pytest.mark.django_db
def test_seller_moves_order_forward_and_may_skip_steps():
    order = OrderFactory()

    confirmed = update_order_status(order=order, status=OrderStatus.CONFIRMED, producer=order.seller)
    assert confirmed.status == OrderStatus.CONFIRMED

    delivered = update_order_status(order=order, status=OrderStatus.DELIVERED, producer=order.seller)
    assert delivered.status == OrderStatus.DELIVERED
    assert delivered.actual_delivery_date is not None

    notes = Notification.objects.filter(user=order.buyer, type=NotificationType.ORDER_STATUS_UPDATE)
    assert notes.count() == 2


@pytest.mark.django_db
def test_status_never_goes_back_and_final_orders_are_frozen():
    order = OrderFactory(status=OrderStatus.SHIPPED)

    with pytest.raises(ConflictError):
        update_order_status(order=order, status=OrderStatus.CONFIRMED, producer=order.seller)

    update_order_status(order=order, status=OrderStatus.DELIVERED, producer=order.seller)
    with pytest.raises(ConflictError):
        update_order_status(order=order, status=OrderStatus.SHIPPED, producer=order.seller)


@pytest.mark.django_db
def test_only_seller_updates_and_seller_cannot_cancel():
    order = OrderFactory()

    with pytest.raises(PermissionDeniedError):
        update_order_status(order=order, status=OrderStatus.CONFIRMED, producer=ProducerFactory())
    with pytest.raises(PermissionDeniedError) as exc:
        update_order_status(order=order, status=OrderStatus.CANCELLED, producer=order.seller)
    assert exc.value.code == "buyer_only"


@pytest.mark.django_db
def test_buyer_cancels_pending_order_and_stock_is_returned():
    order = OrderFactory()
    variant = ProductVariantFactory(product__producer=order.seller, size="S", color="red", stock=1)
    OrderItemFactory(order=order, product=variant.product, variant=variant, size="S", color="red", quantity=2)
    plain = OrderItemFactory(order=order, quantity=3)
    plain_before = plain.product.available_quantity

    cancelled = cancel_order(order=order, user=order.buyer)

    assert cancelled.status == OrderStatus.CANCELLED
    assert cancelled.payment_status == PaymentStatus.CANCELLED
    variant.refresh_from_db()
    plain.product.refresh_from_db()
    assert variant.stock == 3
    assert plain.product.available_quantity == plain_before + 3
    assert StockMovement.objects.filter(reference=order.order_number).count() == 2


@pytest.mark.django_db
def test_cancel_skips_restock_when_variant_is_gone():
    order = OrderFactory()
    item = OrderItemFactory(order=order, variant=None, size="M", color="blue")
    before = item.product.available_quantity

    cancel_order(order=order, user=order.buyer)

    item.product.refresh_from_db()
    assert item.product.available_quantity == before
    assert not StockMovement.objects.exists()


@pytest.mark.django_db
def test_only_pending_orders_can_be_cancelled_by_their_buyer():
    order = OrderFactory(status=OrderStatus.CONFIRMED)

    with pytest.raises(ConflictError):
        cancel_order(order=order, user=order.buyer)
    with pytest.raises(PermissionDeniedError):
        cancel_order(order=OrderFactory(), user=order.buyer)


@pytest.mark.django_db
def test_paid_orders_keep_payment_status_on_cancel():
    order = OrderFactory(total_amount=Decimal("10.00"))
    update_payment_status(order=order, payment_status=PaymentStatus.PAID, producer=order.seller)

    cancelled = cancel_order(order=order, user=order.buyer)

    assert cancelled.payment_status == PaymentStatus.PAID
    with pytest.raises(ConflictError):
        update_payment_status(order=order, payment_status=PaymentStatus.PENDING, producer=order.seller)


@pytest.mark.django_db
def test_preparing_order_cannot_be_cancelled_and_cancelled_order_is_frozen():
    preparing = OrderFactory(status=OrderStatus.PREPARING)
    with pytest.raises(ConflictError):
        cancel_order(order=preparing, user=preparing.buyer)
    preparing.refresh_from_db()
    assert preparing.status == OrderStatus.PREPARING

    order = OrderFactory()
    cancel_order(order=order, user=order.buyer)
    with pytest.raises(ConflictError):
        update_order_status(order=order, status=OrderStatus.CONFIRMED, producer=order.seller)
    with pytest.raises(ConflictError):
        update_payment_status(order=order, payment_status=PaymentStatus.PAID, producer=order.seller)
