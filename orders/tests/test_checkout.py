import re
from decimal import Decimal

import pytest
from cart.models import Cart
from cart.services import add_item
from common.choices import NotificationType, OrderStatus
from common.exceptions import ConflictError
from inventory.models import StockMovement
from listings.tests.factories import ProductFactory, ProductVariantFactory
from notifications.models import Notification
from orders.models import ORDER_NUMBER_PATTERN, Order
from orders.services import checkout_cart
from producers.tests.factories import ProducerFactory, UserFactory

ADDRESS = {"city": "Izmir", "line1": "Kordon 5"}


@pytest.mark.django_db
def test_checkout_creates_one_order_per_seller_and_empties_cart():
    buyer = UserFactory()
    seller_a, seller_b = ProducerFactory(), ProducerFactory()
    towel = ProductFactory(producer=seller_a, price=Decimal("30.00"), available_quantity=10)
    blanket = ProductFactory(producer=seller_a, price=Decimal("70.00"), available_quantity=10)
    shirt = ProductVariantFactory(
        product=ProductFactory(producer=seller_b), size="M", color="blue", price=Decimal("200.00"), stock=3
    )
    add_item(user=buyer, product_id=towel.id, quantity=2)
    add_item(user=buyer, product_id=blanket.id, quantity=1)
    add_item(user=buyer, product_id=shirt.product_id, quantity=1, size="M", color="blue")

    orders = checkout_cart(user=buyer, shipping_address=ADDRESS, payment_method="card")

    assert len(orders) == 2
    by_seller = {order.seller_id: order for order in orders}
    assert by_seller[seller_a.id].total_amount == Decimal("130.00")
    assert by_seller[seller_b.id].total_amount == Decimal("200.00")
    assert by_seller[seller_a.id].items.count() == 2
    for order in orders:
        assert re.match(ORDER_NUMBER_PATTERN, order.order_number)
        assert order.status == OrderStatus.PENDING
        assert order.billing_address == ADDRESS
        assert order.estimated_delivery_date is not None

    towel.refresh_from_db()
    shirt.refresh_from_db()
    assert towel.available_quantity == 8
    assert shirt.stock == 2
    assert StockMovement.objects.filter(reference=by_seller[seller_b.id].order_number).count() == 1

    cart = Cart.objects.get(user=buyer)
    assert cart.items.count() == 0
    assert cart.total_amount == Decimal("0.00")

    assert Notification.objects.filter(user=seller_a.user, type=NotificationType.ORDER_RECEIVED).count() == 1
    assert Notification.objects.filter(user=seller_b.user, type=NotificationType.ORDER_RECEIVED).count() == 1


@pytest.mark.django_db
def test_checkout_is_all_or_nothing_when_stock_runs_out():
    buyer = UserFactory()
    first = ProductFactory(available_quantity=5)
    second = ProductFactory(available_quantity=5)
    add_item(user=buyer, product_id=first.id, quantity=2)
    add_item(user=buyer, product_id=second.id, quantity=3)
    # Stock sold elsewhere after the items were carted.
    type(second).objects.filter(pk=second.pk).update(available_quantity=1)

    with pytest.raises(ConflictError) as exc:
        checkout_cart(user=buyer, shipping_address=ADDRESS)

    assert exc.value.code == "insufficient_stock"
    first.refresh_from_db()
    assert first.available_quantity == 5
    assert Order.objects.count() == 0
    assert not StockMovement.objects.exists()
    assert Cart.objects.get(user=buyer).items.count() == 2


@pytest.mark.django_db
def test_checkout_rejects_inactive_products():
    buyer = UserFactory()
    product = ProductFactory()
    add_item(user=buyer, product_id=product.id, quantity=1)
    type(product).objects.filter(pk=product.pk).update(is_active=False)

    with pytest.raises(ConflictError) as exc:
        checkout_cart(user=buyer, shipping_address=ADDRESS)

    assert exc.value.code == "listing_inactive"
    assert Order.objects.count() == 0


@pytest.mark.django_db
def test_checkout_of_empty_cart_conflicts():
    with pytest.raises(ConflictError) as exc:
        checkout_cart(user=UserFactory(), shipping_address=ADDRESS)
    assert exc.value.code == "cart_empty"
