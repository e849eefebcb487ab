"""Order services: checkout consolidation and the order status machine.

Checkout turns the buyer's cart into one order per seller inside a single
transaction: stock is taken with conditional updates, so any failure leaves
cart, stock and orders exactly as they were.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from cart.selectors import lines_by_seller
from cart.services import lock_cart, refresh_totals
from common.choices import OrderStatus, PaymentStatus
from common.events import publish
from common.exceptions import BusinessValidationError, ConflictError, PermissionDeniedError
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from inventory.services import decrement_stock, restock
from listings.models import Product

from .events import OrderPlaced, OrderStatusChanged
from .models import Order, OrderItem
from .numbering import create_with_unique_number

logger = logging.getLogger("uretix.orders")

# Seller-driven progression; later entries may be reached from any earlier one.
STATUS_FLOW = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]
FINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


@transaction.atomic
def checkout_cart(
    *,
    user,
    shipping_address: dict,
    billing_address: Optional[dict] = None,
    notes: str = "",
    payment_method: str = "",
    delivery_method: str = "",
) -> List[Order]:
    """Create one order per seller from the buyer's cart and empty the cart."""

    cart = lock_cart(user=user)
    groups = lines_by_seller(cart=cart)
    if not groups:
        raise ConflictError("Your cart is empty.", code="cart_empty")

    now = timezone.now()
    estimated_delivery = now + timedelta(days=settings.ORDER_ESTIMATED_DELIVERY_DAYS)
    billing_address = billing_address or shipping_address
    orders = []

    for lines in groups.values():
        seller = lines[0].product.producer

        def _create(number, lines=lines, seller=seller):
            return Order.objects.create(
                order_number=number,
                buyer=user,
                seller=seller,
                total_amount=sum((line.total_price for line in lines), Decimal("0.00")),
                currency=lines[0].product.currency,
                payment_method=payment_method or "",
                delivery_method=delivery_method or "",
                shipping_address=shipping_address,
                billing_address=billing_address,
                notes=notes or "",
                estimated_delivery_date=estimated_delivery,
            )

        order = create_with_unique_number(_create)
        for line in lines:
            if not Product.objects.filter(pk=line.product_id, is_active=True).exists():
                raise ConflictError(f"{line.product.name} is no longer available.", code="listing_inactive")
            decrement_stock(
                product=line.product,
                variant=line.variant,
                quantity=line.quantity,
                reason="checkout",
                reference=order.order_number,
            )
            OrderItem.objects.create(
                order=order,
                product=line.product,
                variant=line.variant,
                product_name=line.product.name,
                size=line.size,
                color=line.color,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.total_price,
            )
        orders.append((order, len(lines)))

    cart.items.all().delete()
    refresh_totals(cart)

    for order, item_count in orders:
        logger.info(
            "order.placed",
            extra={
                "event": "order.placed",
                "order_id": order.id,
                "order_number": order.order_number,
                "buyer_id": user.id,
                "seller_id": order.seller_id,
                "total_amount": str(order.total_amount),
            },
        )
        publish(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                buyer_id=user.id,
                seller_user_id=order.seller.user_id,
                total_amount=order.total_amount,
                currency=order.currency,
                item_count=item_count,
            )
        )
    return [order for order, _ in orders]


def _lock(order: Order) -> Order:
    return Order.objects.select_for_update().select_related("seller").get(pk=order.pk)


def _status_changed(order: Order, previous: str) -> None:
    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": order.id,
            "user_id": order.buyer_id,
            "status_from": previous,
            "status_to": order.status,
        },
    )
    publish(
        OrderStatusChanged(
            order_id=order.id,
            order_number=order.order_number,
            buyer_id=order.buyer_id,
            seller_user_id=order.seller.user_id,
            previous_status=previous,
            status=order.status,
        )
    )


@transaction.atomic
def update_order_status(*, order: Order, status: str, producer, now: Optional[datetime] = None) -> Order:
    """Move an order forward on behalf of its seller.

    Skipping steps is allowed; going back, cancelling and touching a final
    order are not.
    """

    locked = _lock(order)
    if producer is None or locked.seller_id != producer.id:
        raise PermissionDeniedError("Only the seller can update this order.")
    if status not in OrderStatus.values:
        raise BusinessValidationError(f"Unknown order status: {status}")
    if locked.status in FINAL_STATUSES:
        raise ConflictError(f"Order is already {locked.status}.", code="invalid_transition")
    if status == OrderStatus.CANCELLED:
        raise PermissionDeniedError("Only the buyer can cancel an order.", code="buyer_only")
    if STATUS_FLOW.index(status) <= STATUS_FLOW.index(locked.status):
        raise ConflictError(f"Cannot move order from {locked.status} to {status}.", code="invalid_transition")

    previous = locked.status
    locked.status = status
    update_fields = ["status", "updated_at"]
    if status == OrderStatus.DELIVERED:
        locked.actual_delivery_date = now or timezone.now()
        update_fields.append("actual_delivery_date")
    locked.save(update_fields=update_fields)
    _status_changed(locked, previous)
    return locked


@transaction.atomic
def cancel_order(*, order: Order, user) -> Order:
    """Buyer cancellation of a pending order; returns its units to stock."""

    locked = _lock(order)
    if locked.buyer_id != user.id:
        raise PermissionDeniedError("Only the buyer can cancel this order.")
    if locked.status != OrderStatus.PENDING:
        raise ConflictError("Only pending orders can be cancelled.", code="invalid_transition")

    for item in locked.items.select_related("product", "variant"):
        if item.product is None or (item.variant is None and (item.size or item.color)):
            logger.warning(
                "order.restock_skipped",
                extra={"event": "order.restock_skipped", "order_id": locked.id, "order_item_id": item.id},
            )
            continue
        restock(
            product=item.product,
            variant=item.variant,
            quantity=item.quantity,
            reason="order cancelled",
            reference=locked.order_number,
        )

    previous = locked.status
    locked.status = OrderStatus.CANCELLED
    update_fields = ["status", "updated_at"]
    if locked.payment_status != PaymentStatus.PAID:
        locked.payment_status = PaymentStatus.CANCELLED
        update_fields.append("payment_status")
    locked.save(update_fields=update_fields)
    _status_changed(locked, previous)
    return locked


@transaction.atomic
def update_payment_status(*, order: Order, payment_status: str, producer) -> Order:
    locked = _lock(order)
    if producer is None or locked.seller_id != producer.id:
        raise PermissionDeniedError("Only the seller can update the payment status.")
    if payment_status not in PaymentStatus.values:
        raise BusinessValidationError(f"Unknown payment status: {payment_status}")
    if locked.status == OrderStatus.CANCELLED:
        raise ConflictError("Order is cancelled.", code="invalid_transition")
    if locked.payment_status != payment_status:
        previous = locked.payment_status
        locked.payment_status = payment_status
        locked.save(update_fields=["payment_status", "updated_at"])
        logger.info(
            "order.payment_status_changed",
            extra={
                "event": "order.payment_status_changed",
                "order_id": locked.id,
                "status_from": previous,
                "status_to": payment_status,
            },
        )
    return locked
