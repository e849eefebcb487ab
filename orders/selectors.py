"""Read-only order queries scoped to the participants of an order."""

from common.exceptions import NotFoundError, PermissionDeniedError

from .models import Order


def list_orders_for_buyer(*, user):
    return (
        Order.objects.filter(buyer_id=user.id)
        .select_related("seller")
        .prefetch_related("items")
        .order_by("-created_at", "-id")
    )


def list_orders_for_seller(*, producer):
    return (
        Order.objects.filter(seller_id=producer.id)
        .select_related("buyer")
        .prefetch_related("items")
        .order_by("-created_at", "-id")
    )


def get_order_for_participant(*, order_id: int, user, producer=None) -> Order:
    """Return the order when ``user`` is its buyer or ``producer`` its seller."""

    order = Order.objects.select_related("seller").prefetch_related("items").filter(pk=order_id).first()
    if order is None:
        raise NotFoundError("Order not found.")
    is_buyer = order.buyer_id == user.id
    is_seller = producer is not None and order.seller_id == producer.id
    if not (is_buyer or is_seller):
        raise PermissionDeniedError("You are not a participant of this order.")
    return order
