"""Selectors for read-only cart queries."""

from .models import Cart


def get_cart_for_user(*, user) -> Cart:
    """Return the user's cart, creating it if missing."""

    cart, _ = Cart.objects.get_or_create(user=user)
    return cart


def cart_lines(*, cart: Cart):
    return cart.items.select_related("product", "product__producer", "variant").order_by("id")


def lines_by_seller(*, cart: Cart) -> dict:
    """Group cart lines by the producer selling them, preserving line order."""

    grouped: dict = {}
    for item in cart_lines(cart=cart):
        grouped.setdefault(item.product.producer_id, []).append(item)
    return grouped
