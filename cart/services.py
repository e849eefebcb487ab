"""Cart services: per-buyer mutations with derived totals.

Every mutation locks the buyer's cart row for the rest of the transaction, so
concurrent requests from the same buyer are applied one after another.
Stock is only checked here; it is taken at checkout.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple

from common.exceptions import BusinessValidationError, ConflictError, NotFoundError, PermissionDeniedError
from django.db import transaction
from django.db.models import Sum
from listings.models import Product, ProductVariant

from .models import Cart, CartItem

logger = logging.getLogger("uretix.cart")


def lock_cart(*, user) -> Cart:
    """Return the buyer's cart locked for update, creating it if missing."""

    cart, _ = Cart.objects.get_or_create(user=user)
    return Cart.objects.select_for_update().get(pk=cart.pk)


def refresh_totals(cart: Cart) -> Cart:
    agg = cart.items.aggregate(total=Sum("total_price"), count=Sum("quantity"))
    cart.total_amount = agg["total"] or Decimal("0.00")
    cart.item_count = agg["count"] or 0
    cart.save(update_fields=["total_amount", "item_count", "updated_at"])
    return cart


def resolve_offer(product: Product, size: str = "", color: str = "") -> Tuple[Optional[ProductVariant], Decimal, int]:
    """Return (variant, unit price, stock) for a selector on ``product``.

    Products with variants must be narrowed to exactly one variant; products
    without variants sell at their base price from ``available_quantity``.
    """

    size = size or ""
    color = color or ""
    variants = list(product.variants.all())
    if not variants:
        return None, product.price, product.available_quantity
    for variant in variants:
        if variant.size == size and variant.color == color:
            return variant, variant.price, variant.stock
    if not size and not color:
        raise BusinessValidationError("Select a size and color for this product.", code="variant_required")
    raise NotFoundError("No variant matches the selected size and color.", code="variant_not_found")


def _ensure_stock(product: Product, requested: int, available: int) -> None:
    if requested > available:
        raise ConflictError(
            f"Only {available} unit(s) of {product.name} are available.",
            code="insufficient_stock",
        )


def _log(event: str, cart: Cart, **extra) -> None:
    logger.info(event, extra={"event": event, "cart_id": cart.id, "user_id": cart.user_id, **extra})


@transaction.atomic
def add_item(*, user, product_id: int, quantity: int, size: str = "", color: str = "") -> CartItem:
    """Add a product (variant) to the buyer's cart, merging with an existing line."""

    if quantity is None or int(quantity) < 1:
        raise BusinessValidationError("Quantity must be at least 1.")
    quantity = int(quantity)
    cart = lock_cart(user=user)

    product = Product.objects.select_related("producer").filter(pk=product_id).first()
    if product is None:
        raise NotFoundError("Product not found.")
    if product.producer.user_id == user.id:
        raise PermissionDeniedError("You cannot add your own product to the cart.", code="own_listing")
    if not product.is_active:
        raise ConflictError("This product is not active.", code="listing_inactive")

    variant, unit_price, stock = resolve_offer(product, size, color)
    size, color = (variant.size, variant.color) if variant is not None else ("", "")

    item = CartItem.objects.filter(cart=cart, product=product, size=size, color=color).first()
    merged = quantity + (item.quantity if item is not None else 0)
    _ensure_stock(product, merged, stock)

    if item is None:
        item = CartItem.objects.create(
            cart=cart,
            product=product,
            variant=variant,
            size=size,
            color=color,
            quantity=merged,
            unit_price=unit_price,
            total_price=unit_price * merged,
        )
        _log("cart.item_added", cart, product_id=product.id, variant_id=getattr(variant, "id", None), quantity=merged)
    else:
        item.variant = variant
        item.quantity = merged
        item.unit_price = unit_price
        item.total_price = unit_price * merged
        item.save(update_fields=["variant", "quantity", "unit_price", "total_price", "updated_at"])
        _log("cart.item_updated", cart, product_id=product.id, variant_id=getattr(variant, "id", None), quantity=merged)

    refresh_totals(cart)
    return item


@transaction.atomic
def update_item_quantity(*, user, item_id: int, quantity: int) -> CartItem:
    """Set a line's quantity, re-validating against current stock and price."""

    if quantity is None or int(quantity) < 1:
        raise BusinessValidationError("Quantity must be at least 1.")
    quantity = int(quantity)
    cart = lock_cart(user=user)
    item = CartItem.objects.select_related("product", "variant").filter(id=item_id, cart=cart).first()
    if item is None:
        raise NotFoundError("Cart item not found.")

    if item.variant is not None:
        unit_price, stock = item.variant.price, item.variant.stock
    else:
        unit_price, stock = item.product.price, item.product.available_quantity
    _ensure_stock(item.product, quantity, stock)

    item.quantity = quantity
    item.unit_price = unit_price
    item.total_price = unit_price * quantity
    item.save(update_fields=["quantity", "unit_price", "total_price", "updated_at"])
    refresh_totals(cart)
    _log("cart.item_updated", cart, item_id=item.id, quantity=quantity)
    return item


@transaction.atomic
def remove_item(*, user, item_id: int) -> Cart:
    cart = lock_cart(user=user)
    deleted, _ = CartItem.objects.filter(id=item_id, cart=cart).delete()
    if not deleted:
        raise NotFoundError("Cart item not found.")
    refresh_totals(cart)
    _log("cart.item_removed", cart, item_id=item_id)
    return cart


@transaction.atomic
def clear_cart(*, user) -> Cart:
    cart = lock_cart(user=user)
    cart.items.all().delete()
    refresh_totals(cart)
    _log("cart.cleared", cart)
    return cart
