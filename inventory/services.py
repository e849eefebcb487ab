"""Inventory services: atomic stock decrements and restocks with an audit trail.

Each change is a single conditional UPDATE, so two buyers racing for the last
unit cannot both succeed and stock never goes negative.
"""

import logging
from typing import Optional

from common.exceptions import BusinessValidationError, ConflictError
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from listings.models import Product, ProductVariant

from .models import StockMovement

logger = logging.getLogger("uretix.inventory")


def _stock_queryset(product: Product, variant: Optional[ProductVariant]):
    if variant is not None:
        return ProductVariant.objects.filter(pk=variant.pk, product_id=product.pk), "stock"
    return Product.objects.filter(pk=product.pk), "available_quantity"


@transaction.atomic
def decrement_stock(
    *, product: Product, variant: Optional[ProductVariant] = None, quantity: int, reason: str = "", reference: str = ""
) -> StockMovement:
    """Take ``quantity`` units from the variant (or the product when it has none).

    Raises ConflictError(code="insufficient_stock") without touching stock when
    fewer than ``quantity`` units remain.
    """

    if quantity <= 0:
        raise BusinessValidationError("Quantity must be at least 1.")
    qs, field = _stock_queryset(product, variant)
    updated = qs.filter(**{f"{field}__gte": quantity}).update(
        **{field: F(field) - quantity, "updated_at": timezone.now()}
    )
    if not updated:
        logger.info(
            "inventory.insufficient_stock",
            extra={
                "event": "inventory.insufficient_stock",
                "product_id": product.pk,
                "variant_id": getattr(variant, "pk", None),
                "requested": quantity,
            },
        )
        raise ConflictError(f"Insufficient stock for {product.name}.", code="insufficient_stock")
    return StockMovement.objects.create(
        product=product,
        variant=variant,
        movement_type=StockMovement.TYPE_OUTBOUND,
        quantity=-quantity,
        reason=reason,
        reference=reference,
    )


@transaction.atomic
def restock(
    *, product: Product, variant: Optional[ProductVariant] = None, quantity: int, reason: str = "", reference: str = ""
) -> Optional[StockMovement]:
    """Return ``quantity`` units to the variant (or the product when it has none)."""

    if quantity == 0:
        return None
    if quantity < 0:
        raise BusinessValidationError("Restock quantity must be positive.")
    qs, field = _stock_queryset(product, variant)
    qs.update(**{field: F(field) + quantity, "updated_at": timezone.now()})
    return StockMovement.objects.create(
        product=product,
        variant=variant,
        movement_type=StockMovement.TYPE_INBOUND,
        quantity=quantity,
        reason=reason,
        reference=reference,
    )
