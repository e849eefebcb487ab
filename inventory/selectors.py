"""Read-only stock lookups."""

from typing import Optional

from listings.models import Product, ProductVariant

from .models import StockMovement


def available_stock(*, product: Product, variant: Optional[ProductVariant] = None) -> int:
    """Current sellable units for a variant, or for a product without variants."""

    if variant is not None:
        return int(ProductVariant.objects.filter(pk=variant.pk).values_list("stock", flat=True).first() or 0)
    return int(Product.objects.filter(pk=product.pk).values_list("available_quantity", flat=True).first() or 0)


def list_movements_for_reference(reference: str):
    return list(
        StockMovement.objects.filter(reference=reference)
        .order_by("created_at", "id")
        .values("product_id", "variant_id", "movement_type", "quantity", "reason")
    )
