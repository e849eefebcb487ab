"""Inventory models.

Stock itself lives on the listing (`ProductVariant.stock`, or
`Product.available_quantity` for products without variants). This app keeps
the audit trail of every change applied to it.
"""

from common.choices import MovementType
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StockMovement(TimeStampedModel):
    TYPE_INBOUND = MovementType.INBOUND
    TYPE_OUTBOUND = MovementType.OUTBOUND
    TYPE_CHOICES = MovementType.choices

    product = models.ForeignKey("listings.Product", on_delete=models.CASCADE, related_name="stock_movements")
    variant = models.ForeignKey(
        "listings.ProductVariant",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="stock_movements",
    )
    movement_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    quantity = models.IntegerField()  # signed: +inbound, -outbound
    reason = models.CharField(max_length=200, blank=True)
    reference = models.CharField(max_length=120, blank=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(name="movement_non_zero", condition=~models.Q(quantity=0)),
        ]
        indexes = [
            models.Index(fields=["reference"], name="movement_reference_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        target = self.variant_id or f"product:{self.product_id}"
        return f"{self.movement_type} {self.quantity} for {target}"
