from decimal import Decimal

from common.choices import Currency, OrderStatus, PaymentStatus
from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models

ORDER_NUMBER_PATTERN = r"^UX-[A-Z0-9]{8}$"


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Order(TimeStampedModel):
    """Order between one buyer and one seller, created at checkout.

    Amounts and lines are frozen at creation; afterwards only the status,
    the payment status and the delivery timestamps change.
    """

    STATUS_PENDING = OrderStatus.PENDING
    STATUS_CONFIRMED = OrderStatus.CONFIRMED
    STATUS_PREPARING = OrderStatus.PREPARING
    STATUS_SHIPPED = OrderStatus.SHIPPED
    STATUS_DELIVERED = OrderStatus.DELIVERED
    STATUS_CANCELLED = OrderStatus.CANCELLED
    STATUS_CHOICES = OrderStatus.choices

    order_number = models.CharField(
        max_length=11,
        unique=True,
        validators=[RegexValidator(ORDER_NUMBER_PATTERN, message="Order numbers look like UX-XXXXXXXX")],
    )
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="orders", on_delete=models.CASCADE)
    seller = models.ForeignKey("producers.Producer", related_name="sales", on_delete=models.PROTECT)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=8, choices=Currency.choices, default=Currency.TRY)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_status = models.CharField(max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    payment_method = models.CharField(max_length=40, blank=True)
    delivery_method = models.CharField(max_length=40, blank=True)
    shipping_address = models.JSONField(default=dict, blank=True)
    billing_address = models.JSONField(default=dict, blank=True)
    notes = models.TextField(max_length=1000, blank=True)
    estimated_delivery_date = models.DateTimeField(null=True, blank=True)
    actual_delivery_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["buyer", "status", "created_at"], name="order_buyer_status_idx"),
            models.Index(fields=["seller", "status", "created_at"], name="order_seller_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="order_total_non_negative", condition=models.Q(total_amount__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.order_number} buyer={self.buyer_id} seller={self.seller_id} status={self.status}"


class OrderItem(TimeStampedModel):
    """Line item within an order.

    Snapshots the product name, selector and prices; the product and variant
    references survive only while those rows exist.
    """

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey(
        "listings.Product", null=True, blank=True, related_name="order_items", on_delete=models.SET_NULL
    )
    variant = models.ForeignKey(
        "listings.ProductVariant", null=True, blank=True, related_name="order_items", on_delete=models.SET_NULL
    )
    product_name = models.CharField(max_length=200)
    size = models.CharField(max_length=40, blank=True)
    color = models.CharField(max_length=40, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="orderitem_price_non_negative", condition=models.Q(unit_price__gte=0)),
            models.CheckConstraint(name="orderitem_quantity_positive", condition=models.Q(quantity__gte=1)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} product={self.product_id} qty={self.quantity}"


class IdempotencyKey(TimeStampedModel):
    """Stores idempotent request results to prevent duplicate processing."""

    key = models.CharField(max_length=128)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.CASCADE)
    scope = models.CharField(max_length=128)
    path = models.CharField(max_length=255)
    method = models.CharField(max_length=16)
    request_hash = models.CharField(max_length=64, null=True, blank=True)
    response_code = models.IntegerField(null=True, blank=True)
    response_json = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["key", "scope", "path", "method"], name="uniq_idem_scope_path_method"),
        ]
