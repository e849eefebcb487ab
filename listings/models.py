"""Listings app models.

Products and production listings share the self-expiring shape defined by
`ExpiringListing`: an activity flag, lifecycle timestamps, a likes ledger
with its derived counter, and per-event notification preferences. Ledger
tables always point at their listing through a field named ``listing``.

Counters (``total_*``) are projections of the ledger tables and are only
written by `listings.interactions`.
"""

from decimal import Decimal

from common.choices import Currency, InteractionOrderStatus, OfferStatus, WorkType
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ExpiringListingQuerySet(models.QuerySet):
    """Queries shared by every self-expiring listing type."""

    def active(self):
        return self.filter(is_active=True)

    def visible_to(self, producer=None):
        """Active listings, plus every listing owned by ``producer``."""

        if producer is None:
            return self.active()
        return self.filter(models.Q(is_active=True) | models.Q(producer=producer))

    def due_for_deactivation(self, *, now):
        return self.filter(is_active=True, auto_deactivate_enabled=True, auto_deactivate_at__lte=now)

    def due_for_reminder(self, *, now, window):
        return self.filter(
            is_active=True,
            auto_deactivate_enabled=True,
            notify_auto_deactivate_reminder=True,
            auto_deactivate_at__gt=now,
            auto_deactivate_at__lte=now + window,
        )


class ExpiringListing(TimeStampedModel):
    """Abstract producer-owned listing subject to auto-deactivation.

    ``auto_deactivate_at`` is only meaningful while the listing is active and
    auto-deactivation is enabled. It is recomputed on every activation edge by
    `listings.lifecycle.activate_listing`.
    """

    listing_type = ""
    name_field = "name"

    is_active = models.BooleanField(default=True, db_index=True)
    auto_deactivate_enabled = models.BooleanField(default=True)
    last_activated_at = models.DateTimeField(null=True, blank=True)
    auto_deactivate_at = models.DateTimeField(null=True, blank=True, db_index=True)
    total_likes = models.PositiveIntegerField(default=0)

    notify_new_like = models.BooleanField(default=True)
    notify_auto_deactivate_reminder = models.BooleanField(default=True)

    objects = ExpiringListingQuerySet.as_manager()

    class Meta:
        abstract = True

    @property
    def display_name(self) -> str:
        return getattr(self, self.name_field)


class Product(ExpiringListing):
    """Catalog product sold by a producer, optionally split into variants."""

    listing_type = "product"

    producer = models.ForeignKey("producers.Producer", related_name="products", on_delete=models.CASCADE)
    name = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    images = models.JSONField(default=list, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=8, choices=Currency.choices, default=Currency.TRY)
    category = models.CharField(max_length=120)
    sub_category = models.CharField(max_length=120, blank=True)
    tags = models.JSONField(default=list, blank=True)
    min_order_quantity = models.PositiveIntegerField(default=1)
    available_quantity = models.PositiveIntegerField(default=0)
    production_location = models.CharField(max_length=200, blank=True)
    payment_type = models.CharField(max_length=60, blank=True)
    is_featured = models.BooleanField(default=False)

    rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    total_ratings = models.PositiveIntegerField(default=0)
    total_comments = models.PositiveIntegerField(default=0)
    total_orders = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    notify_new_comment = models.BooleanField(default=True)
    notify_new_order = models.BooleanField(default=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="product_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(
                name="product_available_quantity_non_negative",
                condition=models.Q(available_quantity__gte=0),
            ),
        ]
        indexes = [
            models.Index(fields=["producer", "is_active"], name="product_producer_active_idx"),
            models.Index(
                fields=["is_active", "auto_deactivate_enabled", "auto_deactivate_at"],
                name="product_expiry_idx",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class ProductVariant(TimeStampedModel):
    """Priced and stocked (size, color) sub-unit of a product."""

    product = models.ForeignKey(Product, related_name="variants", on_delete=models.CASCADE)
    size = models.CharField(max_length=40, blank=True)
    color = models.CharField(max_length=40, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["product", "size", "color"], name="unique_variant_selector"),
            models.CheckConstraint(name="variant_stock_non_negative", condition=models.Q(stock__gte=0)),
            models.CheckConstraint(name="variant_price_non_negative", condition=models.Q(price__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.product.name} [{self.size}/{self.color}]"


class ProductionListing(ExpiringListing):
    """Production capacity / job posting that collects offers."""

    listing_type = "production_listing"
    name_field = "title"

    producer = models.ForeignKey(
        "producers.Producer", related_name="production_listings", on_delete=models.CASCADE
    )
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=2000)
    category = models.CharField(max_length=120, blank=True)
    sub_category = models.CharField(max_length=120, blank=True)
    sub_sub_category = models.CharField(max_length=120, blank=True)
    location = models.CharField(max_length=120)
    work_type = models.CharField(max_length=20, choices=WorkType.choices, default=WorkType.PRODUCTION)
    salary_min = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    salary_max = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=8, choices=Currency.choices, default=Currency.TRY)
    benefits = models.JSONField(default=list, blank=True)
    cover_image = models.URLField(blank=True)
    video_url = models.URLField(blank=True)
    detail_images = models.JSONField(default=list, blank=True)
    documents = models.JSONField(default=list, blank=True)
    technical_details = models.TextField(max_length=800, blank=True)
    production_time = models.CharField(max_length=120, blank=True)
    delivery_time = models.CharField(max_length=120, blank=True)
    logistics_model = models.CharField(max_length=120, blank=True)
    production_location = models.CharField(max_length=200, blank=True)

    total_offers = models.PositiveIntegerField(default=0)
    total_views = models.PositiveIntegerField(default=0)

    notify_new_offer = models.BooleanField(default=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                name="production_listing_salary_range",
                condition=models.Q(salary_max__gte=models.F("salary_min")),
            ),
        ]
        indexes = [
            models.Index(fields=["producer", "is_active"], name="plisting_producer_active_idx"),
            models.Index(
                fields=["is_active", "auto_deactivate_enabled", "auto_deactivate_at"],
                name="plisting_expiry_idx",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class ProductLike(models.Model):
    listing = models.ForeignKey(Product, related_name="likes", on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="product_likes", on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["listing", "user"], name="unique_product_like"),
        ]


class ProductionListingLike(models.Model):
    listing = models.ForeignKey(ProductionListing, related_name="likes", on_delete=models.CASCADE)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="production_listing_likes", on_delete=models.CASCADE
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["listing", "user"], name="unique_production_listing_like"),
        ]


class ProductComment(TimeStampedModel):
    """Append-only comment ledger entry with an optional 1-5 rating."""

    listing = models.ForeignKey(Product, related_name="comments", on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="product_comments", on_delete=models.CASCADE)
    text = models.TextField(max_length=2000)
    rating = models.PositiveSmallIntegerField(null=True, blank=True)
    helpful_count = models.PositiveIntegerField(default=0)
    like_count = models.PositiveIntegerField(default=0)
    dislike_count = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                name="comment_rating_range",
                condition=models.Q(rating__isnull=True) | models.Q(rating__gte=1, rating__lte=5),
            ),
        ]
        indexes = [
            models.Index(fields=["listing", "user"], name="comment_listing_user_idx"),
        ]


class CommentReply(TimeStampedModel):
    """Reply by the listing's producer to a product comment."""

    comment = models.ForeignKey(ProductComment, related_name="replies", on_delete=models.CASCADE)
    producer = models.ForeignKey("producers.Producer", related_name="comment_replies", on_delete=models.CASCADE)
    text = models.TextField(max_length=1000)

    class Meta:
        ordering = ["created_at", "id"]


class ProductOrderRecord(TimeStampedModel):
    """Order placed directly from a product page (outside the cart)."""

    listing = models.ForeignKey(Product, related_name="orders", on_delete=models.CASCADE)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="product_order_records", on_delete=models.CASCADE
    )
    variant = models.ForeignKey(
        ProductVariant, null=True, blank=True, related_name="order_records", on_delete=models.SET_NULL
    )
    reference = models.CharField(max_length=40, unique=True)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(
        max_length=16, choices=InteractionOrderStatus.choices, default=InteractionOrderStatus.PENDING
    )

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="order_record_quantity_positive", condition=models.Q(quantity__gte=1)),
        ]


class ProductionOffer(TimeStampedModel):
    """Offer made by a user on a production listing; one per user."""

    listing = models.ForeignKey(ProductionListing, related_name="offers", on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="production_offers", on_delete=models.CASCADE)
    reference = models.CharField(max_length=40, unique=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=8, choices=Currency.choices, default=Currency.TRY)
    message = models.TextField(max_length=1000, blank=True)
    delivery_time = models.CharField(max_length=120)
    status = models.CharField(max_length=16, choices=OfferStatus.choices, default=OfferStatus.PENDING)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["listing", "user"], name="unique_offer_per_listing_user"),
            models.CheckConstraint(name="offer_price_non_negative", condition=models.Q(price__gte=0)),
        ]
