import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def _listing_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("is_active", models.BooleanField(db_index=True, default=True)),
        ("auto_deactivate_enabled", models.BooleanField(default=True)),
        ("last_activated_at", models.DateTimeField(blank=True, null=True)),
        ("auto_deactivate_at", models.DateTimeField(blank=True, db_index=True, null=True)),
        ("total_likes", models.PositiveIntegerField(default=0)),
        ("notify_new_like", models.BooleanField(default=True)),
        ("notify_auto_deactivate_reminder", models.BooleanField(default=True)),
    ]


CURRENCY_CHOICES = [("TL", "Turkish Lira"), ("USD", "US Dollar"), ("EUR", "Euro")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("producers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=_listing_fields()
            + [
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(max_length=2000)),
                ("images", models.JSONField(blank=True, default=list)),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(choices=CURRENCY_CHOICES, default="TL", max_length=8)),
                ("category", models.CharField(max_length=120)),
                ("sub_category", models.CharField(blank=True, max_length=120)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("min_order_quantity", models.PositiveIntegerField(default=1)),
                ("available_quantity", models.PositiveIntegerField(default=0)),
                ("production_location", models.CharField(blank=True, max_length=200)),
                ("payment_type", models.CharField(blank=True, max_length=60)),
                ("is_featured", models.BooleanField(default=False)),
                ("rating", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=3)),
                ("total_ratings", models.PositiveIntegerField(default=0)),
                ("total_comments", models.PositiveIntegerField(default=0)),
                ("total_orders", models.PositiveIntegerField(default=0)),
                ("total_revenue", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("notify_new_comment", models.BooleanField(default=True)),
                ("notify_new_order", models.BooleanField(default=True)),
                (
                    "producer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to="producers.producer",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "abstract": False,
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("price__gte", 0)), name="product_price_non_negative"),
                    models.CheckConstraint(
                        condition=models.Q(("available_quantity__gte", 0)),
                        name="product_available_quantity_non_negative",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["producer", "is_active"], name="product_producer_active_idx"),
                    models.Index(
                        fields=["is_active", "auto_deactivate_enabled", "auto_deactivate_at"],
                        name="product_expiry_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductVariant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("size", models.CharField(blank=True, max_length=40)),
                ("color", models.CharField(blank=True, max_length=40)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("stock", models.PositiveIntegerField(default=0)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="variants",
                        to="listings.product",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("product", "size", "color"), name="unique_variant_selector"),
                    models.CheckConstraint(condition=models.Q(("stock__gte", 0)), name="variant_stock_non_negative"),
                    models.CheckConstraint(condition=models.Q(("price__gte", 0)), name="variant_price_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductionListing",
            fields=_listing_fields()
            + [
                ("title", models.CharField(max_length=100)),
                ("description", models.TextField(max_length=2000)),
                ("category", models.CharField(blank=True, max_length=120)),
                ("sub_category", models.CharField(blank=True, max_length=120)),
                ("sub_sub_category", models.CharField(blank=True, max_length=120)),
                ("location", models.CharField(max_length=120)),
                (
                    "work_type",
                    models.CharField(
                        choices=[
                            ("tam zamanlı", "Full time"),
                            ("yarı zamanlı", "Part time"),
                            ("uzaktan", "Remote"),
                            ("staj", "Internship"),
                            ("üretim", "Production"),
                        ],
                        default="üretim",
                        max_length=20,
                    ),
                ),
                ("salary_min", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("salary_max", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(choices=CURRENCY_CHOICES, default="TL", max_length=8)),
                ("benefits", models.JSONField(blank=True, default=list)),
                ("cover_image", models.URLField(blank=True)),
                ("video_url", models.URLField(blank=True)),
                ("detail_images", models.JSONField(blank=True, default=list)),
                ("documents", models.JSONField(blank=True, default=list)),
                ("technical_details", models.TextField(blank=True, max_length=800)),
                ("production_time", models.CharField(blank=True, max_length=120)),
                ("delivery_time", models.CharField(blank=True, max_length=120)),
                ("logistics_model", models.CharField(blank=True, max_length=120)),
                ("production_location", models.CharField(blank=True, max_length=200)),
                ("total_offers", models.PositiveIntegerField(default=0)),
                ("total_views", models.PositiveIntegerField(default=0)),
                ("notify_new_offer", models.BooleanField(default=True)),
                (
                    "producer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="production_listings",
                        to="producers.producer",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "abstract": False,
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("salary_max__gte", models.F("salary_min"))),
                        name="production_listing_salary_range",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["producer", "is_active"], name="plisting_producer_active_idx"),
                    models.Index(
                        fields=["is_active", "auto_deactivate_enabled", "auto_deactivate_at"],
                        name="plisting_expiry_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductLike",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "listing",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="likes", to="listings.product"
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_likes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(fields=("listing", "user"), name="unique_product_like"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductionListingLike",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "listing",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="likes",
                        to="listings.productionlisting",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="production_listing_likes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(fields=("listing", "user"), name="unique_production_listing_like"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductComment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("text", models.TextField(max_length=2000)),
                ("rating", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("helpful_count", models.PositiveIntegerField(default=0)),
                ("like_count", models.PositiveIntegerField(default=0)),
                ("dislike_count", models.PositiveIntegerField(default=0)),
                (
                    "listing",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="comments", to="listings.product"
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("rating__isnull", True), models.Q(("rating__gte", 1), ("rating__lte", 5)), _connector="OR"
                        ),
                        name="comment_rating_range",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["listing", "user"], name="comment_listing_user_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CommentReply",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("text", models.TextField(max_length=1000)),
                (
                    "comment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="replies",
                        to="listings.productcomment",
                    ),
                ),
                (
                    "producer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comment_replies",
                        to="producers.producer",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="ProductOrderRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("reference", models.CharField(max_length=40, unique=True)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("cancelled", "Cancelled")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                (
                    "listing",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="orders", to="listings.product"
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_order_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "variant",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_records",
                        to="listings.productvariant",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 1)), name="order_record_quantity_positive"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductionOffer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("reference", models.CharField(max_length=40, unique=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("currency", models.CharField(choices=CURRENCY_CHOICES, default="TL", max_length=8)),
                ("message", models.TextField(blank=True, max_length=1000)),
                ("delivery_time", models.CharField(max_length=120)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("accepted", "Accepted"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                (
                    "listing",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="offers",
                        to="listings.productionlisting",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="production_offers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(fields=("listing", "user"), name="unique_offer_per_listing_user"),
                    models.CheckConstraint(condition=models.Q(("price__gte", 0)), name="offer_price_non_negative"),
                ],
            },
        ),
    ]
