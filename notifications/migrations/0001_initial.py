import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("listing_auto_deactivated", "Listing auto-deactivated"),
                            ("listing_deactivation_reminder", "Listing deactivation reminder"),
                            ("product_like", "Product liked"),
                            ("product_comment", "Product commented"),
                            ("product_order", "Product ordered"),
                            ("production_listing_like", "Production listing liked"),
                            ("production_offer", "Production offer received"),
                            ("offer_accepted", "Offer accepted"),
                            ("offer_rejected", "Offer rejected"),
                            ("order_received", "Order received"),
                            ("order_status_update", "Order status updated"),
                        ],
                        max_length=40,
                    ),
                ),
                ("title", models.CharField(max_length=200)),
                ("message", models.TextField(max_length=1000)),
                ("data", models.JSONField(blank=True, default=dict)),
                ("is_read", models.BooleanField(default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "is_read"], name="notification_user_read_idx"),
                    models.Index(fields=["user", "type", "created_at"], name="notification_user_type_idx"),
                ],
            },
        ),
    ]
