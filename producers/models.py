"""Producer identity tied to an auth user.

A user becomes a producer (seller) by owning a `Producer` profile. Listings
and seller-side orders reference the producer, never the user directly.
"""

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Producer(TimeStampedModel):
    """Manufacturer profile owning listings and receiving orders."""

    user = models.OneToOneField(settings.AUTH_USER_MODEL, related_name="producer", on_delete=models.CASCADE)
    company_name = models.CharField(max_length=100)
    tax_id_number = models.CharField(max_length=20, unique=True)
    phone_number = models.CharField(
        max_length=20,
        blank=True,
        validators=[RegexValidator(r"^\+?[0-9 ]{7,20}$", message="Use digits with an optional leading +")],
    )
    city = models.CharField(max_length=80, blank=True)
    district = models.CharField(max_length=80, blank=True)
    is_verified = models.BooleanField(default=False)

    class Meta:
        ordering = ["company_name"]

    def __str__(self) -> str:  # pragma: no cover
        return self.company_name
