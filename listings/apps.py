"""Django app configuration for the Listings app."""

from django.apps import AppConfig


class ListingsConfig(AppConfig):
    """AppConfig for producer listings (products and production listings)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "listings"
