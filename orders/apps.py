"""Django app configuration for the Orders app."""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    """AppConfig for per-seller orders created at checkout."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
