"""Django app configuration for the Producers app."""

from django.apps import AppConfig


class ProducersConfig(AppConfig):
    """AppConfig for producer (manufacturer) identities."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "producers"
