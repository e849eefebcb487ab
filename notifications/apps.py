"""Django app configuration for the Notifications app."""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """AppConfig that subscribes the notifier to domain events."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"

    def ready(self):
        from . import receivers  # noqa: F401
