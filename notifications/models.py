"""Stored in-app notifications."""

from common.choices import NotificationType
from django.conf import settings
from django.db import models
from django.utils import timezone


class Notification(models.Model):
    """Message addressed to one user; ``data`` carries the subject ids."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="notifications", on_delete=models.CASCADE)
    type = models.CharField(max_length=40, choices=NotificationType.choices)
    title = models.CharField(max_length=200)
    message = models.TextField(max_length=1000)
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notification_user_read_idx"),
            models.Index(fields=["user", "type", "created_at"], name="notification_user_type_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.type} -> {self.user_id}"
