"""Read-only notification queries."""

from datetime import datetime

from .models import Notification


def list_notifications(*, user, unread_only: bool = False):
    qs = Notification.objects.filter(user_id=user.id)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs.order_by("-created_at", "-id")


def unread_count(*, user) -> int:
    return Notification.objects.filter(user_id=user.id, is_read=False).count()


def has_recent_notification(*, user_id: int, type: str, since: datetime, data: dict) -> bool:
    """True when ``user_id`` got a ``type`` notification whose data matches, at or after ``since``."""

    lookups = {f"data__{key}": value for key, value in data.items()}
    return Notification.objects.filter(user_id=user_id, type=type, created_at__gte=since, **lookups).exists()
