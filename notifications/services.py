"""Notification sink: create and acknowledge notifications."""

import logging
from datetime import datetime
from typing import Optional

from common.exceptions import NotFoundError
from django.db import transaction
from django.utils import timezone

from .models import Notification

logger = logging.getLogger("uretix.notifications")


def notify(
    *,
    user_id: int,
    type: str,
    title: str,
    message: str,
    data: Optional[dict] = None,
    created_at: Optional[datetime] = None,
) -> Notification:
    """Store a notification for ``user_id``."""

    notification = Notification.objects.create(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
        created_at=created_at or timezone.now(),
    )
    logger.info(
        "notification.created",
        extra={
            "event": "notification.created",
            "notification_id": notification.id,
            "user_id": user_id,
            "type": type,
        },
    )
    return notification


@transaction.atomic
def mark_as_read(*, user, notification_id: int) -> Notification:
    try:
        notification = Notification.objects.select_for_update().get(id=notification_id, user_id=user.id)
    except Notification.DoesNotExist:
        raise NotFoundError("Notification not found.")
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=["is_read", "read_at"])
    return notification


def mark_all_as_read(*, user) -> int:
    """Mark every unread notification of ``user`` read; return how many changed."""

    return Notification.objects.filter(user_id=user.id, is_read=False).update(is_read=True, read_at=timezone.now())
