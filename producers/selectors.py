"""Read-only producer lookups used for authorization decisions."""

from typing import Optional

from common.exceptions import PermissionDeniedError

from .models import Producer


def get_producer_for_user(user) -> Optional[Producer]:
    """Return the producer profile of ``user`` or None for plain buyers."""

    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return Producer.objects.filter(user_id=user.id).first()


def require_producer(user) -> Producer:
    """Return the producer profile of ``user`` or raise a permission error."""

    producer = get_producer_for_user(user)
    if producer is None:
        raise PermissionDeniedError("This action requires a producer account.", code="producer_required")
    return producer
