"""Order number generation.

Numbers look like ``UX-7K2M9QXA``: a fixed prefix and eight characters drawn
from A-Z0-9 with `secrets`. Uniqueness is enforced by the database; a
collision simply draws a new number, up to ``ORDER_NUMBER_MAX_ATTEMPTS``.
"""

import logging
import secrets
import string
from typing import Callable

from common.exceptions import TransientError
from django.conf import settings
from django.db import IntegrityError, transaction

from .models import Order

logger = logging.getLogger("uretix.orders")

ORDER_NUMBER_PREFIX = "UX-"
ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
ORDER_NUMBER_LENGTH = 8


class OrderNumberUnavailable(TransientError):
    default_detail = "Could not allocate an order number, please retry."


def generate_order_number() -> str:
    return ORDER_NUMBER_PREFIX + "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_LENGTH))


def create_with_unique_number(create: Callable[[str], Order]) -> Order:
    """Call ``create(number)`` with fresh numbers until one is accepted.

    Each attempt runs in a savepoint so a unique-constraint violation leaves
    the surrounding transaction usable.
    """

    attempts = settings.ORDER_NUMBER_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        number = generate_order_number()
        if Order.objects.filter(order_number=number).exists():
            continue
        try:
            with transaction.atomic():
                return create(number)
        except IntegrityError:
            if not Order.objects.filter(order_number=number).exists():
                raise
            logger.warning(
                "order.number_collision",
                extra={"event": "order.number_collision", "attempt": attempt},
            )
    logger.error("order.number_unavailable", extra={"event": "order.number_unavailable", "attempts": attempts})
    raise OrderNumberUnavailable()
