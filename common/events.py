"""In-process domain event bus built on Django signals.

Services publish small immutable event objects; subscribers (for example the
notifier) connect to ``domain_event`` with ``sender=<EventClass>``. Delivery is
synchronous and robust: a failing subscriber is logged and never propagates
into the publishing service.
"""

import logging
from dataclasses import dataclass

from django.dispatch import Signal

logger = logging.getLogger("uretix.events")

domain_event = Signal()


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base type for all published events."""

    @property
    def name(self) -> str:
        return type(self).__name__


def publish(event: DomainEvent) -> list:
    """Deliver ``event`` to its subscribers and return their results."""

    responses = domain_event.send_robust(sender=type(event), event=event)
    for receiver, result in responses:
        if isinstance(result, Exception):
            logger.error(
                "event.delivery_failed",
                extra={
                    "event": "event.delivery_failed",
                    "domain_event": event.name,
                    "receiver": getattr(receiver, "__qualname__", repr(receiver)),
                },
                exc_info=(type(result), result, result.__traceback__),
            )
    return responses
