"""Domain events published by order services."""

from dataclasses import dataclass
from decimal import Decimal

from common.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderPlaced(DomainEvent):
    order_id: int
    order_number: str
    buyer_id: int
    seller_user_id: int
    total_amount: Decimal
    currency: str
    item_count: int


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    order_id: int
    order_number: str
    buyer_id: int
    seller_user_id: int
    previous_status: str
    status: str
