"""
Order Domain Models.

The nouns of purchasing: orders and their independently approvable items.
Order totals and status are derived from the items on every read and are
never stored as settable fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from stock_engines.order_status import OrderItemStatus, OrderStatus, derive_order_status
from stock_kernel.domain.actor import Actor

__all__ = [
    "Order",
    "OrderItem",
    "OrderItemStatus",
    "OrderStatus",
]


@dataclass(frozen=True)
class OrderItem:
    """One product line within an order."""
    id: UUID
    product_id: UUID
    product_name: str  # snapshot at time of ordering
    supplier: str
    unit_cost: Decimal
    quantity: int
    status: OrderItemStatus = OrderItemStatus.PENDING
    approved_by: UUID | None = None
    approved_by_name: str | None = None

    @property
    def total_value(self) -> Decimal:
        return self.unit_cost * self.quantity

    def decided(self, status: OrderItemStatus, approver: Actor) -> OrderItem:
        """This item approved or rejected by ``approver``."""
        return replace(
            self,
            status=status,
            approved_by=approver.id,
            approved_by_name=approver.name,
        )

    def resubmitted(self) -> OrderItem:
        """This item back in the approval queue with approvals cleared."""
        return replace(
            self,
            status=OrderItemStatus.PENDING,
            approved_by=None,
            approved_by_name=None,
        )


@dataclass(frozen=True)
class Order:
    """A purchase order of one or more products."""
    id: UUID
    order_number: str
    date: date
    created_by: UUID
    created_by_name: str
    created_at: datetime
    updated_at: datetime
    items: tuple[OrderItem, ...] = field(default_factory=tuple)

    @property
    def total_value(self) -> Decimal:
        return sum((item.total_value for item in self.items), Decimal("0"))

    @property
    def status(self) -> OrderStatus:
        return derive_order_status(item.status for item in self.items)

    @property
    def approved_items(self) -> tuple[OrderItem, ...]:
        return tuple(i for i in self.items if i.status == OrderItemStatus.APPROVED)

    def item(self, item_id: UUID) -> OrderItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def with_item(self, updated: OrderItem) -> Order:
        return replace(
            self,
            items=tuple(updated if i.id == updated.id else i for i in self.items),
        )
