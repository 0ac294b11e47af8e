"""
Module: stock_engines.order_status
Responsibility:
    Derive an order's status from the statuses of its items.  Order status
    is never stored independently; every reader goes through this function.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - all approved -> approved, all rejected -> rejected,
      all pending -> pending, anything else -> partial.

Failure modes:
    - ValueError for an empty item set or an unknown item status.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class OrderItemStatus(str, Enum):
    """Approval state of one order line."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class OrderStatus(str, Enum):
    """Order-level status, derived from item statuses."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PARTIAL = "partial"


# Order statuses that still wait on an approver.
OPEN_ORDER_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PARTIAL})


def derive_order_status(item_statuses: Iterable[OrderItemStatus | str]) -> OrderStatus:
    """Order status as a pure function of the multiset of item statuses."""
    distinct = {OrderItemStatus(status) for status in item_statuses}
    if not distinct:
        raise ValueError("An order needs at least one item to have a status")
    if len(distinct) > 1:
        return OrderStatus.PARTIAL
    (only,) = distinct
    return OrderStatus(only.value)
