"""
Order Ledger Module (``stock_modules.orders``).

Responsibility
--------------
Purchase orders made of independently approvable items.  Order totals and
status are derived from the items; approval runs per item or across the
whole order.

Architecture position
---------------------
**Modules layer** -- DTOs, the item approval workflow, ORM persistence and
the ``OrderService`` facade.  Status derivation comes from
``stock_engines.order_status``.

Invariants enforced
-------------------
* ``order.total_value == sum(item.total_value)`` and ``order.status`` is a
  pure function of the item statuses.
* Non-admin edits send the order back through approval.
* An edit never drops an item below what was already received.
"""

from stock_modules.orders.models import Order, OrderItem, OrderItemStatus, OrderStatus
from stock_modules.orders.workflows import ORDER_ITEM_WORKFLOW

__all__ = [
    "Order",
    "OrderItem",
    "OrderItemStatus",
    "OrderStatus",
    "ORDER_ITEM_WORKFLOW",
]
