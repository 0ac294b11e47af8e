"""
Order Ledger Service (``stock_modules.orders.service``).

Responsibility
--------------
Create and edit purchase orders and run the approval workflow at order and
item granularity.

Invariants enforced
-------------------
* An order has between 1 and ``config.max_order_items`` items, each with a
  quantity >= 1; order numbers are unique.
* Order total and status are always derived from the items (see
  ``Order.total_value`` / ``Order.status``).
* A non-admin edit sends every item back to ``pending`` with approvals
  cleared.  An admin edit keeps the approval of items whose product and
  quantity did not change (``AdminEditPolicy.PRESERVE``).
* An edit may not remove an item that already has stock entered against it,
  nor shrink it below the received quantity.
* Item ids survive edits: a requested line carrying ``"id"`` updates that
  item, otherwise the first unclaimed item for the same product is reused,
  so stock entries keep pointing at the right line.

Failure modes
-------------
* ``ProductNotFoundError`` / ``OrderNotFoundError`` / ``OrderItemNotFoundError``
* ``ValidationError`` -- empty or oversized item lists, bad quantities.
* ``DuplicateOrderNumberError``
* ``InvalidStatusTransitionError`` -- e.g. approving an item that is not
  pending.
* ``ReceivedQuantityConflictError`` -- edit or rejection would orphan
  received stock.
* ``PermissionDeniedError`` -- approval actions by non-admin actors.

Every mutating method owns its transaction: either all writes land or none.

Usage::

    orders = OrderService(store, clock=clock)
    order = orders.create_order(
        order_number="PO-001",
        date=date(2024, 3, 1),
        items=[{"product_id": product.id, "quantity": 10}],
        actor=user,
    )
    orders.approve_order_item(order.id, order.items[0].id, actor=admin)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from stock_config import AdminEditPolicy, StockConfig, get_active_config
from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.exceptions import (
    DuplicateOrderNumberError,
    InvalidStatusTransitionError,
    OrderItemNotFoundError,
    OrderNotFoundError,
    ProductNotFoundError,
    ReceivedQuantityConflictError,
    ValidationError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.store import Store
from stock_modules._service_helpers import (
    as_uuid,
    require,
    require_date,
    require_quantity,
    require_text,
)
from stock_modules.entries.queries import received_quantities
from stock_modules.orders.models import Order, OrderItem, OrderItemStatus, OrderStatus
from stock_modules.orders.workflows import ORDER_ITEM_WORKFLOW

logger = get_logger("modules.orders.service")


class OrderService:
    """
    Order ledger.

    Contract
    --------
    * Mutating methods take the acting ``Actor`` explicitly; approval
      methods require ``actor.is_admin``.
    * Returned orders are the committed state.

    Non-goals
    ---------
    * Does NOT reconcile stock entries when an order changes, beyond refusing
      edits that would drop below received quantities.
    """

    def __init__(
        self,
        store: Store,
        clock: Clock | None = None,
        config: StockConfig | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._new_id = id_factory

    # =========================================================================
    # Queries
    # =========================================================================

    def list_orders(self) -> list[Order]:
        return self._store.orders.list()

    def get_order(self, order_id: UUID) -> Order:
        return require(self._store.orders, order_id, OrderNotFoundError)

    # =========================================================================
    # Create / update
    # =========================================================================

    def create_order(
        self,
        *,
        order_number: str | None = None,
        date: date | str | None = None,
        items: Sequence[dict[str, Any]] | None = None,
        actor: Actor,
    ) -> Order:
        """
        Create an order with every item pending.

        ``items`` is a sequence of ``{"product_id": ..., "quantity": ...}``.
        """
        number = require_text("order_number", order_number)
        order_date = require_date("date", date)
        self._check_item_count(items)

        logger.info("order_create_started", extra={
            "order_number": number,
            "line_count": len(items),
        })

        with self._store.transaction():
            self._check_unique_number(number, None)
            order_items = tuple(
                self._new_item(*self._parse_line(line)) for line in items
            )
            now = self._clock.now()
            order = Order(
                id=self._new_id(),
                order_number=number,
                date=order_date,
                created_by=actor.id,
                created_by_name=actor.name,
                created_at=now,
                updated_at=now,
                items=order_items,
            )
            self._store.orders.put(order)

        logger.info("order_created", extra={
            "order_id": str(order.id),
            "order_number": order.order_number,
            "total_value": str(order.total_value),
            "item_count": len(order.items),
        })
        return order

    def update_order(
        self,
        order_id: UUID,
        *,
        actor: Actor,
        order_number: str | None = None,
        date: date | str | None = None,
        items: Sequence[dict[str, Any]] | None = None,
    ) -> Order:
        """
        Edit an order.

        A non-admin edit re-submits the whole order for approval, even when
        only the header changed.
        """
        logger.info("order_update_started", extra={
            "order_id": str(order_id),
            "is_admin": actor.is_admin,
            "replaces_items": items is not None,
        })

        with self._store.transaction():
            current = self.get_order(order_id)
            changes: dict[str, Any] = {}
            if order_number is not None:
                number = require_text("order_number", order_number)
                self._check_unique_number(number, current.id)
                changes["order_number"] = number
            if date is not None:
                changes["date"] = require_date("date", date)

            preserve = (
                actor.is_admin
                and self._config.admin_edit_policy == AdminEditPolicy.PRESERVE
            )
            if items is not None:
                self._check_item_count(items)
                new_items = self._merge_items(current, items, preserve)
            else:
                new_items = current.items
            if not preserve:
                new_items = tuple(self._resubmit(item) for item in new_items)

            order = replace(
                current,
                items=new_items,
                updated_at=self._clock.now(),
                **changes,
            )
            self._store.orders.put(order)

        logger.info("order_updated", extra={
            "order_id": str(order.id),
            "order_number": order.order_number,
            "total_value": str(order.total_value),
            "status": order.status.value,
            "resubmitted": not preserve,
        })
        return order

    # =========================================================================
    # Approval
    # =========================================================================

    def approve_order(self, order_id: UUID, *, actor: Actor) -> Order:
        """Approve every item of the order."""
        actor.require_admin("approve_order")
        return self._decide_order(order_id, actor, OrderItemStatus.APPROVED, "approve_all")

    def reject_order(self, order_id: UUID, *, actor: Actor) -> Order:
        """Reject every item of the order."""
        actor.require_admin("reject_order")
        return self._decide_order(order_id, actor, OrderItemStatus.REJECTED, "reject_all")

    def approve_order_item(self, order_id: UUID, item_id: UUID, *, actor: Actor) -> Order:
        actor.require_admin("approve_order_item")
        return self._decide_item(order_id, item_id, actor, OrderItemStatus.APPROVED, "approve")

    def reject_order_item(self, order_id: UUID, item_id: UUID, *, actor: Actor) -> Order:
        actor.require_admin("reject_order_item")
        return self._decide_item(order_id, item_id, actor, OrderItemStatus.REJECTED, "reject")

    def _decide_order(
        self,
        order_id: UUID,
        actor: Actor,
        target: OrderItemStatus,
        action: str,
    ) -> Order:
        with self._store.transaction():
            order = self.get_order(order_id)
            if order.status == OrderStatus(target.value):
                raise InvalidStatusTransitionError(order_id, order.status.value, action)

            received = received_quantities(self._store, order.id)
            items = []
            for item in order.items:
                transition = ORDER_ITEM_WORKFLOW.transition(item.id, item.status, action)
                if transition.guard is not None and received[item.id]:
                    raise ReceivedQuantityConflictError(item.id, received[item.id], 0)
                if item.status == target:
                    items.append(item)
                else:
                    items.append(item.decided(target, actor))

            order = replace(order, items=tuple(items), updated_at=self._clock.now())
            self._store.orders.put(order)

        logger.info("order_decided", extra={
            "order_id": str(order_id),
            "action": action,
            "status": order.status.value,
            "approver_id": str(actor.id),
        })
        return order

    def _decide_item(
        self,
        order_id: UUID,
        item_id: UUID,
        actor: Actor,
        target: OrderItemStatus,
        action: str,
    ) -> Order:
        with self._store.transaction():
            order = self.get_order(order_id)
            item = order.item(as_uuid("item_id", item_id))
            if item is None:
                raise OrderItemNotFoundError(order.id, item_id)
            transition = ORDER_ITEM_WORKFLOW.transition(item.id, item.status, action)
            if transition.guard is not None:
                received = received_quantities(self._store, order.id)[item.id]
                if received:
                    raise ReceivedQuantityConflictError(item.id, received, 0)

            order = replace(
                order.with_item(item.decided(target, actor)),
                updated_at=self._clock.now(),
            )
            self._store.orders.put(order)

        logger.info("order_item_decided", extra={
            "order_id": str(order_id),
            "order_item_id": str(item_id),
            "action": action,
            "order_status": order.status.value,
            "approver_id": str(actor.id),
        })
        return order

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_item_count(self, items: Sequence[dict[str, Any]] | None) -> None:
        if not items:
            raise ValidationError("items", "an order needs at least one item")
        if len(items) > self._config.max_order_items:
            raise ValidationError(
                "items",
                f"at most {self._config.max_order_items} items per order, got {len(items)}",
            )

    def _check_unique_number(self, number: str, order_id: UUID | None) -> None:
        clash = self._store.orders.find(
            lambda o: o.order_number == number and o.id != order_id
        )
        if clash:
            raise DuplicateOrderNumberError(number)

    def _parse_line(self, line: dict[str, Any]) -> tuple[UUID, int]:
        if "product_id" not in line:
            raise ValidationError("items.product_id", "is required")
        product_id = as_uuid("items.product_id", line["product_id"])
        quantity = require_quantity("items.quantity", line.get("quantity"))
        return product_id, quantity

    def _new_item(self, product_id: UUID, quantity: int) -> OrderItem:
        product = require(self._store.products, product_id, ProductNotFoundError)
        return OrderItem(
            id=self._new_id(),
            product_id=product.id,
            product_name=product.name,
            supplier=product.supplier,
            unit_cost=product.unit_cost,
            quantity=quantity,
        )

    def _resubmit(self, item: OrderItem) -> OrderItem:
        ORDER_ITEM_WORKFLOW.transition(item.id, item.status, "resubmit")
        return item.resubmitted()

    def _merge_items(
        self,
        order: Order,
        lines: Sequence[dict[str, Any]],
        preserve: bool,
    ) -> tuple[OrderItem, ...]:
        """
        Match requested lines to existing items and build the new item list.

        A kept item keeps its id and price snapshot; a changed quantity (or
        a non-preserving edit) sends it back to pending.
        """
        received = received_quantities(self._store, order.id)
        unclaimed = list(order.items)
        merged: list[OrderItem] = []

        for line in lines:
            product_id, quantity = self._parse_line(line)
            existing = self._claim(order, unclaimed, line.get("id"), product_id)

            if existing is None:
                merged.append(self._new_item(product_id, quantity))
                continue

            already = received[existing.id]
            if existing.product_id != product_id:
                if already:
                    raise ReceivedQuantityConflictError(existing.id, already, 0)
                # Same line, different product: re-snapshot from the catalog.
                merged.append(replace(self._new_item(product_id, quantity), id=existing.id))
                continue
            if quantity < already:
                raise ReceivedQuantityConflictError(existing.id, already, quantity)

            kept = replace(existing, quantity=quantity)
            if not (preserve and quantity == existing.quantity):
                kept = self._resubmit(kept)
            merged.append(kept)

        for dropped in unclaimed:
            if received[dropped.id]:
                raise ReceivedQuantityConflictError(dropped.id, received[dropped.id], 0)

        return tuple(merged)

    @staticmethod
    def _claim(
        order: Order,
        unclaimed: list[OrderItem],
        item_id: Any,
        product_id: UUID,
    ) -> OrderItem | None:
        if item_id is not None:
            wanted = as_uuid("items.id", item_id)
            for item in unclaimed:
                if item.id == wanted:
                    unclaimed.remove(item)
                    return item
            raise OrderItemNotFoundError(order.id, wanted)
        for item in unclaimed:
            if item.product_id == product_id:
                unclaimed.remove(item)
                return item
        return None
