"""
Entry Ledger Service (``stock_modules.entries.service``).

Responsibility
--------------
Receive goods against approved order items.  One call validates the
request, records the entry with its invoices, explodes it into unit-level
stock items and generates its payment installments.

Validation order
----------------
1. The order exists and has at least one approved item.
2. Every referenced order item belongs to that order and is approved.
3. Per order item, the quantity requested across all invoices of the call
   does not exceed ``ordered - previously received``.
4. At least one invoice with at least one item; adjusted unit costs >= 0;
   payment method accepted; installments in ``[1, max_installments]``.

Invariants enforced
-------------------
* The entry, its stock items and its installments are written in ONE
  transaction: a reader never sees an entry without its stock.
* ``entry.total_value`` equals the sum of the installment values exactly.
* Invoice lines snapshot the order item's product name, supplier and
  original unit cost; the adjusted cost defaults to the original.

Failure modes
-------------
* ``OrderNotFoundError`` / ``OrderItemNotFoundError``
* ``InvalidStatusTransitionError`` -- receiving against an order or item
  that is not approved.
* ``OverReceiptError``
* ``ValidationError``

Usage::

    entries = EntryService(store, clock=clock)
    entry = entries.create_stock_entry(
        order_id=order.id,
        date=date(2024, 3, 5),
        payment_method="boleto",
        installments=3,
        first_due_date=date(2024, 4, 5),
        invoices=[{
            "invoice_number": "NF-1001",
            "items": [{"order_item_id": item.id, "quantity": 10,
                       "adjusted_unit_cost": "110.00"}],
        }],
        actor=user,
    )
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from stock_config import StockConfig, get_active_config
from stock_engines.explosion import ExplosionLine, StockItem, explode
from stock_engines.installments import compute_installments
from stock_engines.receipt import ReceiptPosition, check_receipt
from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.exceptions import (
    InvalidStatusTransitionError,
    OrderItemNotFoundError,
    OrderNotFoundError,
    StockEntryNotFoundError,
    ValidationError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.store import Store
from stock_modules._service_helpers import (
    as_uuid,
    require,
    require_amount,
    require_date,
    require_quantity,
    require_text,
)
from stock_modules.entries.models import (
    PaymentMethod,
    StockEntry,
    StockEntryInvoice,
    StockEntryInvoiceItem,
)
from stock_modules.entries.queries import received_quantities
from stock_modules.orders.models import Order, OrderItemStatus

logger = get_logger("modules.entries.service")


class EntryService:
    """
    Entry ledger.

    Contract
    --------
    * ``create_stock_entry`` is all-or-nothing across entries, stock items
      and installments.
    * Entries are immutable once recorded.

    Non-goals
    ---------
    * Does NOT edit or delete entries.
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

    def list_stock_entries(self, order_id: UUID | str | None = None) -> list[StockEntry]:
        if order_id is None:
            return self._store.stock_entries.list()
        wanted = as_uuid("order_id", order_id)
        return self._store.stock_entries.find(lambda e: e.order_id == wanted)

    def get_stock_entry(self, entry_id: UUID) -> StockEntry:
        return require(self._store.stock_entries, entry_id, StockEntryNotFoundError)

    def list_entry_stock_items(self, entry_id: UUID) -> list[StockItem]:
        entry = self.get_stock_entry(entry_id)
        return self._store.stock_items.find(lambda i: i.stock_entry_id == entry.id)

    def receivable_items(self, order_id: UUID) -> list[ReceiptPosition]:
        """
        Ordered / received / remaining quantities per approved item of an order.

        Items already fully received are included with ``remaining == 0``.
        """
        order = require(self._store.orders, order_id, OrderNotFoundError)
        received = received_quantities(self._store, order.id)
        return [
            ReceiptPosition(
                order_item_id=item.id,
                ordered=item.quantity,
                received=received[item.id],
            )
            for item in order.approved_items
        ]

    # =========================================================================
    # Create
    # =========================================================================

    def create_stock_entry(
        self,
        *,
        order_id: UUID | str | None = None,
        date: date | str | None = None,
        payment_method: PaymentMethod | str | None = None,
        installments: int | None = None,
        first_due_date: date | str | None = None,
        invoices: Sequence[dict[str, Any]] | None = None,
        actor: Actor,
    ) -> StockEntry:
        """Record goods received, explode them into stock and schedule payment."""
        order_id = as_uuid("order_id", order_id)
        logger.info("stock_entry_create_started", extra={
            "order_id": str(order_id),
            "invoice_count": len(invoices or ()),
        })

        with self._store.transaction():
            order = require(self._store.orders, order_id, OrderNotFoundError)
            if not order.approved_items:
                raise InvalidStatusTransitionError(order.id, order.status.value, "receive")

            parsed = [self._parse_invoice(order, raw) for raw in invoices or ()]
            requested = [
                (item.order_item_id, item.quantity)
                for invoice in parsed
                for item in invoice.items
            ]
            check_receipt(
                ordered={item.id: item.quantity for item in order.approved_items},
                received=received_quantities(self._store, order.id),
                requested=requested,
            )

            if not parsed:
                raise ValidationError("invoices", "an entry needs at least one invoice")
            entry_date = require_date("date", date)
            due_date = require_date("first_due_date", first_due_date)
            method = self._payment_method(payment_method)
            count = require_quantity("installments", installments)
            if count > self._config.max_installments:
                raise ValidationError(
                    "installments",
                    f"at most {self._config.max_installments}, got {count}",
                )

            entry = StockEntry(
                id=self._new_id(),
                date=entry_date,
                order_id=order.id,
                order_number=order.order_number,
                payment_method=method,
                installments=count,
                first_due_date=due_date,
                created_by=actor.id,
                created_by_name=actor.name,
                created_at=self._clock.now(),
                invoices=tuple(parsed),
            )
            stock_items = explode(
                stock_entry_id=entry.id,
                entry_date=entry.date,
                lines=[
                    ExplosionLine(
                        invoice_number=invoice.invoice_number,
                        product_id=item.product_id,
                        product_name=item.product_name,
                        supplier=item.supplier,
                        quantity=item.quantity,
                        unit_cost=item.adjusted_unit_cost,
                    )
                    for invoice in entry.invoices
                    for item in invoice.items
                ],
                id_factory=self._new_id,
            )
            schedule = compute_installments(
                stock_entry_id=entry.id,
                total_value=entry.total_value,
                count=count,
                first_due_date=due_date,
                decimal_places=self._config.money_decimal_places,
                id_factory=self._new_id,
            )

            self._store.stock_entries.put(entry)
            self._store.stock_items.put_all(stock_items)
            self._store.installments.put_all(schedule)

        logger.info("stock_entry_committed", extra={
            "stock_entry_id": str(entry.id),
            "order_id": str(order.id),
            "total_value": str(entry.total_value),
            "total_quantity": entry.total_quantity,
            "stock_item_count": len(stock_items),
            "installment_count": len(schedule),
        })
        return entry

    # =========================================================================
    # Helpers
    # =========================================================================

    def _parse_invoice(self, order: Order, raw: dict[str, Any]) -> StockEntryInvoice:
        number = require_text("invoices.invoice_number", raw.get("invoice_number"))
        lines = raw.get("items") or ()
        if not lines:
            raise ValidationError(
                "invoices.items", f"invoice {number} needs at least one item",
            )
        return StockEntryInvoice(
            id=self._new_id(),
            invoice_number=number,
            items=tuple(self._parse_line(order, line) for line in lines),
        )

    def _parse_line(self, order: Order, raw: dict[str, Any]) -> StockEntryInvoiceItem:
        if raw.get("order_item_id") is None:
            raise ValidationError("invoices.items.order_item_id", "is required")
        item_id = as_uuid("invoices.items.order_item_id", raw["order_item_id"])
        order_item = order.item(item_id)
        if order_item is None:
            raise OrderItemNotFoundError(order.id, item_id)
        if order_item.status != OrderItemStatus.APPROVED:
            raise InvalidStatusTransitionError(
                order_item.id, order_item.status.value, "receive",
            )

        cost = raw.get("adjusted_unit_cost")
        return StockEntryInvoiceItem(
            id=self._new_id(),
            order_item_id=order_item.id,
            product_id=order_item.product_id,
            product_name=order_item.product_name,
            supplier=order_item.supplier,
            quantity=require_quantity("invoices.items.quantity", raw.get("quantity")),
            original_unit_cost=order_item.unit_cost,
            adjusted_unit_cost=(
                order_item.unit_cost
                if cost is None
                else require_amount("invoices.items.adjusted_unit_cost", cost)
            ),
        )

    def _payment_method(self, value: PaymentMethod | str) -> PaymentMethod:
        raw = value.value if isinstance(value, PaymentMethod) else value
        if raw not in self._config.payment_methods:
            raise ValidationError(
                "payment_method",
                f"must be one of {', '.join(self._config.payment_methods)}, got {raw!r}",
            )
        try:
            return PaymentMethod(raw)
        except ValueError:
            raise ValidationError("payment_method", f"unknown method {raw!r}") from None
