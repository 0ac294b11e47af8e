"""
Stock Entry Domain Models.

Goods received against an approved order, grouped by invoice.  Totals are
derived from the invoice items and never stored as settable fields.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from stock_engines.explosion import StockItem, StockItemStatus
from stock_engines.receipt import ReceiptPosition

__all__ = [
    "PaymentMethod",
    "ReceiptPosition",
    "StockEntry",
    "StockEntryInvoice",
    "StockEntryInvoiceItem",
    "StockItem",
    "StockItemStatus",
]


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    BOLETO = "boleto"
    PIX = "pix"


@dataclass(frozen=True)
class StockEntryInvoiceItem:
    """One received line, tied to the order item it fulfils."""
    id: UUID
    order_item_id: UUID
    product_id: UUID
    product_name: str
    supplier: str
    quantity: int
    original_unit_cost: Decimal  # price on the order item
    adjusted_unit_cost: Decimal  # price actually invoiced

    @property
    def total_value(self) -> Decimal:
        return self.adjusted_unit_cost * self.quantity


@dataclass(frozen=True)
class StockEntryInvoice:
    id: UUID
    invoice_number: str
    items: tuple[StockEntryInvoiceItem, ...] = field(default_factory=tuple)

    @property
    def total_value(self) -> Decimal:
        return sum((item.total_value for item in self.items), Decimal("0"))

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)


@dataclass(frozen=True)
class StockEntry:
    """A receipt of goods against one order."""
    id: UUID
    date: date
    order_id: UUID
    order_number: str
    payment_method: PaymentMethod
    installments: int
    first_due_date: date
    created_by: UUID
    created_by_name: str
    created_at: datetime
    invoices: tuple[StockEntryInvoice, ...] = field(default_factory=tuple)

    @property
    def lines(self) -> Iterator[StockEntryInvoiceItem]:
        for invoice in self.invoices:
            yield from invoice.items

    @property
    def total_value(self) -> Decimal:
        return sum((invoice.total_value for invoice in self.invoices), Decimal("0"))

    @property
    def total_quantity(self) -> int:
        return sum(invoice.total_quantity for invoice in self.invoices)
