"""
Entry Ledger Module (``stock_modules.entries``).

Responsibility
--------------
Goods received against approved order items, grouped by invoice with
per-line cost adjustment.  Each entry explodes into unit-level stock items
and a payment installment schedule in the same transaction.

Architecture position
---------------------
**Modules layer** -- DTOs, ORM persistence (entries, invoices, invoice
items and the stock item table) and the ``EntryService`` facade.  Receipt
caps, explosion and installment maths come from ``stock_engines``.

Invariants enforced
-------------------
* Cumulative received quantity per order item never exceeds the ordered
  quantity.
* ``entry.total_value == sum(invoice.total_value)`` and
  ``entry.total_quantity == sum(line.quantity)``.
"""

from stock_modules.entries.models import (
    PaymentMethod,
    StockEntry,
    StockEntryInvoice,
    StockEntryInvoiceItem,
    StockItem,
    StockItemStatus,
)

__all__ = [
    "PaymentMethod",
    "StockEntry",
    "StockEntryInvoice",
    "StockEntryInvoiceItem",
    "StockItem",
    "StockItemStatus",
]
