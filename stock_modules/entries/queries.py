"""
Read helpers over stock entries shared by the order and entry ledgers.
"""

from __future__ import annotations

from collections import Counter
from uuid import UUID

from stock_engines.receipt import sum_quantities
from stock_kernel.store import Store


def received_quantities(store: Store, order_id: UUID) -> Counter[UUID]:
    """Quantity entered so far per order item of ``order_id``."""
    entries = store.stock_entries.find(lambda entry: entry.order_id == order_id)
    return sum_quantities(
        (line.order_item_id, line.quantity)
        for entry in entries
        for line in entry.lines
    )
