"""
Module: stock_engines.receipt
Responsibility:
    Track how much of each order item has been received and enforce the
    receipt cap: cumulative entered quantity per order item never exceeds the
    ordered quantity.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - remaining = ordered - sum(previously entered) for every order item.
    - A request is checked as a whole: quantities for the same order item
      across all invoices of one entry are summed before comparison.

Failure modes:
    - OverReceiptError when a request exceeds the remaining quantity.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from uuid import UUID

from stock_engines.tracer import traced_engine
from stock_kernel.exceptions import OverReceiptError
from stock_kernel.logging_config import get_logger

logger = get_logger("engines.receipt")


@dataclass(frozen=True)
class ReceiptPosition:
    """Ordered/received/remaining quantities of one order item."""

    order_item_id: UUID
    ordered: int
    received: int

    @property
    def remaining(self) -> int:
        return self.ordered - self.received

    @property
    def is_fully_received(self) -> bool:
        return self.received >= self.ordered


def sum_quantities(lines: Iterable[tuple[UUID, int]]) -> Counter[UUID]:
    """Total quantity per order item over ``(order_item_id, quantity)`` pairs."""
    totals: Counter[UUID] = Counter()
    for order_item_id, quantity in lines:
        totals[order_item_id] += quantity
    return totals


@traced_engine("receipt", "1.0")
def check_receipt(
    *,
    ordered: Mapping[UUID, int],
    received: Mapping[UUID, int],
    requested: Iterable[tuple[UUID, int]],
) -> dict[UUID, ReceiptPosition]:
    """
    Validate a receipt request against the remaining quantities.

    Args:
        ordered: Ordered quantity per order item.
        received: Quantity already entered per order item.
        requested: ``(order_item_id, quantity)`` lines of the new entry.

    Returns:
        The positions after the request, keyed by order item id.

    Raises:
        OverReceiptError: If any order item would exceed its ordered quantity.
    """
    positions: dict[UUID, ReceiptPosition] = {}
    for order_item_id, quantity in sum_quantities(requested).items():
        ordered_qty = ordered[order_item_id]
        received_qty = received.get(order_item_id, 0)
        if received_qty + quantity > ordered_qty:
            logger.warning(
                "over_receipt_rejected",
                extra={
                    "order_item_id": str(order_item_id),
                    "ordered": ordered_qty,
                    "received": received_qty,
                    "requested": quantity,
                },
            )
            raise OverReceiptError(order_item_id, ordered_qty, received_qty, quantity)
        positions[order_item_id] = ReceiptPosition(
            order_item_id=order_item_id,
            ordered=ordered_qty,
            received=received_qty + quantity,
        )
    return positions
