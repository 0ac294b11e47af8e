"""
Module: stock_engines.explosion
Responsibility:
    Turn received invoice lines into unit-level stock items (the "exploded
    view"): one StockItem per physical unit, which is the unit of account
    for availability, valuation and exits.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Identifiers come from an
    injectable factory so tests can make them deterministic.

Invariants enforced:
    - Exactly ``quantity`` items per line, each priced at the line's
      adjusted unit cost, status ``available``, entry date of the entry.
    - Items are never split, merged, or re-priced; exit and return only flip
      ``status``/``exit_date``/``exit_id``.

Failure modes:
    - ValueError for a line with quantity < 1 or a negative unit cost.
    - Calling ``explode`` twice for one entry duplicates stock; the caller
      owns the once-per-entry guarantee.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from stock_engines.tracer import traced_engine
from stock_kernel.logging_config import get_logger

logger = get_logger("engines.explosion")


class StockItemStatus(str, Enum):
    AVAILABLE = "available"
    EXITED = "exited"


@dataclass(frozen=True)
class StockItem:
    """One physical unit received into stock."""

    id: UUID
    stock_entry_id: UUID
    invoice_number: str
    product_id: UUID
    product_name: str
    supplier: str
    unit_cost: Decimal
    entry_date: date
    status: StockItemStatus = StockItemStatus.AVAILABLE
    exit_date: date | None = None
    exit_id: UUID | None = None

    @property
    def is_available(self) -> bool:
        return self.status == StockItemStatus.AVAILABLE

    def exited(self, exit_id: UUID, exit_date: date) -> StockItem:
        """This unit consumed by ``exit_id``."""
        return replace(
            self,
            status=StockItemStatus.EXITED,
            exit_id=exit_id,
            exit_date=exit_date,
        )

    def returned(self) -> StockItem:
        """This unit back on the shelf."""
        return replace(
            self,
            status=StockItemStatus.AVAILABLE,
            exit_id=None,
            exit_date=None,
        )


@dataclass(frozen=True)
class ExplosionLine:
    """A received invoice line, flattened for explosion."""

    invoice_number: str
    product_id: UUID
    product_name: str
    supplier: str
    quantity: int
    unit_cost: Decimal


@traced_engine("explosion", "1.0", fingerprint_fields=("stock_entry_id", "entry_date"))
def explode(
    *,
    stock_entry_id: UUID,
    entry_date: date,
    lines: Iterable[ExplosionLine],
    id_factory: Callable[[], UUID] = uuid4,
) -> tuple[StockItem, ...]:
    """Emit one available StockItem per received unit."""
    items: list[StockItem] = []
    for line in lines:
        if line.quantity < 1:
            raise ValueError(f"Cannot explode a line with quantity {line.quantity}")
        if line.unit_cost < 0:
            raise ValueError(f"Cannot explode a line with unit cost {line.unit_cost}")
        items.extend(
            StockItem(
                id=id_factory(),
                stock_entry_id=stock_entry_id,
                invoice_number=line.invoice_number,
                product_id=line.product_id,
                product_name=line.product_name,
                supplier=line.supplier,
                unit_cost=line.unit_cost,
                entry_date=entry_date,
            )
            for _ in range(line.quantity)
        )

    logger.debug(
        "stock_entry_exploded",
        extra={"stock_entry_id": str(stock_entry_id), "unit_count": len(items)},
    )
    return tuple(items)
