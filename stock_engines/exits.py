"""
Module: stock_engines.exits
Responsibility:
    Group the stock items consumed by an exit into a per-product summary.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - One summary row per product, in order of first appearance.
    - ``total_cost`` is the exact sum of the unit costs in the group;
      ``unit_cost`` is that sum divided by the quantity (equal to the common
      cost when all units were bought at one price).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from stock_engines.explosion import StockItem
from stock_engines.tracer import traced_engine
from stock_kernel.domain.values import round_money


@dataclass(frozen=True)
class StockExitItem:
    """Per-product summary line of a stock exit."""

    product_id: UUID
    product_name: str
    supplier: str
    quantity: int
    unit_cost: Decimal
    total_cost: Decimal
    entry_date: date


@traced_engine("exit_grouping", "1.0")
def group_exit_items(items: Iterable[StockItem]) -> tuple[StockExitItem, ...]:
    groups: dict[UUID, list[StockItem]] = {}
    for item in items:
        groups.setdefault(item.product_id, []).append(item)

    summary: list[StockExitItem] = []
    for product_id, units in groups.items():
        total = sum((unit.unit_cost for unit in units), Decimal("0"))
        costs = {unit.unit_cost for unit in units}
        unit_cost = units[0].unit_cost if len(costs) == 1 else round_money(total / len(units))
        summary.append(
            StockExitItem(
                product_id=product_id,
                product_name=units[0].product_name,
                supplier=units[0].supplier,
                quantity=len(units),
                unit_cost=unit_cost,
                total_cost=total,
                entry_date=min(unit.entry_date for unit in units),
            )
        )
    return tuple(summary)
