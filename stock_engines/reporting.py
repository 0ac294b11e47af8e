"""
Module: stock_engines.reporting
Responsibility:
    Read-side projections over the ledgers: dashboard statistics, the
    stock-by-product report, and stock item counts.  No owned state.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Callers load the records
    and pass them in.

Invariants enforced:
    - Stock value is always the sum of the unit costs of *available* stock
      items, never recomputed from current catalog prices.
    - Report rows are keyed by product id; a product deleted from the
      catalog still reports its remaining units using the names captured
      on the stock items.

Non-goals:
    - ``monthly_entries``/``monthly_exits`` are all-time sums; filtering by
      month is left to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from stock_engines.explosion import StockItem, StockItemStatus
from stock_engines.order_status import OPEN_ORDER_STATUSES, OrderStatus
from stock_engines.tracer import traced_engine
from stock_kernel.domain.values import round_money


@dataclass(frozen=True)
class DashboardStats:
    total_products: int
    pending_orders: int
    total_stock_value: Decimal
    stock_items_count: int
    monthly_entries: Decimal
    monthly_exits: Decimal


@dataclass(frozen=True)
class StockReportRow:
    """Available stock of one product."""

    product_id: UUID
    product_name: str
    supplier: str
    unit_type: str | None
    quantity: int
    unit_cost: Decimal
    total_value: Decimal
    last_entry_date: date


@dataclass(frozen=True)
class StockReport:
    rows: tuple[StockReportRow, ...]
    total_quantity: int
    grand_total: Decimal
    currency: str = "BRL"


@dataclass(frozen=True)
class StockCounts:
    available: int
    exited: int
    available_value: Decimal


@traced_engine("dashboard", "1.0")
def compute_dashboard_stats(
    *,
    product_count: int,
    order_statuses: Iterable[OrderStatus],
    stock_items: Iterable[StockItem],
    entry_totals: Iterable[Decimal],
    exit_totals: Iterable[Decimal],
) -> DashboardStats:
    pending = sum(1 for status in order_statuses if status in OPEN_ORDER_STATUSES)
    counts = count_stock_items(stock_items)
    return DashboardStats(
        total_products=product_count,
        pending_orders=pending,
        total_stock_value=counts.available_value,
        stock_items_count=counts.available,
        monthly_entries=sum(entry_totals, Decimal("0")),
        monthly_exits=sum(exit_totals, Decimal("0")),
    )


def count_stock_items(stock_items: Iterable[StockItem]) -> StockCounts:
    available = 0
    exited = 0
    value = Decimal("0")
    for item in stock_items:
        if item.status == StockItemStatus.AVAILABLE:
            available += 1
            value += item.unit_cost
        else:
            exited += 1
    return StockCounts(available=available, exited=exited, available_value=value)


@traced_engine("stock_report", "1.0")
def compute_stock_report(
    *,
    products: Mapping[UUID, Any],
    stock_items: Iterable[StockItem],
    currency: str = "BRL",
) -> StockReport:
    """
    Group available stock items by product and join them with the catalog.

    ``products`` maps product id to a catalog record exposing ``name``,
    ``supplier``, ``unit_type`` and ``unit_cost``.  The row's ``unit_cost``
    is the current catalog cost when the product still exists, otherwise
    the average received cost of the remaining units.
    """
    groups: dict[UUID, list[StockItem]] = {}
    for item in stock_items:
        if item.status == StockItemStatus.AVAILABLE:
            groups.setdefault(item.product_id, []).append(item)

    rows: list[StockReportRow] = []
    for product_id, units in groups.items():
        total = sum((unit.unit_cost for unit in units), Decimal("0"))
        product = products.get(product_id)
        if product is not None:
            name, supplier = product.name, product.supplier
            unit_type, unit_cost = product.unit_type, product.unit_cost
        else:
            name, supplier = units[0].product_name, units[0].supplier
            unit_type, unit_cost = None, round_money(total / len(units))
        rows.append(
            StockReportRow(
                product_id=product_id,
                product_name=name,
                supplier=supplier,
                unit_type=unit_type,
                quantity=len(units),
                unit_cost=unit_cost,
                total_value=total,
                last_entry_date=max(unit.entry_date for unit in units),
            )
        )

    rows.sort(key=lambda row: (row.product_name.lower(), str(row.product_id)))
    return StockReport(
        rows=tuple(rows),
        total_quantity=sum(row.quantity for row in rows),
        grand_total=sum((row.total_value for row in rows), Decimal("0")),
        currency=currency,
    )
