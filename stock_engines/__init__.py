"""
Module: stock_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    ``stock_modules`` and ``stock_services``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ``stock_kernel`` (domain values, exceptions, logging).
    MUST NOT import ``stock_services`` or ``stock_modules``.

Invariants enforced:
    - Purity: engines never read the clock; dates are parameters.
    - Decimal-only arithmetic for every monetary amount.
    - Determinism: identical inputs give identical outputs (identifiers come
      from an injectable factory).

Usage:
    from stock_engines.explosion import explode, ExplosionLine
    from stock_engines.installments import compute_installments
    from stock_engines.order_status import derive_order_status
    from stock_engines.receipt import check_receipt
    from stock_engines.reporting import compute_stock_report
"""

from stock_engines.exits import StockExitItem, group_exit_items
from stock_engines.explosion import (
    ExplosionLine,
    StockItem,
    StockItemStatus,
    explode,
)
from stock_engines.installments import (
    InstallmentSummary,
    PaymentInstallment,
    compute_installments,
    summarize_installments,
)
from stock_engines.order_status import (
    OPEN_ORDER_STATUSES,
    OrderItemStatus,
    OrderStatus,
    derive_order_status,
)
from stock_engines.receipt import ReceiptPosition, check_receipt, sum_quantities
from stock_engines.reporting import (
    DashboardStats,
    StockCounts,
    StockReport,
    StockReportRow,
    compute_dashboard_stats,
    compute_stock_report,
    count_stock_items,
)

__all__ = [
    "ExplosionLine",
    "StockItem",
    "StockItemStatus",
    "explode",
    "StockExitItem",
    "group_exit_items",
    "PaymentInstallment",
    "InstallmentSummary",
    "compute_installments",
    "summarize_installments",
    "OPEN_ORDER_STATUSES",
    "OrderItemStatus",
    "OrderStatus",
    "derive_order_status",
    "ReceiptPosition",
    "check_receipt",
    "sum_quantities",
    "DashboardStats",
    "StockCounts",
    "StockReport",
    "StockReportRow",
    "compute_dashboard_stats",
    "compute_stock_report",
    "count_stock_items",
]
