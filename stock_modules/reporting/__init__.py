"""
Reporting Module (``stock_modules.reporting``).

Read-only projections over the ledgers.  No models or tables of its own;
the result types come from ``stock_engines.reporting``.
"""

from stock_engines.reporting import (
    DashboardStats,
    StockCounts,
    StockReport,
    StockReportRow,
)

__all__ = [
    "DashboardStats",
    "StockCounts",
    "StockReport",
    "StockReportRow",
]
