"""
Reporting Service (``stock_modules.reporting.service``).

Responsibility
--------------
Read-side projections over every ledger: dashboard statistics, the
stock-by-product report, the stock item query and stock counts.  Owns no
state and never writes.

Each call reads inside one ``store.transaction()`` block so the SQL store
sees a single snapshot of entries and their stock items.
"""

from __future__ import annotations

from uuid import UUID

from stock_config import StockConfig, get_active_config
from stock_engines.explosion import StockItem, StockItemStatus
from stock_engines.reporting import (
    DashboardStats,
    StockCounts,
    StockReport,
    compute_dashboard_stats,
    compute_stock_report,
    count_stock_items,
)
from stock_kernel.exceptions import ValidationError
from stock_kernel.logging_config import get_logger
from stock_kernel.store import Store
from stock_modules._service_helpers import as_uuid

logger = get_logger("modules.reporting.service")


class ReportingService:
    """Dashboard and stock reports."""

    def __init__(self, store: Store, config: StockConfig | None = None):
        self._store = store
        self._config = config or get_active_config()

    def dashboard_stats(self) -> DashboardStats:
        with self._store.transaction():
            stats = compute_dashboard_stats(
                product_count=len(self._store.products.list()),
                order_statuses=[order.status for order in self._store.orders.list()],
                stock_items=self._store.stock_items.list(),
                entry_totals=[e.total_value for e in self._store.stock_entries.list()],
                exit_totals=[x.total_cost for x in self._store.stock_exits.list()],
            )
        logger.debug("dashboard_stats_computed", extra={
            "pending_orders": stats.pending_orders,
            "stock_items_count": stats.stock_items_count,
        })
        return stats

    def stock_report(self) -> StockReport:
        with self._store.transaction():
            products = {p.id: p for p in self._store.products.list()}
            report = compute_stock_report(
                products=products,
                stock_items=self._store.stock_items.list(),
                currency=self._config.currency,
            )
        logger.debug("stock_report_computed", extra={
            "row_count": len(report.rows),
            "grand_total": str(report.grand_total),
        })
        return report

    def stock_items(
        self,
        status: StockItemStatus | str | None = None,
        product_id: UUID | str | None = None,
        stock_entry_id: UUID | str | None = None,
        search: str | None = None,
    ) -> list[StockItem]:
        """
        Stock items matching every given filter.

        ``search`` is a case-insensitive substring match on product name or
        supplier.  Results are ordered by product name, then entry date.
        """
        wanted_status = None
        if status is not None:
            try:
                wanted_status = StockItemStatus(status)
            except ValueError:
                raise ValidationError(
                    "status", f"must be available or exited, got {status!r}",
                ) from None
        wanted_product = as_uuid("product_id", product_id) if product_id is not None else None
        wanted_entry = (
            as_uuid("stock_entry_id", stock_entry_id) if stock_entry_id is not None else None
        )
        needle = search.strip().lower() if search else ""

        def matches(item: StockItem) -> bool:
            if wanted_status is not None and item.status != wanted_status:
                return False
            if wanted_product is not None and item.product_id != wanted_product:
                return False
            if wanted_entry is not None and item.stock_entry_id != wanted_entry:
                return False
            if needle and needle not in item.product_name.lower() \
                    and needle not in item.supplier.lower():
                return False
            return True

        rows = self._store.stock_items.find(matches)
        return sorted(
            rows,
            key=lambda i: (i.product_name.lower(), i.entry_date, i.invoice_number, str(i.id)),
        )

    def available_stock_items(self, **filters) -> list[StockItem]:
        return self.stock_items(status=StockItemStatus.AVAILABLE, **filters)

    def stock_counts(self) -> StockCounts:
        return count_stock_items(self._store.stock_items.list())
