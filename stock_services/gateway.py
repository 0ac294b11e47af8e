"""
stock_services.gateway -- the operation surface used by the UI/API layer.

Responsibility:
    Construct every ledger service exactly once over one store and expose
    their operations as calls returning ``OperationResult``.  This is the
    single place typed kernel errors become ``{success, error, message}``.

Architecture position:
    Services -- top layer.  May import stock_modules, stock_engines,
    stock_kernel and stock_config.

Invariants enforced:
    - Every call runs inside ``LogContext.bind(correlation_id, actor_id,
      operation)`` so each log record of the call carries them.  Calls that
      target one record also bind its id as ``entity_id``.
    - ``StockKernelError`` subclasses become failed results; any other
      exception propagates (after the owning service rolled back).

Failure modes:
    - Unexpected exceptions (database errors, programming errors)
      propagate unchanged.

Usage:
    gateway = StockGateway(InMemoryStore(), clock=clock)
    result = gateway.create_product(
        name="Notebook", supplier="Dell", unit_cost="3500.00",
        unit_type="unit", actor=admin,
    )
    if result.success:
        product = result.data
    else:
        show(result.message)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from stock_config import StockConfig, get_active_config
from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.exceptions import StockKernelError
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.store import Store
from stock_modules._orm_registry import sql_store
from stock_modules.catalog.service import CatalogService
from stock_modules.entries.service import EntryService
from stock_modules.exits.service import ExitService
from stock_modules.orders.service import OrderService
from stock_modules.payments.service import PaymentService
from stock_modules.reporting.service import ReportingService
from stock_services.results import OperationResult

logger = get_logger("services.gateway")


class StockGateway:
    """Central factory and facade for the ledger services.

    Contract:
        Receives a ``Store`` and optional Clock/config/id factory.  Builds
        each module service once; all share the same store and clock.

    Non-goals:
        - Does NOT authenticate; callers pass a resolved ``Actor``.
        - Does NOT retry.
    """

    def __init__(
        self,
        store: Store,
        clock: Clock | None = None,
        config: StockConfig | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()

        self.catalog = CatalogService(store, self._clock, id_factory)
        self.orders = OrderService(store, self._clock, self._config, id_factory)
        self.entries = EntryService(store, self._clock, self._config, id_factory)
        self.exits = ExitService(store, self._clock, self._config, id_factory)
        self.payments = PaymentService(store, self._clock)
        self.reporting = ReportingService(store, self._config)

    @classmethod
    def for_session(
        cls,
        session: Session,
        clock: Clock | None = None,
        config: StockConfig | None = None,
    ) -> StockGateway:
        """Gateway over a SQLAlchemy session."""
        return cls(sql_store(session), clock=clock, config=config)

    @property
    def store(self) -> Store:
        return self._store

    # -------------------------------------------------------------------------
    # Call envelope
    # -------------------------------------------------------------------------

    def _run(
        self,
        operation: str,
        actor: Actor | None,
        call: Callable[[], Any],
        message: str | None = None,
        entity_id: UUID | str | None = None,
    ) -> OperationResult[Any]:
        with LogContext.bind(
            correlation_id=uuid4(),
            actor_id=actor.id if actor is not None else None,
            operation=operation,
            entity_id=entity_id,
        ):
            try:
                data = call()
            except StockKernelError as exc:
                logger.warning("operation_failed", extra={
                    "error_code": exc.code,
                    "error_message": str(exc),
                })
                return OperationResult.failed(exc)
            logger.debug("operation_succeeded")
            return OperationResult.ok(data, message)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def list_products(self) -> OperationResult:
        return self._run("list_products", None, self.catalog.list_products)

    def get_product(self, product_id: UUID) -> OperationResult:
        return self._run(
            "get_product", None, lambda: self.catalog.get_product(product_id), entity_id=product_id,
        )

    def create_product(self, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "create_product", actor,
            lambda: self.catalog.create_product(actor=actor, **data),
            "Product created",
        )

    def update_product(self, product_id: UUID, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "update_product", actor,
            lambda: self.catalog.update_product(product_id, actor=actor, **data),
            "Product updated",
            entity_id=product_id,
        )

    def delete_product(self, product_id: UUID, *, actor: Actor) -> OperationResult:
        return self._run(
            "delete_product", actor,
            lambda: self.catalog.delete_product(product_id, actor=actor),
            "Product deleted",
            entity_id=product_id,
        )

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    def list_orders(self) -> OperationResult:
        return self._run("list_orders", None, self.orders.list_orders)

    def get_order(self, order_id: UUID) -> OperationResult:
        return self._run(
            "get_order", None, lambda: self.orders.get_order(order_id), entity_id=order_id,
        )

    def create_order(self, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "create_order", actor,
            lambda: self.orders.create_order(actor=actor, **data),
            "Order created",
        )

    def update_order(self, order_id: UUID, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "update_order", actor,
            lambda: self.orders.update_order(order_id, actor=actor, **data),
            "Order updated",
            entity_id=order_id,
        )

    def approve_order(self, order_id: UUID, *, actor: Actor) -> OperationResult:
        return self._run(
            "approve_order", actor,
            lambda: self.orders.approve_order(order_id, actor=actor),
            "Order approved",
            entity_id=order_id,
        )

    def reject_order(self, order_id: UUID, *, actor: Actor) -> OperationResult:
        return self._run(
            "reject_order", actor,
            lambda: self.orders.reject_order(order_id, actor=actor),
            "Order rejected",
            entity_id=order_id,
        )

    def approve_order_item(self, order_id: UUID, item_id: UUID, *, actor: Actor) -> OperationResult:
        return self._run(
            "approve_order_item", actor,
            lambda: self.orders.approve_order_item(order_id, item_id, actor=actor),
            "Order item approved",
            entity_id=order_id,
        )

    def reject_order_item(self, order_id: UUID, item_id: UUID, *, actor: Actor) -> OperationResult:
        return self._run(
            "reject_order_item", actor,
            lambda: self.orders.reject_order_item(order_id, item_id, actor=actor),
            "Order item rejected",
            entity_id=order_id,
        )

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def list_stock_entries(self, order_id: UUID | None = None) -> OperationResult:
        return self._run(
            "list_stock_entries", None,
            lambda: self.entries.list_stock_entries(order_id),
        )

    def get_stock_entry(self, entry_id: UUID) -> OperationResult:
        return self._run(
            "get_stock_entry", None, lambda: self.entries.get_stock_entry(entry_id),
            entity_id=entry_id,
        )

    def receivable_items(self, order_id: UUID) -> OperationResult:
        return self._run(
            "receivable_items", None, lambda: self.entries.receivable_items(order_id),
            entity_id=order_id,
        )

    def create_stock_entry(self, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "create_stock_entry", actor,
            lambda: self.entries.create_stock_entry(actor=actor, **data),
            "Stock entry recorded",
        )

    # -------------------------------------------------------------------------
    # Exits
    # -------------------------------------------------------------------------

    def list_stock_exits(self) -> OperationResult:
        return self._run("list_stock_exits", None, self.exits.list_stock_exits)

    def get_stock_exit(self, exit_id: UUID) -> OperationResult:
        return self._run(
            "get_stock_exit", None, lambda: self.exits.get_stock_exit(exit_id), entity_id=exit_id,
        )

    def create_stock_exit(self, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "create_stock_exit", actor,
            lambda: self.exits.create_stock_exit(actor=actor, **data),
            "Stock exit recorded",
        )

    def confirm_stock_exit(self, exit_id: UUID, *, actor: Actor) -> OperationResult:
        return self._run(
            "confirm_stock_exit", actor,
            lambda: self.exits.confirm_stock_exit(exit_id, actor=actor),
            "Stock exit confirmed",
            entity_id=exit_id,
        )

    def update_stock_exit(self, exit_id: UUID, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "update_stock_exit", actor,
            lambda: self.exits.update_stock_exit(exit_id, actor=actor, **data),
            "Stock exit updated",
            entity_id=exit_id,
        )

    def delete_stock_exit(self, exit_id: UUID, *, actor: Actor) -> OperationResult:
        return self._run(
            "delete_stock_exit", actor,
            lambda: self.exits.delete_stock_exit(exit_id, actor=actor),
            "Stock exit deleted",
            entity_id=exit_id,
        )

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def dashboard_stats(self) -> OperationResult:
        return self._run("dashboard_stats", None, self.reporting.dashboard_stats)

    def stock_report(self) -> OperationResult:
        return self._run("stock_report", None, self.reporting.stock_report)

    def stock_items(self, **filters: Any) -> OperationResult:
        return self._run("stock_items", None, lambda: self.reporting.stock_items(**filters))

    def available_stock_items(self, **filters: Any) -> OperationResult:
        return self._run(
            "available_stock_items", None,
            lambda: self.reporting.available_stock_items(**filters),
        )

    def stock_counts(self) -> OperationResult:
        return self._run("stock_counts", None, self.reporting.stock_counts)

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def list_installments(self, **filters: Any) -> OperationResult:
        return self._run(
            "list_installments", None, lambda: self.payments.list_installments(**filters),
        )

    def mark_installment_paid(self, installment_id: UUID, *, actor: Actor, **data: Any) -> OperationResult:
        return self._run(
            "mark_installment_paid", actor,
            lambda: self.payments.mark_installment_paid(installment_id, actor=actor, **data),
            "Installment paid",
            entity_id=installment_id,
        )

    def installment_summary(self, as_of=None) -> OperationResult:
        return self._run(
            "installment_summary", None, lambda: self.payments.installment_summary(as_of),
        )
