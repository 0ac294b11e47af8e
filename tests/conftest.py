"""
Pytest fixtures for the stock ledger test suite.

Provides:
- Structured logging configuration and log capture
- Deterministic clock and actors
- A ``store`` fixture parametrized over the in-memory store and a
  SQLAlchemy store on in-memory SQLite, so every service test runs against
  both backends
- Ledger services wired to that store, plus small builders for products,
  approved orders and entries
"""

import json
import logging
from datetime import date, datetime, timezone
from io import StringIO
from uuid import UUID

import pytest

from stock_config import StockConfig
from stock_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from stock_kernel.store import InMemoryStore
from stock_modules._orm_registry import sql_store
from stock_modules.catalog.service import CatalogService
from stock_modules.entries.service import EntryService
from stock_modules.exits.service import ExitService
from stock_modules.orders.service import OrderService
from stock_modules.payments.service import PaymentService
from stock_modules.reporting.service import ReportingService

ADMIN_ID = UUID("00000000-0000-4000-a000-000000000001")
USER_ID = UUID("00000000-0000-4000-a000-000000000002")


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture stock_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, orders):
            orders.create_order(...)
            logs = captured_logs()
            assert any(r["message"] == "order_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("stock_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock, actors, config
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def admin() -> Actor:
    return Actor(id=ADMIN_ID, name="Alice Admin", is_admin=True)


@pytest.fixture
def user() -> Actor:
    return Actor(id=USER_ID, name="Bob Buyer")


@pytest.fixture
def config() -> StockConfig:
    return StockConfig.with_defaults()


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def sqlite_session():
    """Session on a fresh in-memory SQLite database with every table created."""
    init_engine_from_url("sqlite://")
    create_tables()
    session = get_session()
    try:
        yield session
    finally:
        session.close()
        drop_tables()
        reset_engine()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """The same ledger behaviour must hold on both backends."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return sql_store(request.getfixturevalue("sqlite_session"))


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def catalog(store, deterministic_clock):
    return CatalogService(store, deterministic_clock)


@pytest.fixture
def orders(store, deterministic_clock, config):
    return OrderService(store, deterministic_clock, config)


@pytest.fixture
def entries(store, deterministic_clock, config):
    return EntryService(store, deterministic_clock, config)


@pytest.fixture
def exits(store, deterministic_clock, config):
    return ExitService(store, deterministic_clock, config)


@pytest.fixture
def payments(store, deterministic_clock):
    return PaymentService(store, deterministic_clock)


@pytest.fixture
def reporting(store, config):
    return ReportingService(store, config)


# =============================================================================
# Builders
# =============================================================================


@pytest.fixture
def make_product(catalog, admin, deterministic_clock):
    """Factory fixture creating catalog products."""

    def _make(name="Notebook", supplier="Dell", unit_cost="100.00", unit_type="unit"):
        deterministic_clock.tick()
        return catalog.create_product(
            name=name,
            supplier=supplier,
            unit_cost=unit_cost,
            unit_type=unit_type,
            actor=admin,
        )

    return _make


@pytest.fixture
def make_order(orders, user, deterministic_clock):
    """Factory fixture creating pending orders from ``(product, quantity)`` pairs."""
    counter = {"n": 0}

    def _make(*lines, order_number=None):
        counter["n"] += 1
        deterministic_clock.tick()
        return orders.create_order(
            order_number=order_number or f"PO-{counter['n']:04d}",
            date=date(2024, 3, 1),
            items=[{"product_id": p.id, "quantity": q} for p, q in lines],
            actor=user,
        )

    return _make


@pytest.fixture
def make_approved_order(make_order, orders, admin):
    """Factory fixture creating orders with every item approved."""

    def _make(*lines, order_number=None):
        order = make_order(*lines, order_number=order_number)
        return orders.approve_order(order.id, actor=admin)

    return _make


@pytest.fixture
def make_entry(entries, user, deterministic_clock):
    """Factory fixture receiving ``(order_item, quantity, cost)`` lines on one invoice."""

    def _make(order, *lines, installments=1, invoice_number="NF-1",
              payment_method="boleto", entry_date=date(2024, 3, 5),
              first_due_date=date(2024, 4, 5)):
        deterministic_clock.tick()
        return entries.create_stock_entry(
            order_id=order.id,
            date=entry_date,
            payment_method=payment_method,
            installments=installments,
            first_due_date=first_due_date,
            invoices=[{
                "invoice_number": invoice_number,
                "items": [
                    {"order_item_id": item.id, "quantity": qty, "adjusted_unit_cost": cost}
                    for item, qty, cost in lines
                ],
            }],
            actor=user,
        )

    return _make
