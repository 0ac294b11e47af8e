"""
Module ORM Registry (``stock_modules._orm_registry``).

Responsibility
--------------
Ensure all module-level SQLAlchemy ORM models are imported so that
``Base.metadata`` contains their table definitions before tables are
created, and tell the SQL store which model backs each collection.

Architecture position
---------------------
**Modules layer** -- utility.  Imports from sibling ``stock_modules``
packages and from ``stock_kernel`` (allowed: modules -> kernel).
``stock_kernel.db.engine.create_tables`` imports it lazily.

Usage
-----
``tests/conftest.py`` and ``stock_services`` call ``store_models()`` to
build a ``SqlAlchemyStore``; ``create_tables()`` calls
``import_all_orm_models()``.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from stock_kernel.db.base import AggregateBase
from stock_kernel.store import SqlAlchemyStore


def import_all_orm_models() -> None:
    """Import every ``stock_modules.*.orm`` module to register ORM models.

    This function is idempotent -- repeated calls are harmless.
    """
    # fmt: off
    import stock_modules.catalog.orm  # noqa: F401
    import stock_modules.entries.orm  # noqa: F401
    import stock_modules.exits.orm  # noqa: F401
    import stock_modules.orders.orm  # noqa: F401
    import stock_modules.payments.orm  # noqa: F401
    # fmt: on


def store_models() -> dict[str, type[AggregateBase]]:
    """Collection name -> aggregate ORM model."""
    from stock_modules.catalog.orm import ProductModel
    from stock_modules.entries.orm import StockEntryModel, StockItemModel
    from stock_modules.exits.orm import StockExitModel
    from stock_modules.orders.orm import OrderModel
    from stock_modules.payments.orm import PaymentInstallmentModel

    return {
        "products": ProductModel,
        "orders": OrderModel,
        "stock_entries": StockEntryModel,
        "stock_items": StockItemModel,
        "stock_exits": StockExitModel,
        "installments": PaymentInstallmentModel,
    }


def sql_store(session: Session) -> SqlAlchemyStore:
    """A ``SqlAlchemyStore`` over ``session`` with every ledger registered."""
    return SqlAlchemyStore(session, store_models())
