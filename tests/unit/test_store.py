"""
Store contract tests, run against both backends.

The ledgers rely on three properties of every store: ``put`` is an upsert
by id, a failing ``transaction()`` block leaves no trace, and nested blocks
join the outermost one.
"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from stock_kernel.store import InMemoryStore, SqlAlchemyStore
from stock_modules.catalog.models import Product

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _product(name="Notebook", cost="100", created_at=T0):
    return Product(
        id=uuid4(),
        name=name,
        supplier="Dell",
        unit_cost=Decimal(cost),
        unit_type="unit",
        created_at=created_at,
        updated_at=created_at,
    )


class TestRepository:

    def test_put_get_list(self, store):
        product = _product()
        with store.transaction():
            store.products.put(product)

        assert store.products.get(product.id) == product
        assert store.products.list() == [product]

    def test_put_replaces(self, store):
        product = _product()
        with store.transaction():
            store.products.put(product)
            store.products.put(replace(product, name="Laptop"))

        assert store.products.get(product.id).name == "Laptop"
        assert len(store.products.list()) == 1

    def test_get_missing(self, store):
        assert store.products.get(uuid4()) is None

    def test_delete(self, store):
        product = _product()
        with store.transaction():
            store.products.put(product)
            assert store.products.delete(product.id) is True
            assert store.products.delete(product.id) is False

        assert store.products.list() == []

    def test_find_and_put_all(self, store):
        products = [_product("A"), _product("B", cost="5"), _product("C", cost="7")]
        with store.transaction():
            assert store.products.put_all(iter(products)) == 3

        cheap = store.products.find(lambda p: p.unit_cost < 10)
        assert sorted(p.name for p in cheap) == ["B", "C"]

    def test_unknown_collection(self, store):
        with pytest.raises(KeyError):
            store.repository("suppliers")


class TestTransaction:

    def test_rollback_on_error(self, store):
        kept = _product("kept")
        with store.transaction():
            store.products.put(kept)

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.products.put(_product("lost"))
                store.products.delete(kept.id)
                raise RuntimeError("boom")

        assert [p.name for p in store.products.list()] == ["kept"]

    def test_nested_block_joins_outer(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                with store.transaction():
                    store.products.put(_product("inner"))
                raise RuntimeError("outer fails")

        assert store.products.list() == []

    def test_nested_success_commits_once(self, store):
        with store.transaction():
            with store.transaction():
                store.products.put(_product("inner"))
            store.products.put(_product("outer"))

        assert sorted(p.name for p in store.products.list()) == ["inner", "outer"]

    def test_store_usable_after_rollback(self, store):
        with pytest.raises(ValueError):
            with store.transaction():
                raise ValueError("nothing written")

        with store.transaction():
            store.products.put(_product())
        assert len(store.products.list()) == 1


class TestBackends:

    def test_memory_lists_in_insertion_order(self):
        store = InMemoryStore()
        names = ["b", "a", "c"]
        with store.transaction():
            for name in names:
                store.products.put(_product(name))
        assert [p.name for p in store.products.list()] == names

    def test_sql_store_requires_every_collection(self, sqlite_session):
        with pytest.raises(ValueError):
            SqlAlchemyStore(sqlite_session, {})

    def test_sql_lists_by_creation_time(self, sqlite_session):
        from stock_modules._orm_registry import sql_store

        store = sql_store(sqlite_session)
        later = _product("later", created_at=T0.replace(hour=10))
        earlier = _product("earlier")
        with store.transaction():
            store.products.put(later)
            store.products.put(earlier)

        assert [p.name for p in store.products.list()] == ["earlier", "later"]

    def test_sql_timestamps_come_back_aware(self, sqlite_session):
        from stock_modules._orm_registry import sql_store

        store = sql_store(sqlite_session)
        product = _product()
        with store.transaction():
            store.products.put(product)
        sqlite_session.expire_all()

        loaded = store.products.get(product.id)
        assert loaded.created_at.tzinfo is not None
        assert loaded.created_at == T0


class TestSessionScope:

    def test_commits_on_success(self, sqlite_session):
        from stock_kernel.db.engine import session_scope
        from stock_modules.catalog.orm import ProductModel

        product = _product("scoped")
        with session_scope() as session:
            session.add(ProductModel.from_dto(product))

        assert sqlite_session.get(ProductModel, product.id).name == "scoped"

    def test_rolls_back_on_error(self, sqlite_session):
        from stock_kernel.db.engine import session_scope
        from stock_modules.catalog.orm import ProductModel

        product = _product("discarded")
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(ProductModel.from_dto(product))
                session.flush()
                raise RuntimeError("abort")

        assert sqlite_session.get(ProductModel, product.id) is None
