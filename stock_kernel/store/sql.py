"""
SQLAlchemy-backed store (``stock_kernel.store.sql``).

Responsibility
--------------
Implement the repository contract over an ORM session.  Each collection is
bound to an ``AggregateBase`` model that converts to and from the frozen
DTOs; child rows (order items, invoices, ...) travel with their aggregate
through ``relationship(cascade="all, delete-orphan")``.

Invariants enforced
-------------------
* The outermost ``transaction()`` commits the session on success and rolls
  it back on any exception (same contract as ``session_scope``).
* ``put`` merges the whole aggregate graph, so children removed from the
  DTO are deleted from the database.

The kernel does not know which models exist; the caller passes the
collection -> model mapping (see ``stock_modules._orm_registry``).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from stock_kernel.db.base import AggregateBase
from stock_kernel.logging_config import get_logger
from stock_kernel.store.contract import COLLECTIONS, Repository, Store

logger = get_logger("store.sql")


class SqlAlchemyRepository(Repository[Any]):
    """Repository over one aggregate model."""

    def __init__(self, session: Session, model: type[AggregateBase]):
        self._session = session
        self._model = model

    def list(self) -> list[Any]:
        order_by = [getattr(self._model, col) for col in self._model.__list_order__]
        rows = self._session.scalars(select(self._model).order_by(*order_by))
        return [row.to_dto() for row in rows]

    def get(self, entity_id: UUID) -> Any | None:
        row = self._session.get(self._model, entity_id)
        return row.to_dto() if row is not None else None

    def put(self, entity: Any) -> Any:
        self._session.merge(self._model.from_dto(entity))
        self._session.flush()
        return entity

    def delete(self, entity_id: UUID) -> bool:
        row = self._session.get(self._model, entity_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True


class SqlAlchemyStore(Store):
    """Store bound to one session."""

    def __init__(self, session: Session, models: Mapping[str, type[AggregateBase]]):
        missing = [name for name in COLLECTIONS if name not in models]
        if missing:
            raise ValueError(f"No ORM model registered for: {', '.join(missing)}")
        self._session = session
        self._repositories = {
            name: SqlAlchemyRepository(session, models[name]) for name in COLLECTIONS
        }
        self._depth = 0

    @property
    def session(self) -> Session:
        return self._session

    def repository(self, name: str) -> SqlAlchemyRepository:
        try:
            return self._repositories[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    @contextmanager
    def transaction(self) -> Iterator[SqlAlchemyStore]:
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self._depth = 1
        logger.debug("transaction_started")
        try:
            yield self
            self._session.commit()
            logger.debug("transaction_committed")
        except BaseException:
            self._session.rollback()
            logger.warning("transaction_rolled_back", exc_info=True)
            raise
        finally:
            self._depth = 0
