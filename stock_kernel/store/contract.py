"""
Store contract (``stock_kernel.store.contract``).

Responsibility
--------------
Define the persistence seam between the ledgers and whatever keeps their
records: a ``Repository`` per aggregate (``list/get/put/delete``) and a
``Store`` that groups the repositories and owns the transaction boundary.

Invariants enforced
-------------------
* Entities are frozen dataclasses with a ``UUID`` ``id``; ``put`` is an
  upsert keyed by that id.
* ``Store.transaction()`` is all-or-nothing: when the block raises, every
  write made inside it is undone before the exception propagates.  Nested
  ``transaction()`` blocks join the outermost one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from typing import Any, Generic, TypeVar
from uuid import UUID

T = TypeVar("T")

COLLECTIONS: tuple[str, ...] = (
    "products",
    "orders",
    "stock_entries",
    "stock_items",
    "stock_exits",
    "installments",
)


class Repository(ABC, Generic[T]):
    """Keyed collection of one aggregate type."""

    @abstractmethod
    def list(self) -> list[T]:
        """All entities, oldest first."""

    @abstractmethod
    def get(self, entity_id: UUID) -> T | None:
        """The entity with ``entity_id`` or None."""

    @abstractmethod
    def put(self, entity: T) -> T:
        """Insert or replace ``entity``."""

    @abstractmethod
    def delete(self, entity_id: UUID) -> bool:
        """Remove the entity; False if it did not exist."""

    def find(self, predicate: Callable[[T], bool]) -> list[T]:
        return [entity for entity in self.list() if predicate(entity)]

    def put_all(self, entities: Iterator[T] | list[T] | tuple[T, ...]) -> int:
        count = 0
        for entity in entities:
            self.put(entity)
            count += 1
        return count


class Store(ABC):
    """
    The set of repositories the ledgers work against.

    Contract:
        ``repository(name)`` returns the repository for one of
        ``COLLECTIONS``; the named properties are shortcuts.
    """

    @abstractmethod
    def repository(self, name: str) -> Repository[Any]:
        ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager[Store]:
        ...

    @property
    def products(self) -> Repository[Any]:
        return self.repository("products")

    @property
    def orders(self) -> Repository[Any]:
        return self.repository("orders")

    @property
    def stock_entries(self) -> Repository[Any]:
        return self.repository("stock_entries")

    @property
    def stock_items(self) -> Repository[Any]:
        return self.repository("stock_items")

    @property
    def stock_exits(self) -> Repository[Any]:
        return self.repository("stock_exits")

    @property
    def installments(self) -> Repository[Any]:
        return self.repository("installments")
