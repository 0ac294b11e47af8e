"""
In-process store (``stock_kernel.store.memory``).

Dict-backed repositories.  ``transaction()`` snapshots every collection on
entry to the outermost block and restores the snapshot when the block
raises.  Entities are frozen, so a shallow copy of each dict is a complete
snapshot.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from stock_kernel.logging_config import get_logger
from stock_kernel.store.contract import COLLECTIONS, Repository, Store

logger = get_logger("store.memory")


class InMemoryRepository(Repository[Any]):
    """Insertion-ordered dict keyed by entity id."""

    def __init__(self, name: str):
        self.name = name
        self._rows: dict[UUID, Any] = {}

    def list(self) -> list[Any]:
        return list(self._rows.values())

    def get(self, entity_id: UUID) -> Any | None:
        return self._rows.get(entity_id)

    def put(self, entity: Any) -> Any:
        self._rows[entity.id] = entity
        return entity

    def delete(self, entity_id: UUID) -> bool:
        return self._rows.pop(entity_id, None) is not None

    def __len__(self) -> int:
        return len(self._rows)

    def _snapshot(self) -> dict[UUID, Any]:
        return dict(self._rows)

    def _restore(self, rows: dict[UUID, Any]) -> None:
        self._rows = rows


class InMemoryStore(Store):
    """Single-writer, in-process store."""

    def __init__(self) -> None:
        self._repositories = {name: InMemoryRepository(name) for name in COLLECTIONS}
        self._depth = 0

    def repository(self, name: str) -> InMemoryRepository:
        try:
            return self._repositories[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    @contextmanager
    def transaction(self) -> Iterator[InMemoryStore]:
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        snapshot = {
            name: repo._snapshot() for name, repo in self._repositories.items()
        }
        self._depth = 1
        try:
            yield self
        except BaseException:
            for name, rows in snapshot.items():
                self._repositories[name]._restore(rows)
            logger.warning("transaction_rolled_back", exc_info=True)
            raise
        finally:
            self._depth = 0
