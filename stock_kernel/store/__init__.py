"""
Repository/store abstraction.

Services never hold module-level collections; they receive a ``Store`` and
read and write aggregates through its repositories inside
``store.transaction()``.
"""

from stock_kernel.store.contract import COLLECTIONS, Repository, Store
from stock_kernel.store.memory import InMemoryRepository, InMemoryStore
from stock_kernel.store.sql import SqlAlchemyRepository, SqlAlchemyStore

__all__ = [
    "COLLECTIONS",
    "Repository",
    "Store",
    "InMemoryRepository",
    "InMemoryStore",
    "SqlAlchemyRepository",
    "SqlAlchemyStore",
]
