"""
Stock Exit Domain Models.

A stock exit consumes specific stock items by id.  The per-product
``items`` summary is derived from those units when the exit is created.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from stock_engines.exits import StockExitItem
from stock_kernel.domain.actor import Actor

__all__ = [
    "ExitStatus",
    "StockExit",
    "StockExitItem",
]


class ExitStatus(str, Enum):
    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class StockExit:
    """Inventory leaving stock."""
    id: UUID
    exit_date: date
    observation: str
    created_by: UUID
    created_by_name: str
    created_at: datetime
    stock_item_ids: tuple[UUID, ...] = field(default_factory=tuple)
    items: tuple[StockExitItem, ...] = field(default_factory=tuple)
    confirmed_by: UUID | None = None
    confirmed_by_name: str | None = None
    confirmed_at: datetime | None = None

    @property
    def status(self) -> ExitStatus:
        if self.confirmed_at is None:
            return ExitStatus.UNCONFIRMED
        return ExitStatus.CONFIRMED

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed_at is not None

    @property
    def quantity(self) -> int:
        return len(self.stock_item_ids)

    @property
    def total_cost(self) -> Decimal:
        return sum((item.total_cost for item in self.items), Decimal("0"))

    def confirmed(self, actor: Actor, at: datetime) -> StockExit:
        return replace(
            self,
            confirmed_by=actor.id,
            confirmed_by_name=actor.name,
            confirmed_at=at,
        )
