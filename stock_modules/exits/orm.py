"""
SQLAlchemy ORM persistence models for the Exits module.

Invariants enforced
-------------------
* ``stock_item_ids`` is stored as a JSON list in consumption order; the
  stock item rows themselves carry ``exit_id`` back to the exit.
* Exit summary rows are keyed by a name-based UUID of (exit id, product id),
  so re-merging an unchanged exit updates the same rows.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import NAMESPACE_URL, UUID, uuid5

from sqlalchemy import JSON, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stock_kernel.db.base import AggregateBase, Base


def exit_item_row_id(exit_id: UUID, product_id: UUID) -> UUID:
    return uuid5(NAMESPACE_URL, f"stock-exit/{exit_id}/{product_id}")


class StockExitModel(AggregateBase):
    """
    A stock exit.

    Maps to the ``StockExit`` DTO in ``stock_modules.exits.models``.
    """

    __tablename__ = "stock_exits"

    __table_args__ = (
        Index("idx_stock_exit_date", "exit_date"),
    )

    __list_order__ = ("created_at", "id")

    exit_date: Mapped[date] = mapped_column(Date, nullable=False)
    observation: Mapped[str] = mapped_column(String(4000), nullable=False, default="")
    stock_item_ids: Mapped[list] = mapped_column(JSON, nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    created_by: Mapped[UUID]
    created_by_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    confirmed_by: Mapped[UUID | None]
    confirmed_by_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    confirmed_at: Mapped[datetime | None]

    items: Mapped[list["StockExitItemModel"]] = relationship(
        "StockExitItemModel",
        back_populates="exit",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="StockExitItemModel.line_number",
    )

    def to_dto(self):
        from stock_modules.exits.models import StockExit

        return StockExit(
            id=self.id,
            exit_date=self.exit_date,
            observation=self.observation,
            created_by=self.created_by,
            created_by_name=self.created_by_name,
            created_at=self.created_at,
            stock_item_ids=tuple(UUID(value) for value in self.stock_item_ids),
            items=tuple(item.to_dto() for item in self.items),
            confirmed_by=self.confirmed_by,
            confirmed_by_name=self.confirmed_by_name,
            confirmed_at=self.confirmed_at,
        )

    @classmethod
    def from_dto(cls, dto) -> "StockExitModel":
        return cls(
            id=dto.id,
            exit_date=dto.exit_date,
            observation=dto.observation,
            stock_item_ids=[str(value) for value in dto.stock_item_ids],
            total_cost=dto.total_cost,
            created_by=dto.created_by,
            created_by_name=dto.created_by_name,
            created_at=dto.created_at,
            confirmed_by=dto.confirmed_by,
            confirmed_by_name=dto.confirmed_by_name,
            confirmed_at=dto.confirmed_at,
            items=[
                StockExitItemModel.from_dto(item, dto.id, line_number)
                for line_number, item in enumerate(dto.items, start=1)
            ],
        )

    def __repr__(self) -> str:
        return f"<StockExitModel {self.exit_date} x{len(self.stock_item_ids)}>"


class StockExitItemModel(Base):
    """Per-product summary line of an exit."""

    __tablename__ = "stock_exit_items"

    __table_args__ = (
        Index("idx_stock_exit_item_exit", "stock_exit_id"),
    )

    stock_exit_id: Mapped[UUID] = mapped_column(ForeignKey("stock_exits.id"), nullable=False)
    line_number: Mapped[int] = mapped_column(nullable=False)
    product_id: Mapped[UUID]
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(nullable=False)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)

    exit: Mapped["StockExitModel"] = relationship("StockExitModel", back_populates="items")

    def to_dto(self):
        from stock_engines.exits import StockExitItem

        return StockExitItem(
            product_id=self.product_id,
            product_name=self.product_name,
            supplier=self.supplier,
            quantity=self.quantity,
            unit_cost=self.unit_cost,
            total_cost=self.total_cost,
            entry_date=self.entry_date,
        )

    @classmethod
    def from_dto(cls, dto, stock_exit_id: UUID, line_number: int) -> "StockExitItemModel":
        return cls(
            id=exit_item_row_id(stock_exit_id, dto.product_id),
            stock_exit_id=stock_exit_id,
            line_number=line_number,
            product_id=dto.product_id,
            product_name=dto.product_name,
            supplier=dto.supplier,
            quantity=dto.quantity,
            unit_cost=dto.unit_cost,
            total_cost=dto.total_cost,
            entry_date=dto.entry_date,
        )
