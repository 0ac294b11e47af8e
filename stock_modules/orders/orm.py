"""
SQLAlchemy ORM persistence models for the Orders module.

Invariants enforced
-------------------
* ``order_number`` is unique.
* ``OrderItemModel`` belongs to exactly one ``OrderModel`` and is deleted
  with it.
* ``total_value`` and ``status`` columns are written from the DTO's derived
  properties for querying; they are never read back as a source of truth.
* Product references are plain ids with NO foreign key, so deleting a
  product never touches orders.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stock_kernel.db.base import AggregateBase, Base


class OrderModel(AggregateBase):
    """
    A purchase order.

    Maps to the ``Order`` DTO in ``stock_modules.orders.models``.
    """

    __tablename__ = "orders"

    __table_args__ = (
        UniqueConstraint("order_number", name="uq_order_number"),
        Index("idx_order_status", "status"),
        Index("idx_order_date", "order_date"),
    )

    __list_order__ = ("created_at", "id")

    order_number: Mapped[str] = mapped_column(String(50), nullable=False)
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_value: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_by: Mapped[UUID]
    created_by_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    updated_at: Mapped[datetime] = mapped_column(nullable=False)

    items: Mapped[list["OrderItemModel"]] = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItemModel.line_number",
    )

    def to_dto(self):
        from stock_modules.orders.models import Order

        return Order(
            id=self.id,
            order_number=self.order_number,
            date=self.order_date,
            created_by=self.created_by,
            created_by_name=self.created_by_name,
            created_at=self.created_at,
            updated_at=self.updated_at,
            items=tuple(item.to_dto() for item in self.items),
        )

    @classmethod
    def from_dto(cls, dto) -> "OrderModel":
        return cls(
            id=dto.id,
            order_number=dto.order_number,
            order_date=dto.date,
            total_value=dto.total_value,
            status=dto.status.value,
            created_by=dto.created_by,
            created_by_name=dto.created_by_name,
            created_at=dto.created_at,
            updated_at=dto.updated_at,
            items=[
                OrderItemModel.from_dto(item, dto.id, line_number)
                for line_number, item in enumerate(dto.items, start=1)
            ],
        )

    def __repr__(self) -> str:
        return f"<OrderModel {self.order_number} [{self.status}]>"


class OrderItemModel(Base):
    """One product line of an order."""

    __tablename__ = "order_items"

    __table_args__ = (
        Index("idx_order_item_order", "order_id"),
        Index("idx_order_item_product", "product_id"),
    )

    order_id: Mapped[UUID] = mapped_column(ForeignKey("orders.id"), nullable=False)
    line_number: Mapped[int] = mapped_column(nullable=False)
    product_id: Mapped[UUID]
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    approved_by: Mapped[UUID | None]
    approved_by_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    order: Mapped["OrderModel"] = relationship("OrderModel", back_populates="items")

    def to_dto(self):
        from stock_modules.orders.models import OrderItem, OrderItemStatus

        return OrderItem(
            id=self.id,
            product_id=self.product_id,
            product_name=self.product_name,
            supplier=self.supplier,
            unit_cost=self.unit_cost,
            quantity=self.quantity,
            status=OrderItemStatus(self.status),
            approved_by=self.approved_by,
            approved_by_name=self.approved_by_name,
        )

    @classmethod
    def from_dto(cls, dto, order_id: UUID, line_number: int) -> "OrderItemModel":
        return cls(
            id=dto.id,
            order_id=order_id,
            line_number=line_number,
            product_id=dto.product_id,
            product_name=dto.product_name,
            supplier=dto.supplier,
            unit_cost=dto.unit_cost,
            quantity=dto.quantity,
            status=dto.status.value,
            approved_by=dto.approved_by,
            approved_by_name=dto.approved_by_name,
        )
