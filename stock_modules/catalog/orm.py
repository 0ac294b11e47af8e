"""
SQLAlchemy ORM persistence model for the Catalog module.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import AggregateBase


class ProductModel(AggregateBase):
    """
    A catalog product.

    Maps to the ``Product`` DTO in ``stock_modules.catalog.models``.
    """

    __tablename__ = "catalog_products"

    __table_args__ = (
        Index("idx_product_name", "name"),
    )

    __list_order__ = ("created_at", "id")

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(nullable=False)
    unit_type: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    updated_at: Mapped[datetime] = mapped_column(nullable=False)

    def to_dto(self):
        from stock_modules.catalog.models import Product

        return Product(
            id=self.id,
            name=self.name,
            supplier=self.supplier,
            unit_cost=self.unit_cost,
            unit_type=self.unit_type,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_dto(cls, dto) -> "ProductModel":
        return cls(
            id=dto.id,
            name=dto.name,
            supplier=dto.supplier,
            unit_cost=dto.unit_cost,
            unit_type=dto.unit_type,
            created_at=dto.created_at,
            updated_at=dto.updated_at,
        )

    def __repr__(self) -> str:
        return f"<ProductModel {self.name} [{self.supplier}]>"
