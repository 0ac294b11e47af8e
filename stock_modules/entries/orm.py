"""
SQLAlchemy ORM persistence models for the Entries module.

Invariants enforced
-------------------
* An entry owns its invoices and an invoice owns its items; both child
  tables are deleted with their parent.
* ``total_value`` / ``total_quantity`` columns are written from the DTO's
  derived properties and never read back as a source of truth.
* Stock items are their own aggregate (one row per unit) so exits can flip
  them without loading the entry.  They reference the entry, order item and
  exit by plain id with NO foreign key.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stock_kernel.db.base import AggregateBase, Base


class StockEntryModel(AggregateBase):
    """
    A receipt of goods against an order.

    Maps to the ``StockEntry`` DTO in ``stock_modules.entries.models``.
    """

    __tablename__ = "stock_entries"

    __table_args__ = (
        Index("idx_stock_entry_order", "order_id"),
        Index("idx_stock_entry_date", "entry_date"),
    )

    __list_order__ = ("created_at", "id")

    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    order_id: Mapped[UUID]
    order_number: Mapped[str] = mapped_column(String(50), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    installments: Mapped[int] = mapped_column(nullable=False)
    first_due_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_value: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total_quantity: Mapped[int] = mapped_column(default=0)
    created_by: Mapped[UUID]
    created_by_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False)

    invoices: Mapped[list["StockEntryInvoiceModel"]] = relationship(
        "StockEntryInvoiceModel",
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="StockEntryInvoiceModel.line_number",
    )

    def to_dto(self):
        from stock_modules.entries.models import PaymentMethod, StockEntry

        return StockEntry(
            id=self.id,
            date=self.entry_date,
            order_id=self.order_id,
            order_number=self.order_number,
            payment_method=PaymentMethod(self.payment_method),
            installments=self.installments,
            first_due_date=self.first_due_date,
            created_by=self.created_by,
            created_by_name=self.created_by_name,
            created_at=self.created_at,
            invoices=tuple(invoice.to_dto() for invoice in self.invoices),
        )

    @classmethod
    def from_dto(cls, dto) -> "StockEntryModel":
        return cls(
            id=dto.id,
            entry_date=dto.date,
            order_id=dto.order_id,
            order_number=dto.order_number,
            payment_method=dto.payment_method.value,
            installments=dto.installments,
            first_due_date=dto.first_due_date,
            total_value=dto.total_value,
            total_quantity=dto.total_quantity,
            created_by=dto.created_by,
            created_by_name=dto.created_by_name,
            created_at=dto.created_at,
            invoices=[
                StockEntryInvoiceModel.from_dto(invoice, dto.id, line_number)
                for line_number, invoice in enumerate(dto.invoices, start=1)
            ],
        )

    def __repr__(self) -> str:
        return f"<StockEntryModel {self.order_number} {self.entry_date}>"


class StockEntryInvoiceModel(Base):
    """One invoice of a stock entry."""

    __tablename__ = "stock_entry_invoices"

    __table_args__ = (
        Index("idx_stock_entry_invoice_entry", "stock_entry_id"),
    )

    stock_entry_id: Mapped[UUID] = mapped_column(
        ForeignKey("stock_entries.id"), nullable=False,
    )
    line_number: Mapped[int] = mapped_column(nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(100), nullable=False)

    entry: Mapped["StockEntryModel"] = relationship(
        "StockEntryModel", back_populates="invoices",
    )
    items: Mapped[list["StockEntryInvoiceItemModel"]] = relationship(
        "StockEntryInvoiceItemModel",
        back_populates="invoice",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="StockEntryInvoiceItemModel.line_number",
    )

    def to_dto(self):
        from stock_modules.entries.models import StockEntryInvoice

        return StockEntryInvoice(
            id=self.id,
            invoice_number=self.invoice_number,
            items=tuple(item.to_dto() for item in self.items),
        )

    @classmethod
    def from_dto(cls, dto, stock_entry_id: UUID, line_number: int) -> "StockEntryInvoiceModel":
        return cls(
            id=dto.id,
            stock_entry_id=stock_entry_id,
            line_number=line_number,
            invoice_number=dto.invoice_number,
            items=[
                StockEntryInvoiceItemModel.from_dto(item, dto.id, item_line)
                for item_line, item in enumerate(dto.items, start=1)
            ],
        )


class StockEntryInvoiceItemModel(Base):
    """One received line of an invoice."""

    __tablename__ = "stock_entry_invoice_items"

    __table_args__ = (
        Index("idx_invoice_item_invoice", "invoice_id"),
        Index("idx_invoice_item_order_item", "order_item_id"),
    )

    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("stock_entry_invoices.id"), nullable=False,
    )
    line_number: Mapped[int] = mapped_column(nullable=False)
    order_item_id: Mapped[UUID]
    product_id: Mapped[UUID]
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False)
    original_unit_cost: Mapped[Decimal] = mapped_column(nullable=False)
    adjusted_unit_cost: Mapped[Decimal] = mapped_column(nullable=False)

    invoice: Mapped["StockEntryInvoiceModel"] = relationship(
        "StockEntryInvoiceModel", back_populates="items",
    )

    def to_dto(self):
        from stock_modules.entries.models import StockEntryInvoiceItem

        return StockEntryInvoiceItem(
            id=self.id,
            order_item_id=self.order_item_id,
            product_id=self.product_id,
            product_name=self.product_name,
            supplier=self.supplier,
            quantity=self.quantity,
            original_unit_cost=self.original_unit_cost,
            adjusted_unit_cost=self.adjusted_unit_cost,
        )

    @classmethod
    def from_dto(cls, dto, invoice_id: UUID, line_number: int) -> "StockEntryInvoiceItemModel":
        return cls(
            id=dto.id,
            invoice_id=invoice_id,
            line_number=line_number,
            order_item_id=dto.order_item_id,
            product_id=dto.product_id,
            product_name=dto.product_name,
            supplier=dto.supplier,
            quantity=dto.quantity,
            original_unit_cost=dto.original_unit_cost,
            adjusted_unit_cost=dto.adjusted_unit_cost,
        )


class StockItemModel(AggregateBase):
    """
    One physical unit in stock.

    Maps to the ``StockItem`` DTO in ``stock_engines.explosion``.
    """

    __tablename__ = "stock_items"

    __table_args__ = (
        Index("idx_stock_item_status", "status"),
        Index("idx_stock_item_product", "product_id"),
        Index("idx_stock_item_entry", "stock_entry_id"),
        Index("idx_stock_item_exit", "exit_id"),
    )

    __list_order__ = ("entry_date", "stock_entry_id", "invoice_number", "product_name", "id")

    stock_entry_id: Mapped[UUID]
    invoice_number: Mapped[str] = mapped_column(String(100), nullable=False)
    product_id: Mapped[UUID]
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(nullable=False)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="available")
    exit_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    exit_id: Mapped[UUID | None]

    def to_dto(self):
        from stock_engines.explosion import StockItem, StockItemStatus

        return StockItem(
            id=self.id,
            stock_entry_id=self.stock_entry_id,
            invoice_number=self.invoice_number,
            product_id=self.product_id,
            product_name=self.product_name,
            supplier=self.supplier,
            unit_cost=self.unit_cost,
            entry_date=self.entry_date,
            status=StockItemStatus(self.status),
            exit_date=self.exit_date,
            exit_id=self.exit_id,
        )

    @classmethod
    def from_dto(cls, dto) -> "StockItemModel":
        return cls(
            id=dto.id,
            stock_entry_id=dto.stock_entry_id,
            invoice_number=dto.invoice_number,
            product_id=dto.product_id,
            product_name=dto.product_name,
            supplier=dto.supplier,
            unit_cost=dto.unit_cost,
            entry_date=dto.entry_date,
            status=dto.status.value,
            exit_date=dto.exit_date,
            exit_id=dto.exit_id,
        )

    def __repr__(self) -> str:
        return f"<StockItemModel {self.product_name} [{self.status}]>"
