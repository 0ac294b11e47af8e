"""
SQLAlchemy ORM persistence model for the Payments module.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import AggregateBase


class PaymentInstallmentModel(AggregateBase):
    """
    One scheduled payment of a stock entry.

    Maps to the ``PaymentInstallment`` DTO in ``stock_engines.installments``.
    """

    __tablename__ = "payment_installments"

    __table_args__ = (
        UniqueConstraint("stock_entry_id", "installment_number", name="uq_installment_number"),
        Index("idx_installment_due_date", "due_date"),
    )

    __list_order__ = ("due_date", "stock_entry_id", "installment_number")

    stock_entry_id: Mapped[UUID]
    installment_number: Mapped[int] = mapped_column(nullable=False)
    value: Mapped[Decimal] = mapped_column(nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_at: Mapped[datetime | None]

    def to_dto(self):
        from stock_engines.installments import PaymentInstallment

        return PaymentInstallment(
            id=self.id,
            stock_entry_id=self.stock_entry_id,
            installment_number=self.installment_number,
            value=self.value,
            due_date=self.due_date,
            paid_at=self.paid_at,
        )

    @classmethod
    def from_dto(cls, dto) -> "PaymentInstallmentModel":
        return cls(
            id=dto.id,
            stock_entry_id=dto.stock_entry_id,
            installment_number=dto.installment_number,
            value=dto.value,
            due_date=dto.due_date,
            paid_at=dto.paid_at,
        )

    def __repr__(self) -> str:
        return f"<PaymentInstallmentModel #{self.installment_number} {self.value} due {self.due_date}>"
