"""
Payment Domain Models.

Installments are produced by the entry ledger when an entry is recorded;
this module only lists them and records payment.
"""

from __future__ import annotations

from enum import Enum

from stock_engines.installments import InstallmentSummary, PaymentInstallment

__all__ = [
    "InstallmentStatus",
    "InstallmentSummary",
    "PaymentInstallment",
]


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"

    @classmethod
    def of(cls, installment: PaymentInstallment) -> InstallmentStatus:
        return cls.PAID if installment.is_paid else cls.PENDING
