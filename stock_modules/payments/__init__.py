"""
Payments Module (``stock_modules.payments``).

Responsibility
--------------
The installment book generated by stock entries: listing, payment and
paid/pending/overdue summaries.

Architecture position
---------------------
**Modules layer** -- ORM persistence and the ``PaymentService`` facade.
Schedule maths lives in ``stock_engines.installments``.
"""

from stock_modules.payments.models import (
    InstallmentStatus,
    InstallmentSummary,
    PaymentInstallment,
)

__all__ = [
    "InstallmentStatus",
    "InstallmentSummary",
    "PaymentInstallment",
]
