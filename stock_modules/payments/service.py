"""
Payments Service (``stock_modules.payments.service``).

Responsibility
--------------
List the installment schedules generated by stock entries, record payments
and summarize what is paid, pending and overdue.

Invariants enforced
-------------------
* An installment is paid at most once; its value and due date never change.
* Overdue means unpaid with a due date strictly before the reference date.

Failure modes
-------------
* ``InstallmentNotFoundError`` / ``StockEntryNotFoundError``
* ``InstallmentAlreadyPaidError``
* ``ValidationError`` -- unknown status filter or naive ``paid_at``.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from stock_engines.installments import summarize_installments
from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.exceptions import (
    InstallmentAlreadyPaidError,
    InstallmentNotFoundError,
    StockEntryNotFoundError,
    ValidationError,
)
from stock_kernel.logging_config import get_logger
from stock_kernel.store import Store
from stock_modules._service_helpers import require
from stock_modules.payments.models import (
    InstallmentStatus,
    InstallmentSummary,
    PaymentInstallment,
)

logger = get_logger("modules.payments.service")


def _schedule_key(installment: PaymentInstallment):
    return (installment.due_date, str(installment.stock_entry_id), installment.installment_number)


class PaymentService:
    """Installment book."""

    def __init__(self, store: Store, clock: Clock | None = None):
        self._store = store
        self._clock = clock or SystemClock()

    def list_installments(
        self,
        stock_entry_id: UUID | str | None = None,
        status: InstallmentStatus | str | None = None,
    ) -> list[PaymentInstallment]:
        """Installments by due date, optionally for one entry and/or one status."""
        wanted = None
        if status is not None:
            try:
                wanted = InstallmentStatus(status)
            except ValueError:
                raise ValidationError("status", f"must be pending or paid, got {status!r}") from None
        entry_id = None
        if stock_entry_id is not None:
            entry = require(self._store.stock_entries, stock_entry_id, StockEntryNotFoundError)
            entry_id = entry.id

        rows = self._store.installments.find(
            lambda inst: (entry_id is None or inst.stock_entry_id == entry_id)
            and (wanted is None or InstallmentStatus.of(inst) == wanted)
        )
        return sorted(rows, key=_schedule_key)

    def get_installment(self, installment_id: UUID) -> PaymentInstallment:
        return require(self._store.installments, installment_id, InstallmentNotFoundError)

    def mark_installment_paid(
        self,
        installment_id: UUID,
        *,
        actor: Actor,
        paid_at: datetime | None = None,
    ) -> PaymentInstallment:
        if paid_at is not None and paid_at.tzinfo is None:
            raise ValidationError("paid_at", "must be timezone-aware")
        logger.info("installment_payment_started", extra={
            "installment_id": str(installment_id),
        })

        with self._store.transaction():
            current = self.get_installment(installment_id)
            if current.is_paid:
                raise InstallmentAlreadyPaidError(current.id, current.value)
            installment = current.paid(paid_at or self._clock.now())
            self._store.installments.put(installment)

        logger.info("installment_paid", extra={
            "installment_id": str(installment_id),
            "stock_entry_id": str(installment.stock_entry_id),
            "installment_number": installment.installment_number,
            "value": str(installment.value),
            "actor_id": str(actor.id),
        })
        return installment

    def installment_summary(self, as_of: date | None = None) -> InstallmentSummary:
        """Paid, pending and overdue totals as of ``as_of`` (default: today)."""
        return summarize_installments(
            self._store.installments.list(),
            as_of or self._clock.today(),
        )
