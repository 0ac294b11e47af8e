"""
Module: stock_engines.installments
Responsibility:
    Split a stock entry's total value into payment installments and
    summarize installment books (paid, pending, overdue).

Architecture position:
    Engines -- pure calculation layer, zero I/O.  "Today" is always a
    parameter.

Invariants enforced:
    - Installments 1..n-1 get ``floor(total / n)`` at money precision; the
      last one absorbs the remainder, so the values always sum to exactly
      the total.
    - Installment i is due ``i - 1`` calendar months after the first due
      date, computed from the first due date (not chained), so a day-31
      schedule returns to day 31 in long months.  Days missing from a
      month clamp to its last day.
    - All installments start unpaid.

Failure modes:
    - ValueError for a count below 1 or a negative total.

Usage:
    rows = compute_installments(
        stock_entry_id=entry_id,
        total_value=Decimal("1000"),
        count=3,
        first_due_date=date(2024, 1, 31),
    )
    # values 333.33, 333.33, 333.34 due Jan 31, Feb 29, Mar 31
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from stock_engines.tracer import traced_engine
from stock_kernel.domain.values import MONEY_DECIMAL_PLACES, add_months, floor_money
from stock_kernel.logging_config import get_logger

logger = get_logger("engines.installments")


@dataclass(frozen=True)
class PaymentInstallment:
    """One scheduled payment of a stock entry."""

    id: UUID
    stock_entry_id: UUID
    installment_number: int
    value: Decimal
    due_date: date
    paid_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.paid_at is not None

    def is_overdue(self, as_of: date) -> bool:
        return not self.is_paid and self.due_date < as_of

    def paid(self, paid_at: datetime) -> PaymentInstallment:
        return replace(self, paid_at=paid_at)


@traced_engine(
    "installments",
    "1.0",
    fingerprint_fields=("stock_entry_id", "total_value", "count", "first_due_date"),
)
def compute_installments(
    *,
    stock_entry_id: UUID,
    total_value: Decimal,
    count: int,
    first_due_date: date,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    id_factory: Callable[[], UUID] = uuid4,
) -> tuple[PaymentInstallment, ...]:
    """Installment schedule whose values sum exactly to ``total_value``."""
    if count < 1:
        raise ValueError(f"Installment count must be at least 1, got {count}")
    if total_value < 0:
        raise ValueError(f"Installment total cannot be negative: {total_value}")

    base = floor_money(total_value / count, decimal_places)
    last = total_value - base * (count - 1)

    return tuple(
        PaymentInstallment(
            id=id_factory(),
            stock_entry_id=stock_entry_id,
            installment_number=number,
            value=last if number == count else base,
            due_date=add_months(first_due_date, number - 1),
        )
        for number in range(1, count + 1)
    )


@dataclass(frozen=True)
class InstallmentSummary:
    """Totals over a set of installments as of one date."""

    count: int
    total_pending: Decimal
    total_paid: Decimal
    overdue_count: int
    overdue_value: Decimal


def summarize_installments(
    installments: Iterable[PaymentInstallment],
    as_of: date,
) -> InstallmentSummary:
    count = 0
    pending = Decimal("0")
    paid = Decimal("0")
    overdue_count = 0
    overdue_value = Decimal("0")
    for inst in installments:
        count += 1
        if inst.is_paid:
            paid += inst.value
            continue
        pending += inst.value
        if inst.is_overdue(as_of):
            overdue_count += 1
            overdue_value += inst.value
    return InstallmentSummary(
        count=count,
        total_pending=pending,
        total_paid=paid,
        overdue_count=overdue_count,
        overdue_value=overdue_value,
    )
