"""Tests for the installment book: listing, payment and summaries."""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from stock_kernel.exceptions import (
    InstallmentAlreadyPaidError,
    InstallmentNotFoundError,
    StockEntryNotFoundError,
    ValidationError,
)
from stock_modules.payments.models import InstallmentStatus


@pytest.fixture
def two_entries(make_product, make_approved_order, make_entry):
    """Entry A: 300 in 3 installments from 2024-02-10.  Entry B: 50 in 1 on 2024-04-01."""
    product = make_product(unit_cost="50")
    order = make_approved_order((product, 7))
    item = order.items[0]
    first = make_entry(order, (item, 6, "50"), installments=3, first_due_date=date(2024, 2, 10))
    second = make_entry(
        order, (item, 1, "50"), invoice_number="NF-2", first_due_date=date(2024, 4, 1),
    )
    return first, second


class TestListInstallments:

    def test_ordered_by_due_date(self, payments, two_entries):
        first, second = two_entries

        schedule = payments.list_installments()

        assert [(i.stock_entry_id, i.due_date) for i in schedule] == [
            (first.id, date(2024, 2, 10)),
            (first.id, date(2024, 3, 10)),
            (second.id, date(2024, 4, 1)),
            (first.id, date(2024, 4, 10)),
        ]
        assert sum(i.value for i in schedule) == Decimal("350")

    def test_filter_by_entry(self, payments, two_entries):
        first, _ = two_entries
        schedule = payments.list_installments(stock_entry_id=first.id)
        assert [i.installment_number for i in schedule] == [1, 2, 3]
        assert {i.value for i in schedule} == {Decimal("100")}

    def test_filter_by_status(self, payments, two_entries, user):
        first, _ = two_entries
        target = payments.list_installments(stock_entry_id=first.id)[0]
        payments.mark_installment_paid(target.id, actor=user)

        paid = payments.list_installments(status="paid")
        pending = payments.list_installments(status=InstallmentStatus.PENDING)

        assert [i.id for i in paid] == [target.id]
        assert len(pending) == 3

    def test_bad_status(self, payments):
        with pytest.raises(ValidationError):
            payments.list_installments(status="overdue")

    def test_unknown_entry(self, payments):
        with pytest.raises(StockEntryNotFoundError):
            payments.list_installments(stock_entry_id=uuid4())


class TestMarkPaid:

    def test_mark_paid_uses_clock(self, payments, two_entries, user, deterministic_clock):
        target = payments.list_installments()[0]

        paid = payments.mark_installment_paid(target.id, actor=user)

        assert paid.is_paid
        assert paid.paid_at == deterministic_clock.now()
        assert payments.get_installment(target.id).paid_at == deterministic_clock.now()

    def test_mark_paid_at_given_time(self, payments, two_entries, user):
        target = payments.list_installments()[0]
        when = datetime(2024, 2, 9, 15, 30, tzinfo=timezone.utc)

        paid = payments.mark_installment_paid(target.id, actor=user, paid_at=when)

        assert paid.paid_at == when

    def test_naive_paid_at_rejected(self, payments, two_entries, user):
        target = payments.list_installments()[0]
        with pytest.raises(ValidationError):
            payments.mark_installment_paid(target.id, actor=user, paid_at=datetime(2024, 2, 9))

    def test_already_paid(self, payments, two_entries, user):
        target = payments.list_installments()[0]
        payments.mark_installment_paid(target.id, actor=user)

        with pytest.raises(InstallmentAlreadyPaidError) as exc_info:
            payments.mark_installment_paid(target.id, actor=user)
        assert exc_info.value.value == target.value

    def test_unknown_installment(self, payments, user):
        with pytest.raises(InstallmentNotFoundError):
            payments.mark_installment_paid(uuid4(), actor=user)


class TestSummary:

    def test_summary_as_of_today(self, payments, two_entries, user):
        # Clock is at 2024-03-01: only the 2024-02-10 installment is overdue.
        summary = payments.installment_summary()

        assert summary.count == 4
        assert summary.total_paid == Decimal("0")
        assert summary.total_pending == Decimal("350")
        assert summary.overdue_count == 1
        assert summary.overdue_value == Decimal("100")

    def test_paid_installments_are_not_overdue(self, payments, two_entries, user):
        payments.mark_installment_paid(payments.list_installments()[0].id, actor=user)

        summary = payments.installment_summary(as_of=date(2024, 4, 5))

        assert summary.total_paid == Decimal("100")
        assert summary.total_pending == Decimal("250")
        assert summary.overdue_count == 2
        assert summary.overdue_value == Decimal("150")

    def test_empty_book(self, payments):
        summary = payments.installment_summary()
        assert summary.count == 0
        assert summary.total_pending == Decimal("0")
