"""
Tests for the installment calculator.

Covers:
- Floor split with the remainder on the last installment
- Due dates one calendar month apart, clamped to month end
- Summary of paid, pending and overdue installments
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from stock_engines.installments import compute_installments, summarize_installments


def _schedule(total, count, first_due=date(2024, 1, 15), **kwargs):
    return compute_installments(
        stock_entry_id=uuid4(),
        total_value=Decimal(total),
        count=count,
        first_due_date=first_due,
        **kwargs,
    )


class TestComputeInstallments:

    def test_thousand_in_three(self):
        rows = _schedule("1000", 3)
        assert [r.value for r in rows] == [
            Decimal("333.33"), Decimal("333.33"), Decimal("333.34"),
        ]
        assert sum(r.value for r in rows) == Decimal("1000")

    def test_single_installment_is_total(self):
        rows = _schedule("1100", 1)
        assert len(rows) == 1
        assert rows[0].value == Decimal("1100")
        assert rows[0].due_date == date(2024, 1, 15)
        assert rows[0].installment_number == 1

    def test_numbers_are_one_based_and_unpaid(self):
        rows = _schedule("90", 3)
        assert [r.installment_number for r in rows] == [1, 2, 3]
        assert all(r.paid_at is None for r in rows)

    def test_due_dates_monthly(self):
        rows = _schedule("300", 3, first_due=date(2024, 11, 10))
        assert [r.due_date for r in rows] == [
            date(2024, 11, 10), date(2024, 12, 10), date(2025, 1, 10),
        ]

    def test_due_dates_clamped_to_month_end(self):
        rows = _schedule("400", 4, first_due=date(2024, 1, 31))
        assert [r.due_date for r in rows] == [
            date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30),
        ]

    def test_small_total_many_installments(self):
        rows = _schedule("0.05", 12)
        assert [r.value for r in rows[:-1]] == [Decimal("0.00")] * 11
        assert rows[-1].value == Decimal("0.05")

    def test_zero_total(self):
        rows = _schedule("0", 2)
        assert sum(r.value for r in rows) == Decimal("0")

    def test_decimal_places(self):
        rows = _schedule("10", 3, decimal_places=0)
        assert [r.value for r in rows] == [Decimal("3"), Decimal("3"), Decimal("4")]

    def test_count_below_one_rejected(self):
        with pytest.raises(ValueError):
            _schedule("100", 0)

    def test_negative_total_rejected(self):
        with pytest.raises(ValueError):
            _schedule("-1", 2)


class TestSummarizeInstallments:

    def test_paid_pending_overdue(self):
        rows = _schedule("300", 3, first_due=date(2024, 1, 10))
        paid = rows[0].paid(datetime(2024, 1, 9, tzinfo=timezone.utc))
        summary = summarize_installments([paid, rows[1], rows[2]], as_of=date(2024, 2, 15))

        assert summary.count == 3
        assert summary.total_paid == Decimal("100")
        assert summary.total_pending == Decimal("200")
        assert summary.overdue_count == 1
        assert summary.overdue_value == Decimal("100")

    def test_due_today_is_not_overdue(self):
        rows = _schedule("100", 1, first_due=date(2024, 1, 10))
        summary = summarize_installments(rows, as_of=date(2024, 1, 10))
        assert summary.overdue_count == 0

    def test_empty(self):
        summary = summarize_installments([], as_of=date(2024, 1, 1))
        assert summary.count == 0
        assert summary.total_pending == Decimal("0")
