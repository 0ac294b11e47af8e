"""Tests for money helpers, calendar arithmetic, the clock and actors."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import DeterministicClock, SystemClock
from stock_kernel.domain.values import add_months, floor_money, round_money, to_decimal
from stock_kernel.exceptions import PermissionDeniedError


class TestToDecimal:

    @pytest.mark.parametrize("value, expected", [
        ("100.10", Decimal("100.10")),
        (5, Decimal("5")),
        (0.1, Decimal("0.1")),
        (Decimal("3.5"), Decimal("3.5")),
    ])
    def test_converts(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True, None])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)


class TestRounding:

    def test_round_half_up(self):
        assert round_money(Decimal("1.005")) == Decimal("1.01")
        assert round_money(Decimal("1.004")) == Decimal("1.00")

    def test_floor(self):
        assert floor_money(Decimal("33.339")) == Decimal("33.33")
        assert floor_money(Decimal("100") / 3) == Decimal("33.33")

    def test_decimal_places(self):
        assert round_money(Decimal("1.2345"), 3) == Decimal("1.235")
        assert floor_money(Decimal("7.9"), 0) == Decimal("7")


class TestAddMonths:

    @pytest.mark.parametrize("start, months, expected", [
        (date(2024, 1, 15), 1, date(2024, 2, 15)),
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2023, 1, 31), 1, date(2023, 2, 28)),
        (date(2024, 1, 31), 2, date(2024, 3, 31)),
        (date(2024, 11, 30), 3, date(2025, 2, 28)),
        (date(2024, 12, 5), 0, date(2024, 12, 5)),
    ])
    def test_add_months(self, start, months, expected):
        assert add_months(start, months) == expected


class TestClock:

    def test_deterministic_clock(self):
        clock = DeterministicClock(datetime(2024, 3, 1, 23, 59, 59, tzinfo=timezone.utc))
        first = clock.now()
        assert clock.now() == first
        assert clock.tick() == datetime(2024, 3, 2, tzinfo=timezone.utc)
        assert clock.today() == date(2024, 3, 2)

    def test_advance_returns_new_time(self, deterministic_clock):
        later = deterministic_clock.advance(90)
        assert later == datetime(2024, 3, 1, 9, 1, 30, tzinfo=timezone.utc)
        assert deterministic_clock.now() == later

    def test_start_is_normalized_to_utc(self):
        brasilia = timezone(timedelta(hours=-3))
        clock = DeterministicClock(datetime(2024, 3, 1, 22, 0, tzinfo=brasilia))
        assert clock.now().tzinfo == timezone.utc
        assert clock.today() == date(2024, 3, 2)

    def test_naive_start_refused(self):
        with pytest.raises(ValueError):
            DeterministicClock(datetime(2024, 3, 1))

    def test_never_moves_backwards(self, deterministic_clock):
        with pytest.raises(ValueError):
            deterministic_clock.advance(-1)

    def test_system_clock_is_aware(self):
        assert SystemClock().now().tzinfo is not None


class TestActor:

    def test_admin_passes(self):
        Actor(id=uuid4(), name="Admin", is_admin=True).require_admin("approve_order")

    def test_non_admin_denied(self):
        actor = Actor(id=uuid4(), name="User")
        with pytest.raises(PermissionDeniedError) as exc_info:
            actor.require_admin("confirm_stock_exit")
        assert exc_info.value.operation == "confirm_stock_exit"
        assert exc_info.value.actor_id == str(actor.id)
