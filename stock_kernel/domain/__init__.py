"""Pure domain primitives shared by every layer: clock, money helpers, actors."""

from stock_kernel.domain.actor import Actor
from stock_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from stock_kernel.domain.values import (
    MONEY_DECIMAL_PLACES,
    add_months,
    floor_money,
    round_money,
    to_decimal,
)

__all__ = [
    "Actor",
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "MONEY_DECIMAL_PLACES",
    "add_months",
    "floor_money",
    "round_money",
    "to_decimal",
]
