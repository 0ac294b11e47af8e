"""
Values -- monetary and calendar helpers.

Responsibility:
    Centralizes Decimal conversion, rounding, and month arithmetic so every
    engine and service computes money and due dates the same way.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - No floats: ``to_decimal`` goes through ``str`` so binary float noise
      never reaches a monetary amount.
    - ``round_money`` and ``floor_money`` are the only rounding functions
      used for monetary values.

Failure modes:
    - ValueError on values that cannot be parsed as a finite Decimal.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

MONEY_DECIMAL_PLACES = 2


def to_decimal(value: Any) -> Decimal:
    """
    Convert ``value`` to Decimal without passing through binary float.

    Raises:
        ValueError: If value is not a finite number.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Not a monetary amount: {value!r}")
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Not a monetary amount: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    return result


def _quantum(decimal_places: int) -> Decimal:
    return Decimal(1).scaleb(-decimal_places)


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
) -> Decimal:
    """Round half-up to ``decimal_places``."""
    return value.quantize(_quantum(decimal_places), rounding=ROUND_HALF_UP)


def floor_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
) -> Decimal:
    """Round toward negative infinity at ``decimal_places``."""
    return value.quantize(_quantum(decimal_places), rounding=ROUND_FLOOR)


def add_months(start: date, months: int) -> date:
    """
    Shift ``start`` by whole calendar months.

    The day of month is preserved when the target month has it; otherwise it
    is clamped to that month's last day (Jan 31 + 1 month -> Feb 28/29).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))
