"""
Module: stock_kernel.domain.clock
Responsibility: The single source of "now" for the ledger services.
    Services stamp ``created_at``/``updated_at``/``confirmed_at``/``paid_at``
    from an injected Clock and take "today" from it when deciding which
    installments are overdue.  Engines never read a clock; dates reach them
    as arguments.
Architecture position: Kernel > Domain.  ``SystemClock`` is the only code
    in the kernel that reads wall time.

Invariants enforced:
    - ``now()`` is always timezone-aware and in UTC.
    - ``today()`` is the UTC calendar date of ``now()``.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Injected into every service constructor."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Hand-driven clock for tests.

    Time stands still until ``advance()`` or ``tick()`` moves it, so two
    records written in one step share a timestamp and builders can ``tick()``
    to give each created record a distinct, ordered ``created_at``.
    """

    EPOCH = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __init__(self, start: datetime | None = None):
        start = start or self.EPOCH
        if start.tzinfo is None:
            raise ValueError(f"DeterministicClock needs an aware start, got {start!r}")
        self._now = start.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        """Move forward by ``seconds`` and return the new time."""
        if seconds < 0:
            raise ValueError("DeterministicClock never moves backwards")
        self._now += timedelta(seconds=seconds)
        return self._now

    def tick(self) -> datetime:
        return self.advance(1)
