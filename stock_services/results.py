"""
Operation result envelope returned by the gateway.

``error`` is the machine-readable code of the typed exception
(``StockKernelError.code``); ``message`` is safe to show the end user
verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from stock_kernel.exceptions import StockKernelError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Stable result type for callers of the stock gateway."""

    success: bool
    data: T | None = None
    error: str | None = None
    message: str | None = None

    @classmethod
    def ok(cls, data: T | None = None, message: str | None = None) -> OperationResult[T]:
        return cls(success=True, data=data, message=message)

    @classmethod
    def failed(cls, exc: StockKernelError) -> OperationResult[Any]:
        """Map a typed kernel error to a failed result."""
        return cls(success=False, error=exc.code, message=str(exc))

    @property
    def is_failure(self) -> bool:
        return not self.success
