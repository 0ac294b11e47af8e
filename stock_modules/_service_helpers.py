"""
Shared helpers for module services.

Used by stock_modules/*/service.py for id lookups and input validation.

Architecture: Modules layer. Imports only from stock_kernel.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, TypeVar
from uuid import UUID

from stock_kernel.domain.values import to_decimal
from stock_kernel.exceptions import NotFoundError, ValidationError
from stock_kernel.store import Repository

T = TypeVar("T")


def require(
    repository: Repository[T],
    entity_id: UUID | str,
    error_cls: type[NotFoundError],
) -> T:
    """Load an entity by id (UUID or its string form) or raise ``error_cls``."""
    entity_id = as_uuid("id", entity_id)
    entity = repository.get(entity_id)
    if entity is None:
        raise error_cls(entity_id)
    return entity


def require_text(field: str, value: Any) -> str:
    """Non-blank string, stripped."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "is required")
    return value.strip()


def require_quantity(field: str, value: Any, minimum: int = 1) -> int:
    """Whole number of units, at least ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"must be a whole number, got {value!r}")
    if value < minimum:
        raise ValidationError(field, f"must be at least {minimum}, got {value}")
    return value


def require_amount(field: str, value: Any) -> Decimal:
    """Monetary amount, zero or more."""
    if value is None:
        raise ValidationError(field, "is required")
    try:
        amount = to_decimal(value)
    except ValueError:
        raise ValidationError(field, f"must be a number, got {value!r}") from None
    if amount < 0:
        raise ValidationError(field, f"cannot be negative, got {amount}")
    return amount


def as_uuid(field: str, value: Any) -> UUID:
    """Accept a UUID or its string form."""
    if isinstance(value, UUID):
        return value
    if value is None:
        raise ValidationError(field, "is required")
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(field, f"is not a valid id: {value!r}") from None


def require_date(field: str, value: Any) -> date:
    """A calendar date, or its ISO-8601 string form."""
    if value is None:
        raise ValidationError(field, "is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ValidationError(field, f"is not a valid date: {value!r}")
