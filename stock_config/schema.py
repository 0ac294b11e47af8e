"""
Stock Configuration Schema.

Defines the structure and defaults for ledger settings.  Actual values may
be loaded from a YAML file at startup (see ``stock_config.loader``).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Self

from stock_kernel.exceptions import ConfigurationError
from stock_kernel.logging_config import get_logger

logger = get_logger("config.schema")


class DoubleConfirmPolicy(str, Enum):
    """What confirming an already-confirmed exit does."""
    ERROR = "error"
    IGNORE = "ignore"


class AdminEditPolicy(str, Enum):
    """Whether admin order edits keep approvals of unchanged items."""
    PRESERVE = "preserve"
    RESET = "reset"


@dataclass(frozen=True)
class StockConfig:
    """
    Configuration schema for the ledgers.

    Override at instantiation with site-specific values:

        config = StockConfig(max_installments=24, currency="USD")
    """

    # Orders
    max_order_items: int = 50
    admin_edit_policy: AdminEditPolicy = AdminEditPolicy.PRESERVE

    # Entries and payments
    max_installments: int = 12
    payment_methods: tuple[str, ...] = ("credit_card", "boleto", "pix")
    money_decimal_places: int = 2
    currency: str = "BRL"

    # Exits
    double_confirm_policy: DoubleConfirmPolicy = DoubleConfirmPolicy.ERROR

    def __post_init__(self):
        if self.max_order_items < 1:
            raise ConfigurationError("max_order_items", "must be at least 1")
        if self.max_installments < 1:
            raise ConfigurationError("max_installments", "must be at least 1")
        if not self.payment_methods:
            raise ConfigurationError("payment_methods", "must not be empty")
        if not 0 <= self.money_decimal_places <= 9:
            raise ConfigurationError("money_decimal_places", "must be between 0 and 9")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the stock defaults."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from a mapping (e.g. the ``stock:`` block of a YAML file)."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigurationError(unknown[0], "unknown configuration key")

        values: dict[str, Any] = {}
        for key, raw in data.items():
            values[key] = _coerce(key, known[key].type, raw)

        logger.info(
            "stock_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**values)


def _coerce(key: str, annotation: Any, raw: Any) -> Any:
    annotation = str(annotation)
    try:
        if annotation == "int":
            if isinstance(raw, bool) or not isinstance(raw, int):
                raise TypeError
            return raw
        if annotation == "str":
            if not isinstance(raw, str):
                raise TypeError
            return raw
        if annotation == "tuple[str, ...]":
            if isinstance(raw, str) or not all(isinstance(v, str) for v in raw):
                raise TypeError
            return tuple(raw)
        if annotation == "AdminEditPolicy":
            return AdminEditPolicy(raw)
        if annotation == "DoubleConfirmPolicy":
            return DoubleConfirmPolicy(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(key, f"invalid value {raw!r}") from None
    raise ConfigurationError(key, f"unsupported type {annotation}")


DEFAULT_CONFIG = StockConfig()

__all__ = [
    "AdminEditPolicy",
    "DoubleConfirmPolicy",
    "StockConfig",
    "DEFAULT_CONFIG",
]
