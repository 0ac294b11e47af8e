"""
stock_config -- single public entrypoint for ledger configuration.

Responsibility:
    ``get_active_config()`` is the only way services obtain configuration.
    With no path it returns the defaults; with a path it loads the YAML
    file's ``stock:`` block on top of them.

Failure modes:
    - ``FileNotFoundError`` -- the given path does not exist.
    - ``ConfigurationError`` -- unknown keys or ill-typed values.

Every successful load emits a ``stock_config_loaded`` log record carrying
the file checksum so a running process can be tied to the file it read.
"""

from __future__ import annotations

from pathlib import Path

from stock_config.loader import compute_checksum, load_yaml_file, parse_config
from stock_config.schema import (
    DEFAULT_CONFIG,
    AdminEditPolicy,
    DoubleConfirmPolicy,
    StockConfig,
)
from stock_kernel.logging_config import get_logger

logger = get_logger("config")


def get_active_config(path: Path | str | None = None) -> StockConfig:
    """The ONLY public configuration entrypoint."""
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    config = parse_config(load_yaml_file(path))
    logger.info(
        "stock_config_loaded",
        extra={
            "path": str(path),
            "checksum": compute_checksum(path),
            "max_order_items": config.max_order_items,
            "max_installments": config.max_installments,
        },
    )
    return config


__all__ = [
    "AdminEditPolicy",
    "DEFAULT_CONFIG",
    "DoubleConfirmPolicy",
    "StockConfig",
    "get_active_config",
]
