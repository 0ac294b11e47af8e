"""
Configuration Loader (``stock_config.loader``).

Responsibility
--------------
Read a YAML configuration file and turn its ``stock:`` block into a
``StockConfig``.  Runtime callers go through
``stock_config.get_active_config()`` rather than calling this directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``stock`` block, unknown keys, wrong types
  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

import yaml

from stock_config.schema import StockConfig
from stock_kernel.exceptions import ConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Parse a YAML file into a dict (empty file -> empty dict)."""
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def parse_config(data: dict[str, Any]) -> StockConfig:
    """Build a StockConfig from a parsed document with a ``stock:`` block."""
    block = data.get("stock", {})
    if block is None:
        block = {}
    if not isinstance(block, dict):
        raise ConfigurationError("stock", "must be a mapping")
    return StockConfig.from_dict(block)


def compute_checksum(path: Path) -> str:
    """SHA-256 of the raw file, for change detection in logs."""
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()
