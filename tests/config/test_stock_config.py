"""Tests for loading ledger configuration from YAML."""

import pytest

from stock_config import (
    DEFAULT_CONFIG,
    AdminEditPolicy,
    DoubleConfirmPolicy,
    StockConfig,
    get_active_config,
)
from stock_config.loader import compute_checksum
from stock_kernel.exceptions import ConfigurationError


def _write(tmp_path, text, name="stock.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:

    def test_no_path_returns_defaults(self):
        config = get_active_config()
        assert config is DEFAULT_CONFIG
        assert config.max_order_items == 50
        assert config.max_installments == 12
        assert config.payment_methods == ("credit_card", "boleto", "pix")
        assert config.admin_edit_policy == AdminEditPolicy.PRESERVE
        assert config.double_confirm_policy == DoubleConfirmPolicy.ERROR

    def test_with_defaults(self):
        assert StockConfig.with_defaults() == DEFAULT_CONFIG

    @pytest.mark.parametrize("overrides", [
        {"max_order_items": 0},
        {"max_installments": 0},
        {"payment_methods": ()},
        {"money_decimal_places": 10},
    ])
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ConfigurationError):
            StockConfig(**overrides)


class TestYamlLoading:

    def test_full_block(self, tmp_path):
        path = _write(tmp_path, """
stock:
  max_order_items: 20
  max_installments: 24
  payment_methods: [pix, boleto]
  currency: USD
  admin_edit_policy: reset
  double_confirm_policy: ignore
""")
        config = get_active_config(path)

        assert config.max_order_items == 20
        assert config.max_installments == 24
        assert config.payment_methods == ("pix", "boleto")
        assert config.currency == "USD"
        assert config.admin_edit_policy == AdminEditPolicy.RESET
        assert config.double_confirm_policy == DoubleConfirmPolicy.IGNORE

    def test_partial_block_keeps_defaults(self, tmp_path):
        config = get_active_config(_write(tmp_path, "stock:\n  max_installments: 6\n"))
        assert config.max_installments == 6
        assert config.max_order_items == 50

    def test_empty_file(self, tmp_path):
        assert get_active_config(_write(tmp_path, "")) == DEFAULT_CONFIG

    def test_unknown_key(self, tmp_path):
        path = _write(tmp_path, "stock:\n  max_itemz: 3\n")
        with pytest.raises(ConfigurationError) as exc_info:
            get_active_config(path)
        assert exc_info.value.key == "max_itemz"

    @pytest.mark.parametrize("line", [
        "max_order_items: many",
        "max_order_items: true",
        "payment_methods: pix",
        "admin_edit_policy: sometimes",
        "currency: 12",
    ])
    def test_bad_types(self, tmp_path, line):
        with pytest.raises(ConfigurationError):
            get_active_config(_write(tmp_path, f"stock:\n  {line}\n"))

    def test_block_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigurationError):
            get_active_config(_write(tmp_path, "stock: [1, 2]\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_load_is_logged_with_checksum(self, tmp_path, captured_logs):
        path = _write(tmp_path, "stock:\n  max_installments: 3\n")
        get_active_config(path)

        loaded = [r for r in captured_logs() if r["message"] == "stock_config_loaded"]
        assert loaded[-1]["checksum"] == compute_checksum(path)
        assert loaded[-1]["max_installments"] == 3
