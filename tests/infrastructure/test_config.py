"""Tests for environment-driven settings."""

from decimal import Decimal
from pathlib import Path

import pytest

from cartkeeper.domain.model.value_objects import Money
from cartkeeper.infrastructure.config import ConfigurationError, Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.tax_rate == Decimal("0.10")
        assert settings.order_prefix == "WM"
        assert settings.log_level == "INFO"
        assert settings.log_json is False

    def test_overrides(self, tmp_path):
        settings = Settings.from_env({
            "CARTKEEPER_DATA_DIR": str(tmp_path),
            "CARTKEEPER_TAX_RATE": "0.2",
            "CARTKEEPER_FREE_SHIPPING_THRESHOLD": "50",
            "CARTKEEPER_FLAT_SHIPPING": "4.99",
            "CARTKEEPER_ORDER_PREFIX": "SHOP",
            "CARTKEEPER_LOG_LEVEL": "debug",
            "CARTKEEPER_LOG_JSON": "yes",
        })
        assert settings.data_dir == Path(tmp_path)
        assert settings.tax_rate == Decimal("0.2")
        assert settings.order_prefix == "SHOP"
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True

    def test_pricing_policy(self):
        policy = Settings.from_env({"CARTKEEPER_FLAT_SHIPPING": "4.99"}).pricing_policy()
        assert policy.flat_shipping == Money.of("4.99")
        assert policy.free_shipping_threshold == Money.of("100")

    def test_invalid_decimal_rejected(self):
        with pytest.raises(ConfigurationError, match="CARTKEEPER_TAX_RATE"):
            Settings.from_env({"CARTKEEPER_TAX_RATE": "ten percent"})

    def test_negative_value_rejected(self):
        with pytest.raises(ConfigurationError, match="cannot be negative"):
            Settings.from_env({"CARTKEEPER_FLAT_SHIPPING": "-1"})

    def test_blank_value_falls_back_to_default(self):
        assert Settings.from_env({"CARTKEEPER_TAX_RATE": "  "}).tax_rate == Decimal("0.10")
