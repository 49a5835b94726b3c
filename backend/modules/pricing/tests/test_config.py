# backend/modules/pricing/tests/test_config.py

import logging
import pytest
from decimal import Decimal
from pydantic import ValidationError

from core.config import PricingSettings, get_pricing_settings
from core.logging_config import configure_logging
from modules.pricing.models.pricing_models import TaxBaseMode
from modules.pricing.schemas.pricing_schemas import LineItem, TaxConfig


class TestPricingSettings:
    def test_documented_defaults(self):
        settings = PricingSettings()

        assert settings.DEFAULT_CGST_RATE == Decimal("2.5")
        assert settings.DEFAULT_SGST_RATE == Decimal("2.5")
        assert settings.DEFAULT_TAX_BASE_MODE == "onDiscountedSubtotal"
        assert settings.DEFAULT_CATEGORY == "Coffee"
        assert settings.DEFAULT_PREP_TIME_MINUTES == 5
        assert settings.KITCHEN_BATCH_SIZE == 3

    def test_settings_are_cached(self):
        assert get_pricing_settings() is get_pricing_settings()

    def test_env_override_reaches_tax_defaults(self, monkeypatch):
        monkeypatch.setenv("PRICING_DEFAULT_CGST_RATE", "6")
        monkeypatch.setenv("PRICING_DEFAULT_TAX_BASE_MODE", "onSubtotal")
        get_pricing_settings.cache_clear()

        config = TaxConfig()

        assert config.cgst_rate == Decimal("6")
        assert config.sgst_rate == Decimal("2.5")
        assert config.tax_base_mode == TaxBaseMode.ON_SUBTOTAL

    def test_env_override_reaches_catalog_defaults(self, monkeypatch):
        monkeypatch.setenv("PRICING_DEFAULT_CATEGORY", "Tea")
        monkeypatch.setenv("PRICING_DEFAULT_PREP_TIME_MINUTES", "7")
        get_pricing_settings.cache_clear()

        item = LineItem(item_id="x", unit_price=Decimal("10"), quantity=1)

        assert item.category == "Tea"
        assert item.prep_time == 7

    @pytest.mark.parametrize(
        "name,value",
        [
            ("PRICING_DEFAULT_TAX_BASE_MODE", "onTotal"),
            ("PRICING_DEFAULT_CGST_RATE", "-1"),
            ("PRICING_KITCHEN_BATCH_SIZE", "0"),
        ],
    )
    def test_invalid_env_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ValidationError):
            PricingSettings()

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("PRICING_LOG_LEVEL", "debug")

        assert PricingSettings().log_level == "DEBUG"


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("PRICING_LOG_LEVEL", "warning")
    get_pricing_settings.cache_clear()

    configure_logging()
    configure_logging("DEBUG")

    assert calls[0]["level"] == "WARNING"
    assert calls[1]["level"] == "DEBUG"
    assert "%(name)s" in calls[0]["format"]
