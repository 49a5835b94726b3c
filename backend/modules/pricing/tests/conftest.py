# backend/modules/pricing/tests/conftest.py

import pytest
from datetime import datetime
from decimal import Decimal

from core.config import get_pricing_settings
from modules.pricing.services.pricing_engine import PricingEngine
from modules.pricing.tests.factories import LineItemFactory, OfferFactory, TaxConfigFactory


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings around each test so env overrides do not leak"""
    get_pricing_settings.cache_clear()
    yield
    get_pricing_settings.cache_clear()


@pytest.fixture
def engine():
    return PricingEngine()


@pytest.fixture
def line_item_factory():
    return LineItemFactory


@pytest.fixture
def offer_factory():
    return OfferFactory


@pytest.fixture
def tax_config_factory():
    return TaxConfigFactory


@pytest.fixture
def tea_and_coffee_cart():
    """Tea 100 + Coffee 200, subtotal 300"""
    return [
        LineItemFactory(item_id="tea-1", category="Tea", unit_price=Decimal("100")),
        LineItemFactory(
            item_id="coffee-1", category="Coffee", unit_price=Decimal("200")
        ),
    ]


@pytest.fixture
def monday_noon():
    # 2026-10-19 is a Monday
    return datetime(2026, 10, 19, 12, 0, 0)
