# backend/modules/pricing/tests/test_tax_service.py

import pytest
from decimal import Decimal

from modules.pricing.models.pricing_models import TaxBaseMode
from modules.pricing.services.tax_service import TaxCalculator


@pytest.fixture
def calculator():
    return TaxCalculator()


class TestTaxCalculator:
    """CGST + SGST on the configured base"""

    def test_tax_on_subtotal(self, calculator, tax_config_factory):
        config = tax_config_factory(tax_base_mode=TaxBaseMode.ON_SUBTOTAL)

        tax = calculator.calculate(Decimal("100"), Decimal("80"), config)

        assert tax.base == Decimal("100")
        assert tax.cgst_amount == Decimal("2.5")
        assert tax.sgst_amount == Decimal("2.5")
        assert tax.tax_amount == Decimal("5")

    def test_tax_on_discounted_subtotal(self, calculator, tax_config_factory):
        config = tax_config_factory(tax_base_mode=TaxBaseMode.ON_DISCOUNTED_SUBTOTAL)

        tax = calculator.calculate(Decimal("100"), Decimal("80"), config)

        assert tax.base == Decimal("80")
        assert tax.tax_amount == Decimal("4")

    def test_missing_config_uses_defaults(self, calculator):
        tax = calculator.calculate(Decimal("100"), Decimal("80"))

        assert tax.base == Decimal("80")
        assert tax.cgst_amount == Decimal("2")
        assert tax.sgst_amount == Decimal("2")

    def test_asymmetric_rates(self, calculator, tax_config_factory):
        config = tax_config_factory(cgst_rate=Decimal("9"), sgst_rate=Decimal("0"))

        tax = calculator.calculate(Decimal("50"), Decimal("50"), config)

        assert tax.cgst_amount == Decimal("4.5")
        assert tax.sgst_amount == Decimal("0")

    def test_no_rounding_inside_calculation(self, calculator, tax_config_factory):
        """Test sub-cent tax amounts are kept until presentation"""
        config = tax_config_factory()

        tax = calculator.calculate(Decimal("33.33"), Decimal("33.33"), config)

        assert tax.cgst_amount == Decimal("0.83325")
        assert tax.tax_amount == Decimal("1.6665")
