# backend/modules/pricing/services/tax_service.py

from typing import Optional
from decimal import Decimal
from dataclasses import dataclass

from core.config import PricingSettings
from ..models.pricing_models import TaxBaseMode
from ..schemas.pricing_schemas import TaxConfig
from ..utils.money import percent_of


@dataclass(frozen=True)
class TaxBreakdown:
    base: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal

    @property
    def tax_amount(self) -> Decimal:
        return self.cgst_amount + self.sgst_amount


class TaxCalculator:
    """Two-component (CGST + SGST) tax on a configurable base"""

    def __init__(self, settings: Optional[PricingSettings] = None):
        self.settings = settings

    def calculate(
        self,
        subtotal: Decimal,
        discounted_subtotal: Decimal,
        tax_config: Optional[TaxConfig] = None,
    ) -> TaxBreakdown:
        config = tax_config or TaxConfig.from_settings(self.settings)

        if config.tax_base_mode == TaxBaseMode.ON_SUBTOTAL:
            base = subtotal
        else:
            base = discounted_subtotal

        return TaxBreakdown(
            base=base,
            cgst_amount=percent_of(base, config.cgst_rate),
            sgst_amount=percent_of(base, config.sgst_rate),
        )
