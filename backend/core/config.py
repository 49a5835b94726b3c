"""
Pricing engine configuration.

Holds the documented fallbacks the engine uses whenever the billing-settings
collaborator or the catalog leaves a value unset. Every field can be
overridden through a ``PRICING_``-prefixed environment variable.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """Defaults for tax, catalog attributes and presentation rounding."""

    # Tax defaults (billing settings unavailable)
    DEFAULT_CGST_RATE: Decimal = Field(
        default=Decimal("2.5"), ge=0, le=100, description="CGST percentage"
    )
    DEFAULT_SGST_RATE: Decimal = Field(
        default=Decimal("2.5"), ge=0, le=100, description="SGST percentage"
    )
    DEFAULT_TAX_BASE_MODE: str = Field(
        default="onDiscountedSubtotal",
        description="Tax base when no billing settings exist",
    )

    # Catalog defaults
    DEFAULT_CATEGORY: str = "Coffee"
    DEFAULT_PREP_TIME_MINUTES: int = Field(default=5, ge=0)

    # Kitchen throughput: one extra minute per batch of this many units
    KITCHEN_BATCH_SIZE: int = Field(default=3, ge=1)

    # Presentation
    CURRENCY_DECIMAL_PLACES: int = Field(default=2, ge=0, le=6)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PRICING_", case_sensitive=False)

    @field_validator("DEFAULT_TAX_BASE_MODE")
    def validate_tax_base_mode(cls, v: str) -> str:
        if v not in ("onSubtotal", "onDiscountedSubtotal"):
            raise ValueError(
                "DEFAULT_TAX_BASE_MODE must be onSubtotal or onDiscountedSubtotal"
            )
        return v

    @field_validator("log_level")
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_pricing_settings() -> PricingSettings:
    """
    Get pricing settings (cached).

    Returns:
        PricingSettings instance with environment variables loaded
    """
    return PricingSettings()
