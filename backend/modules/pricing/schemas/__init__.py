# backend/modules/pricing/schemas/__init__.py

from .pricing_schemas import (
    LineItem,
    Cart,
    Offer,
    TaxConfig,
    ManualDiscount,
    OfferEvaluation,
    PricingResult,
    PricingSummary,
    OrderPricingPayload,
)

__all__ = [
    "LineItem",
    "Cart",
    "Offer",
    "TaxConfig",
    "ManualDiscount",
    "OfferEvaluation",
    "PricingResult",
    "PricingSummary",
    "OrderPricingPayload",
]
