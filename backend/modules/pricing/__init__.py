# backend/modules/pricing/__init__.py

"""
Order pricing and promotional-offer engine.

One stateless engine shared by the counter, QR and pre-order flows and by
server-side order validation: pick the auto-applied offer, compute the
discount, derive CGST/SGST and assemble the payable total.
"""

from .services.pricing_engine import PricingEngine, calculate_pricing
from .services.order_payload_service import (
    build_order_payload,
    reprice_order,
    verify_order_total,
)
from .schemas.pricing_schemas import (
    Cart,
    LineItem,
    Offer,
    TaxConfig,
    ManualDiscount,
    PricingResult,
    PricingSummary,
    OrderPricingPayload,
)

__all__ = [
    "PricingEngine",
    "calculate_pricing",
    "build_order_payload",
    "reprice_order",
    "verify_order_total",
    "Cart",
    "LineItem",
    "Offer",
    "TaxConfig",
    "ManualDiscount",
    "PricingResult",
    "PricingSummary",
    "OrderPricingPayload",
]
