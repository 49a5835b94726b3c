# backend/modules/pricing/services/__init__.py

from .eligibility_service import OfferEligibilityEvaluator
from .discount_service import (
    MatchedLineItemSelector,
    DiscountCalculator,
    calculate_manual_discount,
)
from .offer_selection_service import BestOfferSelector, OfferSelection
from .tax_service import TaxCalculator, TaxBreakdown
from .pricing_engine import PricingEngine, calculate_pricing, estimate_prep_time
from .order_payload_service import (
    build_order_payload,
    reprice_order,
    verify_order_total,
)

__all__ = [
    # Offer evaluation
    "OfferEligibilityEvaluator",
    "MatchedLineItemSelector",
    "DiscountCalculator",
    "calculate_manual_discount",
    "BestOfferSelector",
    "OfferSelection",
    # Tax and totals
    "TaxCalculator",
    "TaxBreakdown",
    "PricingEngine",
    "calculate_pricing",
    "estimate_prep_time",
    # Order submission
    "build_order_payload",
    "reprice_order",
    "verify_order_total",
]
