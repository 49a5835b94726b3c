# backend/modules/pricing/services/order_payload_service.py

from typing import Any, Optional, Sequence
from datetime import datetime
import logging

from core.config import PricingSettings, get_pricing_settings
from core.exceptions import PricingMismatchError
from ..schemas.pricing_schemas import OrderPricingPayload, PricingResult, TaxConfig
from ..utils.money import quantize_money
from .pricing_engine import PricingEngine
from .snapshot_service import snapshot_cart, snapshot_offers

logger = logging.getLogger(__name__)


def build_order_payload(
    cart: Any, result: PricingResult, settings: Optional[PricingSettings] = None
) -> OrderPricingPayload:
    """
    Build the pricing fields stored with a submitted order

    Args:
        cart: The cart that produced result
        result: Engine output for that cart
        settings: Settings the engine priced with; global settings if omitted

    Returns:
        OrderPricingPayload with rounded amounts and the inputs needed to
        re-price the order later
    """
    settings = settings or get_pricing_settings()
    cart_snapshot, _ = snapshot_cart(cart, settings)
    summary = result.rounded(settings.CURRENCY_DECIMAL_PLACES)

    return OrderPricingPayload(
        items=cart_snapshot.items,
        applied_offer_id=result.applied_offer_id,
        manual_discount=result.manual_discount,
        tax_config=TaxConfig(
            cgst_rate=result.cgst_rate,
            sgst_rate=result.sgst_rate,
            tax_base_mode=result.tax_base_mode,
        ),
        subtotal=summary.subtotal,
        discount_amount=summary.discount_amount,
        manual_discount_amount=summary.manual_discount_amount,
        tax_amount=summary.tax_amount,
        total=summary.total,
        estimated_prep_time=summary.estimated_prep_time,
    )


def reprice_order(
    payload: OrderPricingPayload,
    offers: Optional[Sequence[Any]] = None,
    as_of: Optional[datetime] = None,
    engine: Optional[PricingEngine] = None,
) -> PricingResult:
    """
    Recompute pricing from a stored payload

    Only the offer recorded on the order is considered, so the result does
    not drift when new offers are published after submission.
    """
    engine = engine or PricingEngine()
    candidates, _, _ = snapshot_offers(offers)

    if payload.applied_offer_id is None:
        stored_offers = ()
    else:
        stored_offers = tuple(
            offer for offer in candidates if offer.id == payload.applied_offer_id
        )[:1]
        if not stored_offers:
            logger.warning(
                f"Applied offer {payload.applied_offer_id} not found while re-pricing"
            )

    return engine.calculate(
        payload.items,
        offers=stored_offers,
        tax_config=payload.tax_config,
        manual_discount=payload.manual_discount,
        as_of=as_of,
    )


def verify_order_total(
    payload: OrderPricingPayload,
    offers: Optional[Sequence[Any]] = None,
    as_of: Optional[datetime] = None,
    engine: Optional[PricingEngine] = None,
) -> PricingResult:
    """
    Check a submitted total against a fresh recomputation before charging

    Raises:
        PricingMismatchError: the stored total differs from the recomputed one
    """
    engine = engine or PricingEngine()
    places = engine.settings.CURRENCY_DECIMAL_PLACES
    result = reprice_order(payload, offers, as_of=as_of, engine=engine)
    computed_total = quantize_money(result.total, places)
    submitted_total = quantize_money(payload.total, places)

    if computed_total != submitted_total:
        logger.error(
            f"Order total mismatch: submitted {submitted_total}, "
            f"computed {computed_total}"
        )
        raise PricingMismatchError(submitted_total, computed_total)

    return result
