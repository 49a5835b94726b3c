# backend/modules/pricing/services/pricing_engine.py

from typing import Any, Optional, Sequence
from datetime import datetime
import logging
import math

from core.config import PricingSettings, get_pricing_settings
from ..schemas.pricing_schemas import Cart, PricingResult
from ..utils.money import ZERO
from .offer_selection_service import BestOfferSelector
from .discount_service import calculate_manual_discount
from .tax_service import TaxCalculator
from .snapshot_service import (
    snapshot_cart,
    snapshot_offers,
    resolve_tax_config,
    resolve_manual_discount,
)

logger = logging.getLogger(__name__)


def estimate_prep_time(cart: Cart, settings: Optional[PricingSettings] = None) -> int:
    """
    Single-lane kitchen estimate in minutes

    The slowest item sets the base time; every started batch of
    KITCHEN_BATCH_SIZE units adds a minute.
    """
    settings = settings or get_pricing_settings()
    priced = [item for item in cart.items if item.is_priced]
    if not priced:
        return 0

    slowest = max(item.prep_time for item in priced)
    batches = math.ceil(cart.total_quantity / settings.KITCHEN_BATCH_SIZE)
    return slowest + batches


class PricingEngine:
    """Prices a cart snapshot against candidate offers and tax settings"""

    def __init__(
        self,
        selector: Optional[BestOfferSelector] = None,
        tax_calculator: Optional[TaxCalculator] = None,
        settings: Optional[PricingSettings] = None,
    ):
        self.settings = settings or get_pricing_settings()
        self.selector = selector or BestOfferSelector()
        self.tax_calculator = tax_calculator or TaxCalculator(self.settings)

    def calculate(
        self,
        cart: Any,
        offers: Optional[Sequence[Any]] = None,
        tax_config: Any = None,
        manual_discount: Any = None,
        as_of: Optional[datetime] = None,
    ) -> PricingResult:
        """
        Calculate the complete pricing for a cart

        Args:
            cart: Cart, or sequence of LineItems / line item mappings
            offers: Candidate offers (models or raw records), upstream order
            tax_config: TaxConfig, raw billing settings, or None for defaults
            manual_discount: Optional staff discount from the counter flow
            as_of: Instant for offer validity windows; unchecked when omitted

        Returns:
            PricingResult with unrounded figures

        Raises:
            PricingContractError: cart or offers is not a sequence
        """
        cart_snapshot, warnings = snapshot_cart(cart, self.settings)
        candidates, rejected, offer_warnings = snapshot_offers(offers)
        config, tax_warnings = resolve_tax_config(tax_config, self.settings)
        manual, manual_warnings = resolve_manual_discount(manual_discount)
        warnings = warnings + offer_warnings + tax_warnings + manual_warnings

        subtotal = cart_snapshot.subtotal
        selection = self.selector.select(cart_snapshot, candidates, as_of)

        discount_amount = min(selection.discount_amount, subtotal)
        remaining = max(subtotal - discount_amount, ZERO)
        manual_amount = calculate_manual_discount(manual, subtotal, remaining)
        discounted_subtotal = max(remaining - manual_amount, ZERO)

        tax = self.tax_calculator.calculate(subtotal, discounted_subtotal, config)
        total = discounted_subtotal + tax.tax_amount

        if selection.offer is not None:
            logger.debug(
                f"Cart priced: subtotal {subtotal}, offer {selection.offer.id} "
                f"discount {discount_amount}, tax {tax.tax_amount}, total {total}"
            )

        return PricingResult(
            subtotal=subtotal,
            applied_offer=selection.offer,
            discount_amount=discount_amount,
            manual_discount=manual,
            manual_discount_amount=manual_amount,
            discounted_subtotal=discounted_subtotal,
            tax_base_mode=config.tax_base_mode,
            cgst_rate=config.cgst_rate,
            sgst_rate=config.sgst_rate,
            cgst_amount=tax.cgst_amount,
            sgst_amount=tax.sgst_amount,
            tax_amount=tax.tax_amount,
            total=total,
            estimated_prep_time=estimate_prep_time(cart_snapshot, self.settings),
            offer_evaluations=tuple(rejected) + selection.evaluations,
            warnings=tuple(warnings),
        )


def calculate_pricing(
    cart: Any,
    offers: Optional[Sequence[Any]] = None,
    tax_config: Any = None,
    manual_discount: Any = None,
    as_of: Optional[datetime] = None,
) -> PricingResult:
    """Price a cart with a default-configured engine"""
    return PricingEngine().calculate(
        cart,
        offers=offers,
        tax_config=tax_config,
        manual_discount=manual_discount,
        as_of=as_of,
    )
