# backend/modules/pricing/services/discount_service.py

from typing import Optional, Tuple
from decimal import Decimal
import logging

from ..models.pricing_models import OfferType, ManualDiscountType
from ..schemas.pricing_schemas import Cart, LineItem, Offer, ManualDiscount
from ..utils.money import ZERO, money_sum, percent_of

logger = logging.getLogger(__name__)


class MatchedLineItemSelector:
    """Picks the line items an offer's discount is computed against"""

    def select(self, offer: Offer, cart: Cart) -> Tuple[LineItem, ...]:
        # Item list wins over categories when both are set
        if offer.applicable_items:
            return tuple(
                item for item in cart.items if item.item_id in offer.applicable_items
            )

        if offer.applicable_categories:
            return tuple(
                item
                for item in cart.items
                if item.category in offer.applicable_categories
            )

        return cart.items

    def matched_subtotal(self, offer: Offer, cart: Cart) -> Decimal:
        return money_sum(item.line_total for item in self.select(offer, cart))


class DiscountCalculator:
    """Computes the discount one offer yields on its matched subtotal"""

    def __init__(self, selector: Optional[MatchedLineItemSelector] = None):
        self.selector = selector or MatchedLineItemSelector()

    def calculate(self, offer: Offer, matched_subtotal: Decimal) -> Decimal:
        """
        Calculate discount for a specific offer

        Args:
            offer: Offer to calculate the discount for
            matched_subtotal: Summed line totals of the matched items

        Returns:
            Discount amount, never negative and never above matched_subtotal
        """
        if matched_subtotal <= 0:
            return ZERO

        if offer.offer_type == OfferType.PERCENTAGE:
            discount = percent_of(matched_subtotal, offer.discount_value)
            cap = offer.discount_cap
            if cap is not None and discount > cap:
                discount = cap
        elif offer.offer_type == OfferType.FLAT:
            discount = min(offer.discount_value, matched_subtotal)
        else:
            logger.warning(f"Unknown offer type: {offer.offer_type}")
            return ZERO

        return min(max(discount, ZERO), matched_subtotal)

    def calculate_for_cart(self, offer: Offer, cart: Cart) -> Decimal:
        return self.calculate(offer, self.selector.matched_subtotal(offer, cart))


def calculate_manual_discount(
    manual_discount: Optional[ManualDiscount], subtotal: Decimal, remaining: Decimal
) -> Decimal:
    """
    Staff discount on the whole-cart subtotal, clamped to what the offer left

    Args:
        manual_discount: Counter discount, if any
        subtotal: Whole-cart subtotal before discounts
        remaining: Subtotal left after the offer discount
    """
    if manual_discount is None or manual_discount.discount_value <= 0:
        return ZERO

    if manual_discount.discount_type == ManualDiscountType.PERCENTAGE:
        amount = percent_of(subtotal, manual_discount.discount_value)
    else:
        amount = manual_discount.discount_value

    return min(amount, max(remaining, ZERO))
