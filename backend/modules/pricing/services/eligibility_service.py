# backend/modules/pricing/services/eligibility_service.py

from typing import Optional, Tuple
from datetime import datetime, timezone
from decimal import Decimal
import logging

from ..models.pricing_models import SkipReason
from ..schemas.pricing_schemas import Cart, Offer, OfferEvaluation

logger = logging.getLogger(__name__)


def _align(moment: datetime, reference: datetime) -> datetime:
    """Make moment comparable with reference; naive values are taken as UTC"""
    if (moment.tzinfo is None) == (reference.tzinfo is None):
        return moment
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def sunday_based_weekday(moment: datetime) -> int:
    """Weekday number with 0 = Sunday, as stored on offer records"""
    return (moment.weekday() + 1) % 7


class OfferEligibilityEvaluator:
    """Decides whether a single offer qualifies against a cart"""

    def evaluate(
        self,
        offer: Offer,
        cart: Cart,
        subtotal: Decimal,
        as_of: Optional[datetime] = None,
    ) -> OfferEvaluation:
        """
        Check an offer against the cart

        Args:
            offer: Candidate offer
            cart: Cart snapshot
            subtotal: Whole-cart subtotal before any discount
            as_of: Instant to check the validity window against; the window
                is not checked when omitted

        Returns:
            OfferEvaluation with eligible flag and skip reason
        """
        failure = self._check(offer, cart, subtotal, as_of)
        if failure:
            reason, detail = failure
            logger.debug(f"Offer {offer.id} skipped: {detail}")
            return OfferEvaluation(
                offer_id=offer.id,
                offer_name=offer.name,
                eligible=False,
                skip_reason=reason,
                detail=detail,
            )

        return OfferEvaluation(offer_id=offer.id, offer_name=offer.name, eligible=True)

    def is_eligible(
        self,
        offer: Offer,
        cart: Cart,
        subtotal: Decimal,
        as_of: Optional[datetime] = None,
    ) -> bool:
        return self._check(offer, cart, subtotal, as_of) is None

    def _check(
        self,
        offer: Offer,
        cart: Cart,
        subtotal: Decimal,
        as_of: Optional[datetime],
    ) -> Optional[Tuple[SkipReason, str]]:
        if cart.is_empty:
            return SkipReason.EMPTY_CART, "Cart is empty"

        if not offer.is_active:
            return SkipReason.INACTIVE, "Offer is not active"

        if as_of is not None:
            window_failure = self._check_validity_window(offer, as_of)
            if window_failure:
                return window_failure

        # Check minimum order amount
        if offer.min_order_amount is not None and subtotal < offer.min_order_amount:
            return (
                SkipReason.BELOW_MINIMUM_ORDER,
                f"Order amount {subtotal} below minimum {offer.min_order_amount}",
            )

        # Check category restrictions
        if offer.applicable_categories and not (
            offer.applicable_categories & cart.categories
        ):
            return (
                SkipReason.NO_MATCHING_CATEGORY,
                "No line item in categories "
                f"{', '.join(sorted(offer.applicable_categories))}",
            )

        # Check item restrictions
        if offer.applicable_items and not (offer.applicable_items & cart.item_ids):
            return SkipReason.NO_MATCHING_ITEM, "No applicable item in cart"

        return None

    def _check_validity_window(
        self, offer: Offer, as_of: datetime
    ) -> Optional[Tuple[SkipReason, str]]:
        if offer.start_date and as_of < _align(offer.start_date, as_of):
            return SkipReason.OUTSIDE_VALIDITY_WINDOW, "Offer has not started"

        if offer.end_date and as_of > _align(offer.end_date, as_of):
            return SkipReason.OUTSIDE_VALIDITY_WINDOW, "Offer has ended"

        if offer.applicable_days:
            day = sunday_based_weekday(as_of)
            if day not in offer.applicable_days:
                return SkipReason.NOT_VALID_TODAY, f"Offer not valid on weekday {day}"

        return None
