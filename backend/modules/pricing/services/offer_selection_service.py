# backend/modules/pricing/services/offer_selection_service.py

from typing import List, Optional, Sequence, Tuple
from datetime import datetime
from decimal import Decimal
from dataclasses import dataclass, field
import logging

from ..schemas.pricing_schemas import Cart, Offer, OfferEvaluation
from ..utils.money import ZERO
from .eligibility_service import OfferEligibilityEvaluator
from .discount_service import DiscountCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfferSelection:
    """Auto-applied offer plus the evaluation of every candidate"""

    offer: Optional[Offer] = None
    discount_amount: Decimal = ZERO
    evaluations: Tuple[OfferEvaluation, ...] = field(default_factory=tuple)


class BestOfferSelector:
    """Picks at most one auto-applied offer: priority, then discount, then input order"""

    def __init__(
        self,
        evaluator: Optional[OfferEligibilityEvaluator] = None,
        calculator: Optional[DiscountCalculator] = None,
    ):
        self.evaluator = evaluator or OfferEligibilityEvaluator()
        self.calculator = calculator or DiscountCalculator()

    def select(
        self,
        cart: Cart,
        offers: Sequence[Offer],
        as_of: Optional[datetime] = None,
    ) -> OfferSelection:
        """
        Select the best eligible offer for a cart

        Args:
            cart: Cart snapshot
            offers: Well-formed candidate offers, in upstream order
            as_of: Optional instant for validity window checks

        Returns:
            OfferSelection; offer is None when nothing qualifies
        """
        subtotal = cart.subtotal
        evaluations: List[OfferEvaluation] = []

        best: Optional[Offer] = None
        best_discount = ZERO

        for offer in offers:
            evaluation = self.evaluator.evaluate(offer, cart, subtotal, as_of)
            if not evaluation.eligible:
                evaluations.append(evaluation)
                continue

            discount = self.calculator.calculate_for_cart(offer, cart)
            evaluations.append(
                evaluation.model_copy(update={"potential_discount": discount})
            )

            if best is None or self._beats(offer, discount, best, best_discount):
                best, best_discount = offer, discount

        if best is not None:
            logger.debug(
                f"Selected offer {best.id} (priority {best.priority}, "
                f"discount {best_discount})"
            )

        return OfferSelection(
            offer=best,
            discount_amount=best_discount if best is not None else ZERO,
            evaluations=tuple(evaluations),
        )

    @staticmethod
    def _beats(
        offer: Offer, discount: Decimal, best: Offer, best_discount: Decimal
    ) -> bool:
        # Strictly better only; ties keep the first offer encountered
        if offer.priority != best.priority:
            return offer.priority > best.priority
        return discount > best_discount
