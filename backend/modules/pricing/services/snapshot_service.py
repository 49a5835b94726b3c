# backend/modules/pricing/services/snapshot_service.py

"""
Turns caller inputs into immutable snapshots the engine can price.

Raw records from the offer store and billing settings are parsed leniently:
anything malformed is reported and replaced by a safe default instead of
failing checkout. Only inputs of the wrong kind altogether (a cart that is
not a sequence) raise.
"""

from typing import Any, List, Optional, Tuple
from collections.abc import Mapping, Sequence
import logging

from pydantic import ValidationError

from core.config import PricingSettings
from core.exceptions import PricingContractError
from ..models.pricing_models import SkipReason
from ..schemas.pricing_schemas import (
    Cart,
    LineItem,
    Offer,
    OfferEvaluation,
    TaxConfig,
    ManualDiscount,
)

logger = logging.getLogger(__name__)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}" if location else error.get("msg", "")


def snapshot_cart(
    items: Any, settings: Optional[PricingSettings] = None
) -> Tuple[Cart, List[str]]:
    """
    Build a Cart from LineItems or line item mappings

    Mappings missing a category or prep time take them from settings.

    Returns:
        Tuple of (cart, warnings)

    Raises:
        PricingContractError: items is not a sequence, or an entry is neither
            a LineItem nor a mapping
    """
    if isinstance(items, Cart):
        return items, []

    if not _is_sequence(items):
        raise PricingContractError("cart", items)

    line_items = []
    warnings = []

    for index, entry in enumerate(items):
        if isinstance(entry, LineItem):
            line_items.append(entry)
            continue

        if not isinstance(entry, Mapping):
            raise PricingContractError(
                f"cart[{index}]", entry, expected="a LineItem or mapping"
            )

        try:
            line_items.append(
                LineItem.model_validate(entry, context={"settings": settings})
            )
        except ValidationError as e:
            message = f"Skipped line item {index}: {_first_error(e)}"
            logger.warning(message)
            warnings.append(message)

    return Cart(items=tuple(line_items)), warnings


def snapshot_offers(
    offers: Any,
) -> Tuple[Tuple[Offer, ...], List[OfferEvaluation], List[str]]:
    """
    Parse candidate offers, excluding malformed records

    Returns:
        Tuple of (offers in input order, evaluations for malformed records,
        warnings)
    """
    if offers is None:
        return (), [], []

    if not _is_sequence(offers):
        raise PricingContractError("offers", offers)

    parsed = []
    rejected = []
    warnings = []

    for index, entry in enumerate(offers):
        if isinstance(entry, Offer):
            parsed.append(entry)
            continue

        offer_id = None
        try:
            if not isinstance(entry, Mapping):
                raise TypeError(f"unsupported offer record {type(entry).__name__}")
            offer_id = entry.get("id", entry.get("_id"))
            parsed.append(Offer.model_validate(entry))
        except (ValidationError, TypeError) as e:
            detail = _first_error(e) if isinstance(e, ValidationError) else str(e)
            message = f"Excluded malformed offer {offer_id or index}: {detail}"
            logger.warning(message)
            warnings.append(message)
            rejected.append(
                OfferEvaluation(
                    offer_id=None if offer_id is None else str(offer_id),
                    eligible=False,
                    skip_reason=SkipReason.MALFORMED,
                    detail=detail,
                )
            )

    return tuple(parsed), rejected, warnings


def resolve_tax_config(
    tax_config: Any, settings: Optional[PricingSettings] = None
) -> Tuple[TaxConfig, List[str]]:
    """Use the given billing settings, falling back to documented defaults"""
    if tax_config is None:
        return TaxConfig.from_settings(settings), []

    if isinstance(tax_config, TaxConfig):
        return tax_config, []

    if isinstance(tax_config, Mapping):
        try:
            return (
                TaxConfig.model_validate(tax_config, context={"settings": settings}),
                [],
            )
        except ValidationError as e:
            message = f"Invalid tax configuration, using defaults: {_first_error(e)}"
    else:
        message = (
            "Invalid tax configuration, using defaults: "
            f"unsupported type {type(tax_config).__name__}"
        )

    logger.warning(message)
    return TaxConfig.from_settings(settings), [message]


def resolve_manual_discount(
    manual_discount: Any,
) -> Tuple[Optional[ManualDiscount], List[str]]:
    if manual_discount is None or isinstance(manual_discount, ManualDiscount):
        return manual_discount, []

    if isinstance(manual_discount, Mapping):
        try:
            return ManualDiscount.model_validate(manual_discount), []
        except ValidationError as e:
            message = f"Ignored invalid manual discount: {_first_error(e)}"
    else:
        message = (
            "Ignored invalid manual discount: "
            f"unsupported type {type(manual_discount).__name__}"
        )

    logger.warning(message)
    return None, [message]
