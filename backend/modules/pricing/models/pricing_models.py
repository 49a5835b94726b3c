# backend/modules/pricing/models/pricing_models.py

from enum import Enum


class OfferType(str, Enum):
    """How an offer's discount_value is interpreted"""
    PERCENTAGE = "percentage"                    # 10% off matched items
    FLAT = "flat"                                # 50 off, capped at matched subtotal


class TaxBaseMode(str, Enum):
    """Which figure the tax percentages are applied to"""
    ON_SUBTOTAL = "onSubtotal"                   # before any discount
    ON_DISCOUNTED_SUBTOTAL = "onDiscountedSubtotal"  # after discounts


class ManualDiscountType(str, Enum):
    """Staff-entered discount at the counter"""
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class SkipReason(str, Enum):
    """Why a candidate offer was not eligible"""
    MALFORMED = "malformed"
    EMPTY_CART = "empty_cart"
    INACTIVE = "inactive"
    OUTSIDE_VALIDITY_WINDOW = "outside_validity_window"
    NOT_VALID_TODAY = "not_valid_today"
    BELOW_MINIMUM_ORDER = "below_minimum_order"
    NO_MATCHING_CATEGORY = "no_matching_category"
    NO_MATCHING_ITEM = "no_matching_item"
