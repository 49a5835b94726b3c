# backend/modules/pricing/models/__init__.py

from .pricing_models import OfferType, TaxBaseMode, ManualDiscountType, SkipReason

__all__ = ["OfferType", "TaxBaseMode", "ManualDiscountType", "SkipReason"]
