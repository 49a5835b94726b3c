# backend/modules/pricing/schemas/pricing_schemas.py

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from typing import Optional, Tuple, FrozenSet, Any
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from core.config import PricingSettings, get_pricing_settings
from ..models.pricing_models import (
    OfferType,
    TaxBaseMode,
    ManualDiscountType,
    SkipReason,
)
from ..utils.money import ZERO, to_decimal, optional_decimal, money_sum, quantize_money


class PricingModel(BaseModel):
    """Immutable record accepting upstream camelCase and snake_case names"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def _settings(info: Optional[ValidationInfo] = None) -> PricingSettings:
    """Settings passed as validation context, else the process-wide ones"""
    context = info.context if info is not None else None
    if context and context.get("settings") is not None:
        return context["settings"]
    return get_pricing_settings()


def _string_set(value: Any) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        value = [value]
    return frozenset(str(v) for v in value if v is not None and str(v) != "")


# Cart schemas
class LineItem(PricingModel):
    """One priced entry in a cart"""

    item_id: str = Field(..., validation_alias=AliasChoices("itemId", "item_id", "_id"))
    name: str = ""
    unit_price: Decimal = Field(
        ..., validation_alias=AliasChoices("unitPrice", "unit_price", "price")
    )
    quantity: int
    category: str = Field(None, validate_default=True)
    prep_time: int = Field(None, validate_default=True)
    variant: Optional[str] = None

    @field_validator("item_id", mode="before")
    def coerce_item_id(cls, v):
        if v is None or str(v) == "":
            raise ValueError("item_id is required")
        return str(v)

    @field_validator("unit_price", mode="before")
    def parse_unit_price(cls, v):
        return to_decimal(v)

    @field_validator("name", mode="before")
    def coerce_name(cls, v):
        return "" if v is None else str(v)

    @field_validator("category", mode="before")
    def default_blank_category(cls, v, info: ValidationInfo):
        if v is None or not str(v).strip():
            return _settings(info).DEFAULT_CATEGORY
        return str(v)

    @field_validator("prep_time", mode="before")
    def default_missing_prep_time(cls, v, info: ValidationInfo):
        if v is None or v == "" or v == 0:
            return _settings(info).DEFAULT_PREP_TIME_MINUTES
        return v

    @property
    def is_priced(self) -> bool:
        """Items with non-positive quantity or negative price contribute nothing"""
        return self.quantity >= 1 and self.unit_price >= 0

    @property
    def line_total(self) -> Decimal:
        if not self.is_priced:
            return ZERO
        return self.unit_price * self.quantity


class Cart(BaseModel):
    """Immutable snapshot of the line items being priced"""

    model_config = ConfigDict(frozen=True)

    items: Tuple[LineItem, ...] = ()

    @property
    def subtotal(self) -> Decimal:
        return money_sum(item.line_total for item in self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items if item.is_priced)

    @property
    def is_empty(self) -> bool:
        return not any(item.is_priced for item in self.items)

    @property
    def categories(self) -> FrozenSet[str]:
        return frozenset(item.category for item in self.items if item.is_priced)

    @property
    def item_ids(self) -> FrozenSet[str]:
        return frozenset(item.item_id for item in self.items if item.is_priced)


# Offer schemas
class Offer(PricingModel):
    """Promotional rule read from the offer store"""

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    description: str = ""
    offer_type: OfferType
    discount_value: Decimal = Field(..., ge=0)
    max_discount_amount: Optional[Decimal] = Field(None, ge=0)
    min_order_amount: Optional[Decimal] = Field(None, ge=0)
    applicable_categories: FrozenSet[str] = frozenset()
    applicable_items: FrozenSet[str] = frozenset()
    priority: int = 0

    # Validity window, only checked against an explicit as_of instant
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    applicable_days: FrozenSet[int] = frozenset()  # 0 = Sunday

    @field_validator("id", mode="before")
    def coerce_id(cls, v):
        if v is None or str(v) == "":
            raise ValueError("offer id is required")
        return str(v)

    @field_validator("name", "description", mode="before")
    def coerce_text(cls, v):
        return "" if v is None else str(v)

    @field_validator("offer_type", mode="before")
    def normalize_offer_type(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "fixed":
                return OfferType.FLAT
            if v == "percent":
                return OfferType.PERCENTAGE
        return v

    @field_validator("discount_value", mode="before")
    def parse_discount_value(cls, v):
        return to_decimal(v)

    @field_validator("max_discount_amount", "min_order_amount", mode="before")
    def parse_optional_amount(cls, v):
        return optional_decimal(v)

    @field_validator("applicable_categories", "applicable_items", mode="before")
    def parse_restriction(cls, v):
        return _string_set(v)

    @field_validator("priority", mode="before")
    def default_priority(cls, v):
        return 0 if v is None else v

    @field_validator("is_active", mode="before")
    def default_active(cls, v):
        return True if v is None else v

    @field_validator("applicable_days", mode="before")
    def parse_days(cls, v):
        return frozenset() if v is None else v

    @field_validator("applicable_days")
    def validate_days(cls, v):
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("applicable_days must be between 0 (Sunday) and 6")
        return v

    @model_validator(mode="after")
    def validate_offer(self):
        if self.offer_type == OfferType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("Percentage discount cannot exceed 100%")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self

    @property
    def discount_cap(self) -> Optional[Decimal]:
        """Cap for percentage offers; a zero cap means no limit"""
        if self.offer_type != OfferType.PERCENTAGE:
            return None
        return self.max_discount_amount or None


# Tax schemas
class TaxConfig(PricingModel):
    """Billing settings consumed by the tax calculation"""

    # Unset values are filled from settings (validation context or global)
    cgst_rate: Decimal = Field(None, ge=0, le=100, validate_default=True)
    sgst_rate: Decimal = Field(None, ge=0, le=100, validate_default=True)
    tax_base_mode: TaxBaseMode = Field(
        None,
        validate_default=True,
        validation_alias=AliasChoices(
            "taxBaseMode", "tax_base_mode", "taxCalculationMethod"
        ),
    )

    @field_validator("cgst_rate", mode="before")
    def parse_cgst_rate(cls, v, info: ValidationInfo):
        if v is None:
            return _settings(info).DEFAULT_CGST_RATE
        return to_decimal(v)

    @field_validator("sgst_rate", mode="before")
    def parse_sgst_rate(cls, v, info: ValidationInfo):
        if v is None:
            return _settings(info).DEFAULT_SGST_RATE
        return to_decimal(v)

    @field_validator("tax_base_mode", mode="before")
    def parse_tax_base_mode(cls, v, info: ValidationInfo):
        if v is None:
            return TaxBaseMode(_settings(info).DEFAULT_TAX_BASE_MODE)
        return v

    @classmethod
    def from_settings(cls, settings: Optional[PricingSettings] = None) -> "TaxConfig":
        """Documented defaults, used when billing settings are unavailable"""
        return cls.model_validate({}, context={"settings": settings})

    @property
    def total_rate(self) -> Decimal:
        return self.cgst_rate + self.sgst_rate


class ManualDiscount(PricingModel):
    """Staff-entered discount applied on top of the auto-applied offer"""

    discount_type: ManualDiscountType
    discount_value: Decimal = Field(ZERO, ge=0)

    @field_validator("discount_type", mode="before")
    def normalize_discount_type(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "flat":
                return ManualDiscountType.FIXED
        return v

    @field_validator("discount_value", mode="before")
    def parse_discount_value(cls, v):
        return ZERO if v is None else to_decimal(v)

    @model_validator(mode="after")
    def validate_percentage(self):
        if (
            self.discount_type == ManualDiscountType.PERCENTAGE
            and self.discount_value > 100
        ):
            raise ValueError("Percentage discount cannot exceed 100%")
        return self


# Result schemas
class OfferEvaluation(PricingModel):
    """Outcome of checking one candidate offer against the cart"""

    offer_id: Optional[str] = None
    offer_name: Optional[str] = None
    eligible: bool
    skip_reason: Optional[SkipReason] = None
    detail: Optional[str] = None
    potential_discount: Decimal = ZERO


class PricingSummary(PricingModel):
    """Rounded figures for display, receipts and order payloads"""

    subtotal: Decimal
    applied_offer_id: Optional[str] = None
    applied_offer_name: Optional[str] = None
    discount_amount: Decimal
    manual_discount_amount: Decimal
    discounted_subtotal: Decimal
    tax_base_mode: TaxBaseMode
    cgst_rate: Decimal
    sgst_rate: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    estimated_prep_time: int


class PricingResult(PricingModel):
    """Complete, unrounded pricing of one cart snapshot"""

    subtotal: Decimal
    applied_offer: Optional[Offer] = None
    discount_amount: Decimal = ZERO
    manual_discount: Optional[ManualDiscount] = None
    manual_discount_amount: Decimal = ZERO
    discounted_subtotal: Decimal
    tax_base_mode: TaxBaseMode
    cgst_rate: Decimal
    sgst_rate: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    estimated_prep_time: int = 0
    offer_evaluations: Tuple[OfferEvaluation, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def applied_offer_id(self) -> Optional[str]:
        return self.applied_offer.id if self.applied_offer else None

    @property
    def total_discount(self) -> Decimal:
        return self.discount_amount + self.manual_discount_amount

    @property
    def eligible_offers(self) -> Tuple[OfferEvaluation, ...]:
        return tuple(e for e in self.offer_evaluations if e.eligible)

    def rounded(self, places: Optional[int] = None) -> PricingSummary:
        """Round every currency figure once, at presentation time"""
        return PricingSummary(
            subtotal=quantize_money(self.subtotal, places),
            applied_offer_id=self.applied_offer_id,
            applied_offer_name=self.applied_offer.name if self.applied_offer else None,
            discount_amount=quantize_money(self.discount_amount, places),
            manual_discount_amount=quantize_money(self.manual_discount_amount, places),
            discounted_subtotal=quantize_money(self.discounted_subtotal, places),
            tax_base_mode=self.tax_base_mode,
            cgst_rate=self.cgst_rate,
            sgst_rate=self.sgst_rate,
            cgst_amount=quantize_money(self.cgst_amount, places),
            sgst_amount=quantize_money(self.sgst_amount, places),
            tax_amount=quantize_money(self.tax_amount, places),
            total=quantize_money(self.total, places),
            estimated_prep_time=self.estimated_prep_time,
        )


# Order submission schemas
class OrderPricingPayload(PricingModel):
    """Pricing fields persisted alongside a submitted order"""

    items: Tuple[LineItem, ...]
    applied_offer_id: Optional[str] = None
    manual_discount: Optional[ManualDiscount] = None
    tax_config: TaxConfig
    subtotal: Decimal
    discount_amount: Decimal
    manual_discount_amount: Decimal = ZERO
    tax_amount: Decimal
    total: Decimal
    estimated_prep_time: int = 0

    @field_validator(
        "subtotal",
        "discount_amount",
        "manual_discount_amount",
        "tax_amount",
        "total",
        mode="before",
    )
    def parse_amount(cls, v):
        return to_decimal(v)

    @field_validator("applied_offer_id", mode="before")
    def coerce_offer_id(cls, v):
        return None if v is None or v == "" else str(v)
