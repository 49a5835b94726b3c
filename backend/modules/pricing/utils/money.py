# backend/modules/pricing/utils/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, Optional

from core.config import get_pricing_settings

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """Convert a numeric value to Decimal via str so 0.1 stays 0.1"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("boolean is not a currency amount")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, TypeError):
        raise ValueError(f"Invalid currency amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Invalid currency amount: {value!r}")
    return result


def optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_decimal(value)


def percent_of(amount: Decimal, rate: Decimal) -> Decimal:
    return amount * rate / HUNDRED


def money_sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def quantize_money(amount: Decimal, places: Optional[int] = None) -> Decimal:
    """Round a currency amount for presentation (ROUND_HALF_UP)"""
    if places is None:
        places = get_pricing_settings().CURRENCY_DECIMAL_PLACES
    exponent = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # quantize needs every integer digit plus the requested places
        ctx.prec = max(ctx.prec, amount.adjusted() + places + 2)
        return amount.quantize(exponent, rounding=ROUND_HALF_UP)
