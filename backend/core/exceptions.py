"""
Exceptions raised by the pricing engine.

Business conditions (bad offers, missing tax settings, odd line items) never
raise: the engine degrades to a safe default so checkout is not blocked.
Only programming-contract violations and total mismatches surface here.
"""

from decimal import Decimal
from typing import Any, Dict, Optional


class PricingError(Exception):
    """Base exception for pricing errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class PricingContractError(PricingError, TypeError):
    """Caller passed inputs of the wrong kind (e.g. a cart that is not a sequence)"""

    def __init__(self, argument: str, received: Any, expected: str = "a sequence"):
        super().__init__(
            message=f"{argument} must be {expected}, got {type(received).__name__}",
            details={"argument": argument, "received_type": type(received).__name__},
        )


class PricingMismatchError(PricingError, ValueError):
    """Submitted order total does not match a fresh recomputation"""

    def __init__(self, submitted_total: Decimal, computed_total: Decimal):
        self.submitted_total = submitted_total
        self.computed_total = computed_total
        super().__init__(
            message=(
                f"Submitted total {submitted_total} must equal order total "
                f"{computed_total}"
            ),
            details={
                "submitted_total": str(submitted_total),
                "computed_total": str(computed_total),
            },
        )
