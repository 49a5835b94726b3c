# backend/modules/pricing/tests/test_order_payload_service.py

import logging
import pytest
from decimal import Decimal

from core.config import PricingSettings
from core.exceptions import PricingMismatchError
from modules.pricing.models.pricing_models import ManualDiscountType, TaxBaseMode
from modules.pricing.schemas.pricing_schemas import OrderPricingPayload
from modules.pricing.services.pricing_engine import PricingEngine
from modules.pricing.services.order_payload_service import (
    build_order_payload,
    reprice_order,
    verify_order_total,
)


@pytest.fixture
def coffee_offer(offer_factory):
    return offer_factory(
        id="coffee-10", applicable_categories={"Coffee"}, discount_value=Decimal("10")
    )


@pytest.fixture
def submitted_payload(engine, tea_and_coffee_cart, coffee_offer):
    result = engine.calculate(tea_and_coffee_cart, [coffee_offer])
    return build_order_payload(tea_and_coffee_cart, result)


class TestBuildOrderPayload:
    def test_payload_fields(self, submitted_payload, tea_and_coffee_cart):
        assert submitted_payload.applied_offer_id == "coffee-10"
        assert submitted_payload.subtotal == Decimal("300.00")
        assert submitted_payload.discount_amount == Decimal("20.00")
        assert submitted_payload.tax_amount == Decimal("14.00")
        assert submitted_payload.total == Decimal("294.00")
        assert submitted_payload.items == tuple(tea_and_coffee_cart)
        assert submitted_payload.tax_config.tax_base_mode == (
            TaxBaseMode.ON_DISCOUNTED_SUBTOTAL
        )

    def test_amounts_are_rounded(self, engine, line_item_factory):
        """Test 33.33 + 1.6665 tax is stored as 35.00"""
        cart = [line_item_factory(unit_price=Decimal("33.33"))]
        result = engine.calculate(cart)

        payload = build_order_payload(cart, result)

        assert result.total == Decimal("34.9965")
        assert payload.tax_amount == Decimal("1.67")
        assert payload.total == Decimal("35.00")

    def test_manual_discount_is_recorded(self, engine, line_item_factory):
        """Test the staff discount is taken from the result itself"""
        cart = [line_item_factory(unit_price=Decimal("200"))]
        manual = {"discountType": "flat", "discountValue": "15"}
        result = engine.calculate(cart, manual_discount=manual)

        payload = build_order_payload(cart, result)

        assert payload.manual_discount.discount_type == ManualDiscountType.FIXED
        assert payload.manual_discount_amount == Decimal("15.00")
        assert verify_order_total(payload).total == Decimal("194.25")

    def test_large_amounts_are_rounded(self, engine):
        """Test totals wider than the default decimal precision still round"""
        cart = [{"itemId": "a", "unitPrice": "1e27", "quantity": 1}]

        payload = build_order_payload(cart, engine.calculate(cart))

        assert payload.total == Decimal("1.05e27")
        assert str(payload.total).endswith(".00")
        verify_order_total(payload)

    def test_engine_settings_are_recorded(self, line_item_factory):
        settings = PricingSettings(
            DEFAULT_CGST_RATE=Decimal("9"),
            DEFAULT_SGST_RATE=Decimal("9"),
            CURRENCY_DECIMAL_PLACES=3,
        )
        engine = PricingEngine(settings=settings)
        cart = [line_item_factory(unit_price=Decimal("10.005"))]

        payload = build_order_payload(cart, engine.calculate(cart), settings)

        assert payload.tax_config.cgst_rate == Decimal("9")
        assert payload.tax_amount == Decimal("1.801")
        assert payload.total == Decimal("11.806")
        verify_order_total(payload, engine=engine)

    def test_serialized_payload_round_trip(self, submitted_payload, coffee_offer):
        """Test a payload read back from storage still verifies"""
        stored = submitted_payload.model_dump(mode="json", by_alias=True)

        restored = OrderPricingPayload.model_validate(stored)

        assert "appliedOfferId" in stored
        assert restored.model_dump() == submitted_payload.model_dump()
        verify_order_total(restored, [coffee_offer])


class TestVerifyOrderTotal:
    def test_matching_total(self, submitted_payload, coffee_offer):
        result = verify_order_total(submitted_payload, [coffee_offer])

        assert result.applied_offer_id == "coffee-10"
        assert result.total == Decimal("294")

    def test_tampered_total_rejected(self, submitted_payload, coffee_offer):
        tampered = submitted_payload.model_copy(update={"total": Decimal("250.00")})

        with pytest.raises(PricingMismatchError, match="must equal order total") as exc:
            verify_order_total(tampered, [coffee_offer])

        assert exc.value.submitted_total == Decimal("250.00")
        assert exc.value.computed_total == Decimal("294.00")

    def test_mismatch_is_a_value_error(self, submitted_payload):
        tampered = submitted_payload.model_copy(update={"total": Decimal("1")})

        with pytest.raises(ValueError):
            verify_order_total(tampered, [])

    def test_manual_discount_survives_verification(self, engine, line_item_factory):
        cart = [line_item_factory(unit_price=Decimal("200"))]
        manual = {"discountType": "percentage", "discountValue": 10}
        payload = build_order_payload(
            cart, engine.calculate(cart, manual_discount=manual)
        )

        result = verify_order_total(payload)

        assert result.manual_discount_amount == Decimal("20")


class TestRepriceOrder:
    def test_newer_offers_do_not_change_price(
        self, submitted_payload, coffee_offer, offer_factory
    ):
        """Test an offer published after submission is not picked up"""
        newer = offer_factory(flat=True, discount_value=Decimal("100"), priority=10)

        result = reprice_order(submitted_payload, [newer, coffee_offer])

        assert result.applied_offer_id == "coffee-10"
        assert result.total == Decimal("294")

    def test_missing_offer_reprices_without_discount(
        self, submitted_payload, caplog
    ):
        with caplog.at_level(logging.WARNING):
            result = reprice_order(submitted_payload, [])

        assert result.applied_offer is None
        assert result.total == Decimal("315")
        assert "coffee-10 not found" in caplog.text

    def test_missing_offer_fails_verification(self, submitted_payload):
        with pytest.raises(PricingMismatchError):
            verify_order_total(submitted_payload, None)

    def test_payload_without_offer(self, engine, tea_and_coffee_cart):
        payload = build_order_payload(
            tea_and_coffee_cart, engine.calculate(tea_and_coffee_cart)
        )

        result = verify_order_total(payload)

        assert payload.applied_offer_id is None
        assert result.total == Decimal("315")
