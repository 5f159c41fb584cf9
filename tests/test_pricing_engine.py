"""
Regression tests for the price calculation.

These pin the exact cent amounts the storefront displays and the checkout
charges, and should fail if the pricing arithmetic changes.
"""
from decimal import Decimal

import pytest

from flixdog_pricing.catalog import Product
from flixdog_pricing.engine import (
    PricingInput,
    calculate_price,
    calculate_total,
    get_minimum_price,
    round_price,
    to_cents,
)
from flixdog_pricing.engine.models import to_decimal


def test_percentage_model_example():
    pricing = PricingInput(
        pricing_model="percentage",
        provider_cost_adult_base=10,
        provider_cost_dog_base=5,
        margin_percentage=20,
        guests=2,
        dogs=1,
    )
    assert pricing.provider_cost_total == Decimal("25")

    result = calculate_price(pricing)

    assert result.total_amount == Decimal("30.00")
    assert result.price_per_adult == Decimal("12.00")
    assert result.price_per_dog == Decimal("6.00")
    assert result.subtotal_adults == Decimal("24.00")
    assert result.subtotal_dogs == Decimal("6.00")
    assert result.subtotal_adults + result.subtotal_dogs == result.total_amount


def test_markup_model_example():
    pricing = PricingInput(
        pricing_model="markup",
        provider_cost_adult_base=10,
        provider_cost_dog_base=5,
        markup_adult=3,
        markup_dog=2,
        guests=2,
        dogs=1,
    )
    result = calculate_price(pricing)

    assert result.total_amount == Decimal("33.00")
    assert result.price_per_adult == Decimal("13.00")
    assert result.price_per_dog == Decimal("7.00")
    assert result.subtotal_adults == Decimal("26.00")
    assert result.subtotal_dogs == Decimal("7.00")


def test_legacy_model_uses_flat_prices():
    result = calculate_price(PricingInput(
        pricing_model="legacy", legacy_price_adult=30, legacy_price_dog=12, guests=2, dogs=1,
    ))
    assert result.total_amount == Decimal("72.00")
    assert result.price_per_adult == Decimal("30")
    assert result.price_per_dog == Decimal("12")
    assert result.subtotal_adults == Decimal("60.00")
    assert result.subtotal_dogs == Decimal("12.00")


def test_percentage_without_provider_cost_matches_legacy():
    common = dict(legacy_price_adult=30, legacy_price_dog=12.5, guests=2, dogs=3)
    percentage = calculate_price(PricingInput(pricing_model="percentage", margin_percentage=20, **common))
    legacy = calculate_price(PricingInput(pricing_model="legacy", **common))

    assert percentage == legacy
    assert percentage.total_amount == Decimal("97.50")


def test_unknown_model_is_priced_as_legacy():
    unknown = calculate_price(PricingInput(
        pricing_model="tiered", legacy_price_adult=20, legacy_price_dog=5, guests=1, dogs=1,
    ))
    assert unknown.total_amount == Decimal("25.00")


def test_model_name_is_case_insensitive():
    pricing = PricingInput(pricing_model=" Markup ", provider_cost_adult_base=10, markup_adult=1, guests=1)
    assert pricing.pricing_model == "markup"
    assert calculate_total(pricing) == Decimal("11.00")


def test_rounding_difference_goes_to_adults():
    # 9 * 1.1111 = 9.9999 -> 10.00, but 3 x 3.33 only makes 9.99
    result = calculate_price(PricingInput(
        pricing_model="percentage",
        provider_cost_adult_base=3,
        provider_cost_dog_base=3,
        margin_percentage="11.11",
        guests=3,
        dogs=0,
    ))
    assert result.total_amount == Decimal("10.00")
    assert result.price_per_adult == Decimal("3.33")
    assert result.subtotal_adults == Decimal("10.00")
    assert result.subtotal_dogs == Decimal("0.00")


def test_rounding_difference_goes_to_larger_subtotal():
    result = calculate_price(PricingInput(
        pricing_model="percentage",
        provider_cost_dog_base=3,
        margin_percentage="11.11",
        guests=0,
        dogs=3,
    ))
    assert result.total_amount == Decimal("10.00")
    assert result.price_per_dog == Decimal("3.33")
    assert result.subtotal_adults == Decimal("0.00")
    assert result.subtotal_dogs == Decimal("10.00")


@pytest.mark.parametrize("pricing", [
    PricingInput(pricing_model="percentage", provider_cost_adult_base=7, provider_cost_dog_base=3,
                 margin_percentage=11.11, guests=2, dogs=1),
    PricingInput(pricing_model="percentage", provider_cost_adult_base="19.99", provider_cost_dog_base="4.45",
                 margin_percentage="17.5", guests=3, dogs=2),
    PricingInput(pricing_model="markup", provider_cost_adult_base="12.345", provider_cost_dog_base="6.789",
                 markup_adult="1.111", markup_dog="0.555", guests=3, dogs=7),
    PricingInput(pricing_model="legacy", legacy_price_adult="33.333", legacy_price_dog="9.999", guests=3, dogs=3),
], ids=["percentage-small", "percentage-fractional", "markup-fractional", "legacy-three-decimals"])
def test_subtotals_always_sum_to_total(pricing):
    result = calculate_price(pricing)
    assert result.subtotal_adults + result.subtotal_dogs == result.total_amount
    assert result.total_amount == round_price(result.total_amount)


@pytest.mark.parametrize("model", ["legacy", "percentage", "markup"])
def test_empty_party_costs_nothing(model):
    result = calculate_price(PricingInput(
        pricing_model=model,
        provider_cost_adult_base=10,
        provider_cost_dog_base=5,
        margin_percentage=20,
        markup_adult=3,
        markup_dog=2,
        legacy_price_adult=30,
        legacy_price_dog=10,
        guests=0,
        dogs=0,
    ))
    assert result.total_amount == 0
    assert result.subtotal_adults == 0
    assert result.subtotal_dogs == 0


def test_calculation_is_idempotent():
    pricing = PricingInput(
        pricing_model="percentage", provider_cost_adult_base="19.99", provider_cost_dog_base="4.45",
        margin_percentage="17.5", guests=3, dogs=2,
    )
    assert calculate_price(pricing) == calculate_price(pricing)


def test_invalid_inputs_default_to_zero():
    pricing = PricingInput(
        pricing_model="markup",
        provider_cost_adult_base=None,
        provider_cost_dog_base=float("nan"),
        markup_adult="abc",
        markup_dog="",
        guests="2",
        dogs=None,
    )
    assert pricing.provider_cost_adult_base == 0
    assert pricing.provider_cost_dog_base == 0
    assert pricing.markup_adult == 0
    assert pricing.guests == 2
    assert pricing.dogs == 0
    assert calculate_total(pricing) == 0


def test_round_price_is_half_up():
    assert round_price(Decimal("2.675")) == Decimal("2.68")
    assert round_price(0.125) == Decimal("0.13")
    assert round_price("1.005") == Decimal("1.01")
    assert round_price(None) == Decimal("0.00")


def test_to_decimal_keeps_float_literal():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(float("inf")) == 0
    assert to_decimal(True) == 0


def test_to_cents():
    assert to_cents(Decimal("118.75")) == 11875
    assert to_cents("0.5") == 50


def test_minimum_price_dog_only_class():
    product = Product(
        id="agility", type="class", name="Agility", no_adults=True,
        pricing_model="legacy", price_adult_base=Decimal("40"), price_dog_base=Decimal("15"),
    )
    assert product.is_dog_only
    assert get_minimum_price(product) == Decimal("15")


def test_minimum_price_trip_ignores_no_adults():
    product = Product(
        id="toscana", type="trip", name="Toscana", no_adults=True,
        pricing_model="legacy", price_adult_base=Decimal("40"), price_dog_base=Decimal("15"),
    )
    assert not product.is_dog_only
    assert get_minimum_price(product) == Decimal("55.00")


def test_minimum_price_percentage_pair():
    product = Product(
        id="trekking", type="experience", name="Trekking",
        pricing_model="percentage",
        provider_cost_adult_base=Decimal("40"),
        provider_cost_dog_base=Decimal("15"),
        margin_percentage=Decimal("25"),
    )
    assert get_minimum_price(product) == Decimal("68.75")


def test_very_large_amounts_are_rounded_without_error():
    assert round_price(Decimal("1e26")) == Decimal("1e26")

    result = calculate_price(PricingInput(pricing_model="legacy", legacy_price_adult="1e27", guests=1))
    assert result.total_amount == Decimal("1e27")
    assert result.subtotal_adults == Decimal("1e27")
    assert result.subtotal_dogs == 0
    assert to_cents(result.total_amount) == 10 ** 29

    markup = calculate_price(PricingInput(pricing_model="markup", provider_cost_adult_base="1e27", guests=1))
    assert markup.total_amount == Decimal("1e27")
