from decimal import Decimal

from flixdog_pricing.catalog import Product
from flixdog_pricing.engine import (
    CardPrice,
    format_price,
    format_price_from,
    format_price_from_no_decimals,
    get_price_and_unit_for_card,
)


def test_format_price():
    assert format_price(Decimal("12.5")) == "€12.50"
    assert format_price(0) == "€0.00"
    assert format_price(68.755) == "€68.76"


def test_format_price_from():
    assert format_price_from(Decimal("68.75")) == "Da €68.75"
    assert format_price_from(0) == "Da €0"
    assert format_price_from(-5) == "Da €0"


def test_format_price_from_no_decimals_rounds_half_up():
    assert format_price_from_no_decimals(Decimal("68.75")) == "Da €69"
    assert format_price_from_no_decimals(Decimal("68.5")) == "Da €69"
    assert format_price_from_no_decimals(Decimal("68.49")) == "Da €68"
    assert format_price_from_no_decimals(0) == "Da €0"


def test_card_price_dog_only_class():
    product = Product(
        id="agility", type="class", name="Agility", no_adults=True,
        pricing_model="markup", provider_cost_dog_base=Decimal("30"), markup_dog=Decimal("8"),
    )
    assert get_price_and_unit_for_card(product) == CardPrice(price="Da €38", unit="/ cane")


def test_card_price_pair():
    product = Product(
        id="trekking", type="experience", name="Trekking",
        pricing_model="percentage",
        provider_cost_adult_base=Decimal("40"),
        provider_cost_dog_base=Decimal("15"),
        margin_percentage=Decimal("25"),
    )
    assert get_price_and_unit_for_card(product) == CardPrice(price="Da €69", unit="/ binomio")


def test_card_price_without_price():
    product = Product(id="free", type="experience", name="Free walk")
    assert get_price_and_unit_for_card(product) == CardPrice(price="Da €0", unit="")


def test_very_large_prices_are_formatted():
    assert format_price_from_no_decimals(Decimal("1e28")) == "Da €1" + "0" * 28
    assert format_price(Decimal("1e27")) == "€1" + "0" * 27 + ".00"
