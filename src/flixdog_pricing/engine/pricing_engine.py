"""
Pricing Engine - the single price calculation used by the catalog,
the /calculate endpoint and the checkout quote builder.

Pricing models:
- percentage: provider cost x (1 + margin%), split back per unit by ratio
- markup: provider cost + fixed per-unit markup
- legacy: flat per-adult / per-dog price, also the fallback when a
  percentage product has no provider cost

Every money value is rounded half-up to the cent on Decimal, and the two
subtotals are reconciled so they always add up to the total.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP, localcontext

from .models import (
    PricingInput,
    PricingResult,
    PRICING_MODEL_MARKUP,
    PRICING_MODEL_PERCENTAGE,
    to_decimal,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
RECONCILE_TOLERANCE = Decimal("0.0001")
HUNDRED = Decimal("100")


def round_price(value) -> Decimal:
    """Round to 2 decimal places, half-up."""
    amount = to_decimal(value)
    # quantize needs every integer digit plus the two decimals in the context
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _legacy_prices(pricing: PricingInput) -> tuple[Decimal, Decimal, Decimal]:
    price_per_adult = pricing.legacy_price_adult
    price_per_dog = pricing.legacy_price_dog
    total = round_price(price_per_adult * pricing.guests + price_per_dog * pricing.dogs)
    return total, price_per_adult, price_per_dog


def _percentage_prices(pricing: PricingInput) -> tuple[Decimal, Decimal, Decimal]:
    provider_cost_total = pricing.provider_cost_total
    if provider_cost_total <= 0:
        logger.debug("Percentage model without provider cost, using legacy prices")
        return _legacy_prices(pricing)

    total = round_price(provider_cost_total * (1 + pricing.margin_percentage / HUNDRED))
    price_ratio = total / provider_cost_total
    price_per_adult = round_price(pricing.provider_cost_adult_base * price_ratio)
    price_per_dog = round_price(pricing.provider_cost_dog_base * price_ratio)
    return total, price_per_adult, price_per_dog


def _markup_prices(pricing: PricingInput) -> tuple[Decimal, Decimal, Decimal]:
    total = round_price(
        pricing.provider_cost_total
        + pricing.markup_adult * pricing.guests
        + pricing.markup_dog * pricing.dogs
    )
    price_per_adult = round_price(pricing.provider_cost_adult_base + pricing.markup_adult)
    price_per_dog = round_price(pricing.provider_cost_dog_base + pricing.markup_dog)
    return total, price_per_adult, price_per_dog


def reconcile_subtotals(
    total: Decimal,
    price_per_adult: Decimal,
    price_per_dog: Decimal,
    guests: int,
    dogs: int,
) -> tuple[Decimal, Decimal]:
    """
    Split total into adult and dog subtotals that sum to it exactly.

    Any rounding difference goes to the larger subtotal (adults on ties).
    """
    subtotal_adults = round_price(price_per_adult * guests)
    subtotal_dogs = round_price(price_per_dog * dogs)

    difference = total - (subtotal_adults + subtotal_dogs)
    if abs(difference) > RECONCILE_TOLERANCE:
        if abs(subtotal_adults) >= abs(subtotal_dogs):
            subtotal_adults = round_price(subtotal_adults + difference)
        else:
            subtotal_dogs = round_price(subtotal_dogs + difference)

    final_difference = total - (subtotal_adults + subtotal_dogs)
    if abs(final_difference) > CENT:
        logger.error(
            "Subtotals do not sum to total: adults=%s dogs=%s total=%s difference=%s guests=%s dogs=%s",
            subtotal_adults, subtotal_dogs, total, final_difference, guests, dogs,
        )
        if abs(subtotal_adults) >= abs(subtotal_dogs):
            subtotal_dogs = total - subtotal_adults
        else:
            subtotal_adults = total - subtotal_dogs

    return subtotal_adults, subtotal_dogs


def calculate_price(pricing: PricingInput) -> PricingResult:
    """
    Calculate total, per-unit prices and subtotals for a party.

    Never raises: invalid inputs were already coerced to 0 by PricingInput.
    """
    if pricing.pricing_model == PRICING_MODEL_PERCENTAGE:
        total, price_per_adult, price_per_dog = _percentage_prices(pricing)
    elif pricing.pricing_model == PRICING_MODEL_MARKUP:
        total, price_per_adult, price_per_dog = _markup_prices(pricing)
    else:
        total, price_per_adult, price_per_dog = _legacy_prices(pricing)

    subtotal_adults, subtotal_dogs = reconcile_subtotals(
        total, price_per_adult, price_per_dog, pricing.guests, pricing.dogs
    )

    return PricingResult(
        total_amount=total,
        price_per_adult=price_per_adult,
        price_per_dog=price_per_dog,
        subtotal_adults=subtotal_adults,
        subtotal_dogs=subtotal_dogs,
    )


def calculate_total(pricing: PricingInput) -> Decimal:
    """Convenience wrapper returning only the total amount."""
    return calculate_price(pricing).total_amount


def get_minimum_price(product) -> Decimal:
    """
    Starting price shown for a product.

    Dog-only classes and experiences start at the price of one dog;
    everything else at the price of one adult with one dog.
    """
    if product.is_dog_only:
        return calculate_price(product.pricing_input(guests=0, dogs=1)).price_per_dog
    return calculate_price(product.pricing_input(guests=1, dogs=1)).total_amount


def to_cents(amount) -> int:
    """Convert a euro amount to integer cents for the payment processor."""
    return int(round_price(amount) * HUNDRED)
