"""
Price formatting for storefront display (Italian storefront, euro amounts).
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext

from .models import to_decimal
from .pricing_engine import round_price, get_minimum_price

UNIT_DOG = "/ cane"
UNIT_PAIR = "/ binomio"  # one adult with one dog


@dataclass(frozen=True)
class CardPrice:
    """Price label and unit suffix shown on a product card."""
    price: str
    unit: str


def _round_to_integer(value) -> Decimal:
    amount = to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 1)
        return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def format_price(price) -> str:
    """Format as "€12.50"."""
    return f"€{round_price(price)}"


def format_price_from(price) -> str:
    """Format as "Da €12.50", or "Da €0" for non-positive prices."""
    if to_decimal(price) <= 0:
        return "Da €0"
    return f"Da €{round_price(price)}"


def format_price_from_no_decimals(price) -> str:
    """Format as "Da €13" (rounded to the nearest euro)."""
    if to_decimal(price) <= 0:
        return "Da €0"
    return f"Da €{_round_to_integer(price)}"


def get_price_and_unit_for_card(product) -> CardPrice:
    minimum_price = get_minimum_price(product)
    if minimum_price <= 0:
        return CardPrice(price="Da €0", unit="")

    unit = UNIT_DOG if product.is_dog_only else UNIT_PAIR
    return CardPrice(price=f"Da €{_round_to_integer(minimum_price)}", unit=unit)
