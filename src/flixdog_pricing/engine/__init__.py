"""Engine subpackage - price calculation and display formatting."""
from .models import PricingInput, PricingResult, to_decimal
from .pricing_engine import (
    calculate_price,
    calculate_total,
    get_minimum_price,
    round_price,
    to_cents,
)
from .formatting import (
    CardPrice,
    format_price,
    format_price_from,
    format_price_from_no_decimals,
    get_price_and_unit_for_card,
)

__all__ = [
    'PricingInput', 'PricingResult', 'to_decimal',
    'calculate_price', 'calculate_total', 'get_minimum_price', 'round_price', 'to_cents',
    'CardPrice', 'format_price', 'format_price_from', 'format_price_from_no_decimals',
    'get_price_and_unit_for_card',
]
