"""
Data models for the pricing engine.

Uses dataclasses for structured, immutable data representation.
All money values are decimal.Decimal so the display side and the
charge side agree to the cent.
"""
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation


PRICING_MODEL_LEGACY = "legacy"
PRICING_MODEL_PERCENTAGE = "percentage"
PRICING_MODEL_MARKUP = "markup"

PRICING_MODELS = (PRICING_MODEL_LEGACY, PRICING_MODEL_PERCENTAGE, PRICING_MODEL_MARKUP)

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """
    Coerce any value to a finite Decimal.

    Missing, blank, NaN, infinite or non-numeric values become 0.
    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, float) and not math.isfinite(value):
        return ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    return result if result.is_finite() else ZERO


def to_count(value) -> int:
    """Coerce a guest/dog count to int; invalid values become 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(to_decimal(value))


def normalize_pricing_model(value) -> str:
    """Lowercase known models; anything else is priced as legacy."""
    model = str(value or "").strip().lower()
    return model if model in PRICING_MODELS else PRICING_MODEL_LEGACY


@dataclass(frozen=True)
class PricingInput:
    """
    Everything needed to price one party for one product.

    Values are normalized on construction, so callers may pass raw
    storage values (None, floats, strings) directly.
    """
    pricing_model: str = PRICING_MODEL_LEGACY
    provider_cost_adult_base: Decimal = ZERO
    provider_cost_dog_base: Decimal = ZERO
    margin_percentage: Decimal = ZERO
    markup_adult: Decimal = ZERO
    markup_dog: Decimal = ZERO
    legacy_price_adult: Decimal = ZERO
    legacy_price_dog: Decimal = ZERO
    guests: int = 0
    dogs: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'pricing_model', normalize_pricing_model(self.pricing_model))
        for name in (
            'provider_cost_adult_base', 'provider_cost_dog_base', 'margin_percentage',
            'markup_adult', 'markup_dog', 'legacy_price_adult', 'legacy_price_dog',
        ):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        object.__setattr__(self, 'guests', to_count(self.guests))
        object.__setattr__(self, 'dogs', to_count(self.dogs))

    @property
    def provider_cost_total(self) -> Decimal:
        """Unrounded wholesale cost of the whole party."""
        return (self.provider_cost_adult_base * self.guests) + (self.provider_cost_dog_base * self.dogs)


@dataclass(frozen=True)
class PricingResult:
    """Result of a price calculation. Subtotals always sum to total_amount."""
    total_amount: Decimal
    price_per_adult: Decimal
    price_per_dog: Decimal
    subtotal_adults: Decimal
    subtotal_dogs: Decimal

    def to_dict(self) -> dict:
        return {
            "total_amount": self.total_amount,
            "price_per_adult": self.price_per_adult,
            "price_per_dog": self.price_per_dog,
            "subtotal_adults": self.subtotal_adults,
            "subtotal_dogs": self.subtotal_dogs,
        }
