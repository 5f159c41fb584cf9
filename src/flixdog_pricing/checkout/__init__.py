"""Checkout subpackage - availability, quote building and checkout errors."""
from .availability import AvailabilitySlot, AvailabilityStore
from .errors import (
    CheckoutError,
    CheckoutValidationError,
    InsufficientCapacityError,
    InvalidPricingError,
    ProductNotFoundError,
    SlotNotFoundError,
)
from .models import CheckoutQuote, CheckoutRequest, LineItem
from .quote_builder import QuoteBuilder

__all__ = [
    'AvailabilitySlot', 'AvailabilityStore',
    'CheckoutError', 'CheckoutValidationError', 'InsufficientCapacityError',
    'InvalidPricingError', 'ProductNotFoundError', 'SlotNotFoundError',
    'CheckoutQuote', 'CheckoutRequest', 'LineItem', 'QuoteBuilder',
]
