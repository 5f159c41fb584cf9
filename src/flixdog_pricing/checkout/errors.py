"""
Checkout errors. Each carries the HTTP status the API answers with.
"""


class CheckoutError(Exception):
    """Base class for checkout failures."""
    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class CheckoutValidationError(CheckoutError):
    """Request is malformed or inconsistent with the product/slot."""


class ProductNotFoundError(CheckoutError):
    status_code = 404


class SlotNotFoundError(CheckoutError):
    status_code = 404


class InsufficientCapacityError(CheckoutError):
    """Slot does not have enough free places for the party."""


class InvalidPricingError(CheckoutError):
    """Computed amount cannot be charged (zero, negative or below the processor minimum)."""
