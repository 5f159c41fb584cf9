"""
Quote Builder - computes the amount charged at checkout.

Uses the same calculate_price as the storefront display, so the amount
shown to the customer and the amount charged cannot drift apart.

Resolution order:
1. Validate the request shape (type, counts, date, time slot)
2. Resolve the product (exists, active, type matches)
3. Resolve the availability slot (matches product and date, has capacity)
4. Price the party and reject non-chargeable totals
5. Build processor line items in cents, collapsing to a single line
   when per-unit cents cannot reproduce the total
"""
import logging
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..catalog.products import Product, ProductCatalog, PRODUCT_TYPES
from ..config.settings import get_settings, Settings
from ..engine.models import PricingResult
from ..engine.pricing_engine import calculate_price, to_cents
from .availability import AvailabilitySlot, AvailabilityStore
from .errors import (
    CheckoutValidationError,
    InsufficientCapacityError,
    InvalidPricingError,
    ProductNotFoundError,
    SlotNotFoundError,
)
from .models import CheckoutQuote, CheckoutRequest, LineItem

logger = logging.getLogger(__name__)

TIME_SLOT_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')

# Per-unit cents may be off by one cent against the total after division
LINE_ITEMS_TOLERANCE_CENTS = 1


def normalize_date(value) -> str:
    """Return an ISO date string, or raise CheckoutValidationError."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    try:
        # Either a bare date or a full ISO timestamp ("2026-06-14T09:30:00Z")
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
        return date.fromisoformat(text).isoformat()
    except ValueError:
        raise CheckoutValidationError("date is required and must be a valid date string (YYYY-MM-DD)")


def _people_label(count: int) -> str:
    return "persona" if count == 1 else "persone"


def _dogs_label(count: int) -> str:
    return "cane" if count == 1 else "cani"


class QuoteBuilder:
    """
    Builds checkout quotes against the product catalog and availability.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        availability: AvailabilityStore,
        settings: Optional[Settings] = None,
    ):
        self.catalog = catalog
        self.availability = availability
        self.settings = settings or get_settings()

    def build(self, request: CheckoutRequest) -> CheckoutQuote:
        """
        Validate a checkout request and compute the amount to charge.

        Raises a CheckoutError subclass when the request cannot be charged.
        """
        request_date = self._validate_request(request)
        product = self._resolve_product(request)
        slot = self._resolve_slot(request, product, request_date)

        pricing = calculate_price(product.pricing_input(request.guests, request.dogs))
        if pricing.total_amount <= 0:
            logger.error(
                "Invalid price for product %s: model=%s guests=%s dogs=%s total=%s",
                product.id, product.pricing_model, request.guests, request.dogs, pricing.total_amount,
            )
            raise InvalidPricingError("Invalid pricing: total amount must be greater than 0")

        total_cents = to_cents(pricing.total_amount)
        if total_cents < self.settings.min_charge_cents:
            logger.error("Amount below processor minimum: %s cents", total_cents)
            raise InvalidPricingError(
                f"Amount too low. Minimum payment is {Decimal(self.settings.min_charge_cents) / 100:.2f} EUR"
            )

        quote = CheckoutQuote(
            product_id=product.id,
            product_name=product.name,
            product_type=product.type,
            availability_slot_id=slot.id,
            guests=request.guests,
            dogs=request.dogs,
            pricing_model=product.pricing_model,
            pricing=pricing,
            total_cents=total_cents,
            currency=self.settings.currency,
        )
        quote.add_trace("Product", f"Resolved {product.type} '{product.name}'", product.id)
        quote.add_trace("Slot", f"{slot.date} {slot.time_slot or ''}".strip(), slot.id)
        quote.add_trace("Pricing Model", "Model used for calculation", product.pricing_model)
        quote.add_trace("Total", "Amount to charge", f"€{pricing.total_amount}")

        quote.line_items = self._build_line_items(product, request, pricing, total_cents, quote)

        logger.info(
            "Quote built for product %s: total_cents=%s line_items=%d",
            product.id, total_cents, len(quote.line_items),
        )
        return quote

    def _validate_request(self, request: CheckoutRequest) -> str:
        if request.product_type not in PRODUCT_TYPES:
            raise CheckoutValidationError("productType must be one of: experience, class, trip")

        max_party = self.settings.max_party_size
        for field_name in ('guests', 'dogs'):
            value = getattr(request, field_name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0 or value > max_party:
                raise CheckoutValidationError(f"{field_name} must be an integer between 0 and {max_party}")

        if request.time_slot and not TIME_SLOT_PATTERN.match(request.time_slot):
            raise CheckoutValidationError(
                f'timeSlot must be in format HH:MM or null, received: "{request.time_slot}"'
            )

        return normalize_date(request.date)

    def _resolve_product(self, request: CheckoutRequest) -> Product:
        product = self.catalog.get(request.product_id)
        if product is None:
            logger.error("Product not found: %s", request.product_id)
            raise ProductNotFoundError("Product not found")

        if not product.active:
            logger.error("Product is not active: %s", product.id)
            raise CheckoutValidationError("Product is not available")

        if product.type != request.product_type:
            raise CheckoutValidationError(
                f"Product {product.id} is a {product.type}, not a {request.product_type}"
            )

        if not product.no_adults and request.guests < 1:
            raise CheckoutValidationError("guests must be at least 1 for this product")

        return product

    def _resolve_slot(self, request: CheckoutRequest, product: Product, request_date: str) -> AvailabilitySlot:
        slot = self.availability.get(request.availability_slot_id)
        if slot is None:
            logger.error("Availability slot not found: %s", request.availability_slot_id)
            raise SlotNotFoundError("Availability slot not found")

        if slot.product_id != product.id or slot.product_type != request.product_type:
            logger.error(
                "Slot %s belongs to %s %s, not %s %s",
                slot.id, slot.product_type, slot.product_id, request.product_type, product.id,
            )
            raise CheckoutValidationError("Availability slot does not match product")

        if slot.date[:10] != request_date:
            raise CheckoutValidationError("Availability slot date does not match requested date")

        # Adult capacity only matters when adults are booked
        if request.guests > 0 and request.guests > slot.available_adults:
            raise InsufficientCapacityError(
                f"Not enough capacity. Available: {slot.available_adults} adults, requested: {request.guests}"
            )

        if request.dogs > slot.available_dogs:
            raise InsufficientCapacityError(
                f"Not enough capacity. Available: {slot.available_dogs} dogs, requested: {request.dogs}"
            )

        return slot

    def _build_line_items(
        self,
        product: Product,
        request: CheckoutRequest,
        pricing: PricingResult,
        total_cents: int,
        quote: CheckoutQuote,
    ) -> list[LineItem]:
        """Per-unit line items derived from the reconciled subtotals."""
        currency = self.settings.currency
        guests, dogs = request.guests, request.dogs
        line_items = []

        adjusted_price_per_adult = pricing.subtotal_adults / guests if guests > 0 else Decimal(0)
        adjusted_price_per_dog = pricing.subtotal_dogs / dogs if dogs > 0 else Decimal(0)

        if guests > 0 and adjusted_price_per_adult > 0:
            line_items.append(LineItem(
                name=f"{product.name} - {guests} {_people_label(guests)}",
                description=f"Prenotazione per {guests} {_people_label(guests)}",
                unit_amount=to_cents(adjusted_price_per_adult),
                quantity=guests,
                currency=currency,
            ))

        if dogs > 0 and adjusted_price_per_dog > 0:
            line_items.append(LineItem(
                name=f"{product.name} - {dogs} {_dogs_label(dogs)}",
                description=f"Prenotazione per {dogs} {_dogs_label(dogs)}",
                unit_amount=to_cents(adjusted_price_per_dog),
                quantity=dogs,
                currency=currency,
            ))

        line_items_sum = sum(item.amount for item in line_items)
        mismatch = line_items_sum - total_cents

        if line_items and abs(mismatch) > LINE_ITEMS_TOLERANCE_CENTS:
            logger.error(
                "Line items sum %s does not match total %s (difference %s), using single line item",
                line_items_sum, total_cents, mismatch,
            )
            quote.add_warning(f"Line items off by {mismatch} cents, collapsed to a single line item")
            line_items = []
        elif line_items and mismatch != 0:
            quote.add_warning(f"Line items differ from total by {mismatch} cent")

        if not line_items:
            line_items.append(LineItem(
                name=product.name or "Prenotazione",
                description=product.description,
                unit_amount=total_cents,
                quantity=1,
                currency=currency,
            ))
            quote.add_trace("Line Items", "Single line item for the full amount", f"{total_cents} cents")
        else:
            quote.add_trace(
                "Line Items",
                f"{len(line_items)} per-unit line items",
                f"{sum(item.amount for item in line_items)} cents",
            )

        return line_items
