import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from flixdog_pricing.catalog import ProductCatalog
from flixdog_pricing.checkout import AvailabilityStore, CheckoutError, CheckoutRequest, QuoteBuilder
from flixdog_pricing.config import configure_logging


def debug(product_id: str, guests: int = 2, dogs: int = 1):
    configure_logging("DEBUG")
    catalog = ProductCatalog()
    availability = AvailabilityStore()

    product = catalog.get(product_id)
    if product is None:
        print(f"Unknown product {product_id}")
        return
    print(f"Product: {product.name} ({product.type}, {product.pricing_model})")

    slots = availability.for_product(product_id)
    if not slots:
        print("No availability slots for this product")
        return
    slot = slots[0]
    print(f"Using slot {slot.id} on {slot.date} "
          f"({slot.available_adults} adults / {slot.available_dogs} dogs free)")

    req = CheckoutRequest(
        product_id=product.id,
        product_type=product.type,
        availability_slot_id=slot.id,
        date=slot.date,
        time_slot=slot.time_slot,
        guests=0 if product.is_dog_only else guests,
        dogs=dogs,
    )
    try:
        quote = QuoteBuilder(catalog, availability).build(req)
    except CheckoutError as e:
        print(f"\nRejected ({e.status_code}): {e.message}")
        return

    print("\nTrace:")
    print(quote.get_trace_text())
    print("\nLine items:")
    for item in quote.line_items:
        print(f"  {item.name}: {item.unit_amount} x {item.quantity}")
    for warning in quote.warnings:
        print(f"  WARNING: {warning}")
    print(f"\nTotal: {quote.total_cents} cents")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: debug_quote.py PRODUCT_ID [GUESTS] [DOGS]")
        sys.exit(1)
    args = sys.argv[1:]
    debug(args[0], *(int(a) for a in args[1:3]))
