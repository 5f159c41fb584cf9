import logging
from decimal import Decimal
from typing import Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from flixdog_pricing import __version__
from flixdog_pricing.catalog.products import Product, ProductCatalog, SORT_OPTIONS
from flixdog_pricing.checkout import (
    AvailabilityStore,
    CheckoutError,
    CheckoutQuote,
    CheckoutRequest,
    QuoteBuilder,
)
from flixdog_pricing.checkout.quote_builder import TIME_SLOT_PATTERN
from flixdog_pricing.config import configure_logging, get_settings
from flixdog_pricing.engine import (
    PricingInput,
    PricingResult,
    calculate_price,
    format_price,
    format_price_from,
    format_price_from_no_decimals,
    get_price_and_unit_for_card,
)
from flixdog_pricing.api.state import (
    get_availability,
    get_catalog,
    get_quote_builder,
)

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="FlixDog Pricing API",
    description="Price calculation and checkout quotes for the FlixDog storefront",
    version=__version__,
)

# In development any localhost port may call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_origin_regex=r"http://localhost(:\d+)?" if settings.is_development else None,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    max_age=86400,
)


class CalcRequest(BaseModel):
    pricing_model: str = "legacy"
    provider_cost_adult_base: Decimal = Decimal(0)
    provider_cost_dog_base: Decimal = Decimal(0)
    margin_percentage: Decimal = Decimal(0)
    markup_adult: Decimal = Decimal(0)
    markup_dog: Decimal = Decimal(0)
    legacy_price_adult: Decimal = Decimal(0)
    legacy_price_dog: Decimal = Decimal(0)
    guests: int = Field(0, ge=0)
    dogs: int = Field(0, ge=0)


class CalcResponse(BaseModel):
    total_amount: float
    price_per_adult: float
    price_per_dog: float
    subtotal_adults: float
    subtotal_dogs: float
    formatted_total: str
    formatted_subtotal_adults: str
    formatted_subtotal_dogs: str


class ProductCard(BaseModel):
    id: str
    type: str
    category: str
    name: str
    location: Optional[str]
    no_adults: bool
    minimum_price: float
    price_from: str
    card_price: str
    card_unit: str


class ProductDetail(ProductCard):
    description: Optional[str]
    max_adults: int
    max_dogs: int
    pricing_model: str
    price_from_exact: str


class SlotResponse(BaseModel):
    id: str
    date: str
    time_slot: Optional[str]
    available_adults: int
    available_dogs: int


class CheckoutQuoteRequest(BaseModel):
    product_id: str
    product_type: Literal["experience", "class", "trip"]
    availability_slot_id: str
    date: str
    time_slot: Optional[str] = Field(None, pattern=TIME_SLOT_PATTERN.pattern)
    guests: int = Field(ge=0, le=settings.max_party_size)
    dogs: int = Field(ge=0, le=settings.max_party_size)


class LineItemResponse(BaseModel):
    name: str
    description: Optional[str]
    currency: str
    unit_amount: int
    quantity: int


class QuoteResponse(BaseModel):
    product_id: str
    product_name: str
    availability_slot_id: str
    guests: int
    dogs: int
    pricing_model: str
    currency: str
    total_cents: int
    pricing: CalcResponse
    line_items: list[LineItemResponse]
    warnings: list[str]
    trace: list[dict]


def _calc_response(result: PricingResult) -> CalcResponse:
    return CalcResponse(
        **{key: float(value) for key, value in result.to_dict().items()},
        formatted_total=format_price(result.total_amount),
        formatted_subtotal_adults=format_price(result.subtotal_adults),
        formatted_subtotal_dogs=format_price(result.subtotal_dogs),
    )


def _product_card(product: Product) -> dict:
    minimum_price = product.minimum_price
    card = get_price_and_unit_for_card(product)
    return {
        "id": product.id,
        "type": product.type,
        "category": product.category,
        "name": product.name,
        "location": product.location,
        "no_adults": product.no_adults,
        "minimum_price": float(minimum_price),
        "price_from": format_price_from_no_decimals(minimum_price),
        "card_price": card.price,
        "card_unit": card.unit,
    }


def _quote_response(quote: CheckoutQuote) -> QuoteResponse:
    return QuoteResponse(
        product_id=quote.product_id,
        product_name=quote.product_name,
        availability_slot_id=quote.availability_slot_id,
        guests=quote.guests,
        dogs=quote.dogs,
        pricing_model=quote.pricing_model,
        currency=quote.currency,
        total_cents=quote.total_cents,
        pricing=_calc_response(quote.pricing),
        line_items=[
            LineItemResponse(
                name=item.name,
                description=item.description,
                currency=item.currency,
                unit_amount=item.unit_amount,
                quantity=item.quantity,
            )
            for item in quote.line_items
        ],
        warnings=quote.warnings,
        trace=[{"step": t.step, "description": t.description, "value": t.value} for t in quote.trace],
    )


def _get_product_or_404(catalog: ProductCatalog, product_id: str) -> Product:
    product = catalog.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")
    return product


@app.get("/")
async def root():
    return {"status": "online", "message": "FlixDog Pricing API Active"}


@app.post("/calculate", response_model=CalcResponse)
async def calculate(req: CalcRequest):
    result = calculate_price(PricingInput(**req.model_dump()))
    return _calc_response(result)


@app.get("/catalog", response_model=list[ProductCard])
async def get_catalog_listing(
    search: Optional[str] = None,
    product_type: Optional[Literal["experience", "class", "trip"]] = Query(None, alias="type"),
    sort: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    catalog: ProductCatalog = Depends(get_catalog),
):
    if sort is not None and sort not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"sort must be one of: {', '.join(SORT_OPTIONS)}")

    products = catalog.search(query=search, product_type=product_type, sort=sort, limit=limit)
    return [_product_card(p) for p in products]


@app.get("/products/{product_id}", response_model=ProductDetail)
async def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    product = _get_product_or_404(catalog, product_id)
    return {
        **_product_card(product),
        "description": product.description,
        "max_adults": product.max_adults,
        "max_dogs": product.max_dogs,
        "pricing_model": product.pricing_model,
        "price_from_exact": format_price_from(product.minimum_price),
    }


@app.get("/products/{product_id}/price", response_model=CalcResponse)
async def get_product_price(
    product_id: str,
    guests: int = Query(1, ge=0, le=settings.max_party_size),
    dogs: int = Query(1, ge=0, le=settings.max_party_size),
    catalog: ProductCatalog = Depends(get_catalog),
):
    product = _get_product_or_404(catalog, product_id)
    if product.is_dog_only:
        guests = 0
    return _calc_response(calculate_price(product.pricing_input(guests, dogs)))


@app.get("/products/{product_id}/availability", response_model=list[SlotResponse])
async def get_product_availability(
    product_id: str,
    catalog: ProductCatalog = Depends(get_catalog),
    availability: AvailabilityStore = Depends(get_availability),
):
    _get_product_or_404(catalog, product_id)
    return [
        SlotResponse(
            id=slot.id,
            date=slot.date,
            time_slot=slot.time_slot,
            available_adults=slot.available_adults,
            available_dogs=slot.available_dogs,
        )
        for slot in availability.for_product(product_id)
    ]


@app.post("/checkout/quote", response_model=QuoteResponse)
async def create_checkout_quote(
    req: CheckoutQuoteRequest,
    builder: QuoteBuilder = Depends(get_quote_builder),
):
    try:
        quote = builder.build(CheckoutRequest(**req.model_dump()))
    except CheckoutError as e:
        logger.warning("Checkout rejected (%s): %s", e.status_code, e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _quote_response(quote)


@app.get("/system/status")
async def get_status(
    catalog: ProductCatalog = Depends(get_catalog),
    availability: AvailabilityStore = Depends(get_availability),
):
    return {
        "engine_active": True,
        "version": __version__,
        "products_count": len(catalog),
        "slots_count": len(availability),
        "products_file": str(catalog.products_file),
        "availability_file": str(availability.availability_file),
    }


@app.post("/system/reload")
async def reload_data(
    catalog: ProductCatalog = Depends(get_catalog),
    availability: AvailabilityStore = Depends(get_availability),
):
    """Re-read the catalog and availability files after a new export."""
    catalog.reload()
    availability.reload()
    logger.info("Reloaded %d products and %d slots", len(catalog), len(availability))
    return {"success": True, "products_count": len(catalog), "slots_count": len(availability)}


def run():
    """Serve the API with uvicorn; reloads on code changes in development."""
    logger.info("Starting FlixDog Pricing API on %s:%s", settings.api_host, settings.api_port)
    uvicorn.run(
        "flixdog_pricing.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
