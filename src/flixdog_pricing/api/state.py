"""
Shared catalog/availability instances for the API, exposed as FastAPI
dependencies so tests can swap them through app.dependency_overrides.
"""
from typing import Optional

from fastapi import Depends

from ..catalog.products import ProductCatalog
from ..checkout.availability import AvailabilityStore
from ..checkout.quote_builder import QuoteBuilder

_catalog: Optional[ProductCatalog] = None
_availability: Optional[AvailabilityStore] = None


def get_catalog() -> ProductCatalog:
    global _catalog
    if _catalog is None:
        _catalog = ProductCatalog()
    return _catalog


def get_availability() -> AvailabilityStore:
    global _availability
    if _availability is None:
        _availability = AvailabilityStore()
    return _availability


def get_quote_builder(
    catalog: ProductCatalog = Depends(get_catalog),
    availability: AvailabilityStore = Depends(get_availability),
) -> QuoteBuilder:
    return QuoteBuilder(catalog, availability)

