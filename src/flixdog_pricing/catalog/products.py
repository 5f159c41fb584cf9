"""
Product catalog - experiences, classes and trips with their pricing fields.

Products are loaded from a CSV or Excel export of the product tables and
mapped into Product dataclasses. Pricing fields follow the storefront's
permissive rules: anything missing or non-numeric counts as 0.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.models import (
    PricingInput,
    PRICING_MODEL_PERCENTAGE,
    ZERO,
    normalize_pricing_model,
    to_count,
    to_decimal,
)
from ..engine.pricing_engine import get_minimum_price

logger = logging.getLogger(__name__)

PRODUCT_TYPES = ('experience', 'class', 'trip')
DOG_ONLY_TYPES = ('experience', 'class')

CATEGORY_LABELS = {
    'experience': 'Esperienza',
    'class': 'Classe',
    'trip': 'Viaggio',
}

SORT_OPTIONS = ('price_asc', 'price_desc', 'newest')


def clean_str(value) -> Optional[str]:
    """Return a stripped string, or None for missing / NaN / blank values."""
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def parse_flag(value, default: bool = False) -> bool:
    """Booleans arrive as True/False, 1/0 or "true"/"1" depending on the export."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    text = str(value).strip().lower()
    if not text:
        return default
    return text in ('true', '1', 'yes', 't')


def normalize_product_type(value) -> str:
    product_type = (clean_str(value) or '').lower()
    return product_type if product_type in PRODUCT_TYPES else 'experience'


@dataclass
class Product:
    """A bookable experience, class or trip."""
    id: str
    type: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    active: bool = True
    no_adults: bool = False
    max_adults: int = 0
    max_dogs: int = 0

    # Pricing
    pricing_model: str = PRICING_MODEL_PERCENTAGE
    provider_cost_adult_base: Decimal = ZERO
    provider_cost_dog_base: Decimal = ZERO
    margin_percentage: Decimal = ZERO
    markup_adult: Decimal = ZERO
    markup_dog: Decimal = ZERO
    price_adult_base: Decimal = ZERO  # legacy
    price_dog_base: Decimal = ZERO    # legacy

    created_at: Optional[str] = None

    @property
    def is_dog_only(self) -> bool:
        """Dog-only classes/experiences are booked without adults."""
        return self.no_adults and self.type in DOG_ONLY_TYPES

    @property
    def category(self) -> str:
        return CATEGORY_LABELS.get(self.type, CATEGORY_LABELS['experience'])

    def pricing_input(self, guests: int, dogs: int) -> PricingInput:
        """Build the calculator input for a party of guests and dogs."""
        return PricingInput(
            pricing_model=self.pricing_model,
            provider_cost_adult_base=self.provider_cost_adult_base,
            provider_cost_dog_base=self.provider_cost_dog_base,
            margin_percentage=self.margin_percentage,
            markup_adult=self.markup_adult,
            markup_dog=self.markup_dog,
            legacy_price_adult=self.price_adult_base,
            legacy_price_dog=self.price_dog_base,
            guests=guests,
            dogs=dogs,
        )

    @property
    def minimum_price(self) -> Decimal:
        return get_minimum_price(self)


def product_from_row(row, product_type: Optional[str] = None) -> Product:
    """
    Map a storage row (dict or pandas Series) into a Product.

    A missing pricing_model means "percentage", which in turn falls back
    to the legacy flat prices when no provider cost is set.
    """
    raw_model = clean_str(row.get('pricing_model'))
    pricing_model = normalize_pricing_model(raw_model) if raw_model else PRICING_MODEL_PERCENTAGE

    return Product(
        id=clean_str(row.get('id')) or '',
        type=normalize_product_type(product_type or row.get('type')),
        name=clean_str(row.get('name')) or '',
        description=clean_str(row.get('description')),
        location=clean_str(row.get('location')),
        active=parse_flag(row.get('active'), default=True),
        no_adults=parse_flag(row.get('no_adults')),
        max_adults=to_count(row.get('max_adults')),
        max_dogs=to_count(row.get('max_dogs')),
        pricing_model=pricing_model,
        provider_cost_adult_base=to_decimal(row.get('provider_cost_adult_base')),
        provider_cost_dog_base=to_decimal(row.get('provider_cost_dog_base')),
        margin_percentage=to_decimal(row.get('margin_percentage')),
        markup_adult=to_decimal(row.get('markup_adult')),
        markup_dog=to_decimal(row.get('markup_dog')),
        price_adult_base=to_decimal(row.get('price_adult_base')),
        price_dog_base=to_decimal(row.get('price_dog_base')),
        created_at=clean_str(row.get('created_at')),
    )


def read_table(path: Path, id_columns: tuple = ('id',)) -> pd.DataFrame:
    """Read a CSV or Excel export, keeping id columns as strings."""
    dtype = {column: str for column in id_columns}
    if path.suffix.lower() in ('.xlsx', '.xls'):
        return pd.read_excel(path, sheet_name=0, dtype=dtype)
    return pd.read_csv(path, dtype=dtype)


class ProductCatalog:
    """
    In-memory product catalog backed by a CSV/Excel export.

    Lookup is by product id; search filters on name, description and
    location and can sort by starting price or creation date.
    """

    def __init__(self, settings: Optional[Settings] = None, products_file: Optional[Path] = None):
        self.settings = settings or get_settings()
        self.products_file = Path(products_file) if products_file else self.settings.products_file
        self._load()

    def _load(self):
        if not self.products_file.exists():
            raise FileNotFoundError(
                f"Product catalog not found at {self.products_file}. "
                "Set FLIXDOG_PRODUCTS_FILE to the exported product table."
            )

        self.products_df = read_table(self.products_file)
        self.products_df.columns = [str(c).strip() for c in self.products_df.columns]

        self.products: dict[str, Product] = {}
        for _, row in self.products_df.iterrows():
            product = product_from_row(row)
            if not product.id:
                logger.warning("Skipping product row without id: %s", product.name or "<unnamed>")
                continue
            if product.id in self.products:
                logger.warning("Duplicate product id %s, keeping first entry", product.id)
                continue
            self.products[product.id] = product

        logger.info("Loaded %d products from %s", len(self.products), self.products_file)

    def reload(self):
        """Re-read the catalog file, e.g. after a new export was dropped in place."""
        self._load()

    def __len__(self) -> int:
        return len(self.products)

    def get(self, product_id: str) -> Optional[Product]:
        return self.products.get(str(product_id).strip())

    def search(
        self,
        query: Optional[str] = None,
        product_type: Optional[str] = None,
        include_inactive: bool = False,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Product]:
        """
        Filter and sort the catalog.

        sort is one of "price_asc", "price_desc" (by starting price) or
        "newest"; anything else keeps file order.
        """
        df = self.products_df
        if query and not df.empty:
            mask = pd.Series(False, index=df.index)
            for column in ('name', 'description', 'location'):
                if column in df.columns:
                    mask |= df[column].fillna('').astype(str).str.contains(query, case=False, na=False, regex=False)
            df = df[mask]

        results = []
        seen = set()
        for _, row in df.iterrows():
            product = self.get(row.get('id'))
            if product is None or product.id in seen:
                continue
            seen.add(product.id)
            if product_type and product.type != product_type:
                continue
            if not include_inactive and not product.active:
                continue
            results.append(product)

        if sort == 'price_asc':
            results.sort(key=lambda p: p.minimum_price)
        elif sort == 'price_desc':
            results.sort(key=lambda p: p.minimum_price, reverse=True)
        elif sort == 'newest':
            results.sort(key=lambda p: p.created_at or '', reverse=True)

        if limit is not None:
            results = results[:limit]
        return results
