import os
import sys

import pandas as pd
import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from flixdog_pricing.config.settings import get_data_dir
from flixdog_pricing.catalog import ProductCatalog
from flixdog_pricing.checkout import AvailabilityStore

# Ids from the bundled sample data
TREKKING_ID = "3f1c2a9e-7b4d-4c1e-9a2f-5d8e6b7c1a01"     # percentage, 40/15 +25%
AGILITY_ID = "3f1c2a9e-7b4d-4c1e-9a2f-5d8e6b7c1a02"      # markup, dog-only class
TOSCANA_ID = "3f1c2a9e-7b4d-4c1e-9a2f-5d8e6b7c1a03"      # legacy trip 180/40
APERITIVO_ID = "3f1c2a9e-7b4d-4c1e-9a2f-5d8e6b7c1a04"    # no model, legacy 25/10
EDUCAZIONE_ID = "3f1c2a9e-7b4d-4c1e-9a2f-5d8e6b7c1a05"   # percentage class, adults required
BARCA_ID = "3f1c2a9e-7b4d-4c1e-9a2f-5d8e6b7c1a06"        # inactive

TREKKING_SLOT = "9a7e4b10-2c3d-4e5f-8a9b-0c1d2e3f4a01"
TREKKING_FULL_SLOT = "9a7e4b10-2c3d-4e5f-8a9b-0c1d2e3f4a02"
AGILITY_SLOT = "9a7e4b10-2c3d-4e5f-8a9b-0c1d2e3f4a03"
EDUCAZIONE_SLOT = "9a7e4b10-2c3d-4e5f-8a9b-0c1d2e3f4a06"


@pytest.fixture(scope="module")
def catalog():
    return ProductCatalog(products_file=get_data_dir() / 'products.csv')


@pytest.fixture(scope="module")
def availability():
    return AvailabilityStore(availability_file=get_data_dir() / 'availability_slots.csv')


@pytest.fixture
def write_tables(tmp_path):
    """Write product and slot rows to CSV and return the two paths."""
    def _write(products: list[dict], slots: list[dict]):
        products_path = tmp_path / 'products.csv'
        slots_path = tmp_path / 'availability_slots.csv'
        pd.DataFrame(products).to_csv(products_path, index=False)
        pd.DataFrame(slots).to_csv(slots_path, index=False)
        return products_path, slots_path
    return _write
