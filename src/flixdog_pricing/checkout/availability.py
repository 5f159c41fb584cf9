"""
Availability slots - dated capacity for each product.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..catalog.products import read_table, clean_str, normalize_product_type
from ..config.settings import get_settings, Settings
from ..engine.models import to_count

logger = logging.getLogger(__name__)


@dataclass
class AvailabilitySlot:
    """Capacity of one product on one date (and optional time)."""
    id: str
    product_id: str
    product_type: str
    date: str
    time_slot: Optional[str] = None
    max_adults: int = 0
    booked_adults: int = 0
    max_dogs: int = 0
    booked_dogs: int = 0

    @property
    def available_adults(self) -> int:
        return self.max_adults - self.booked_adults

    @property
    def available_dogs(self) -> int:
        return self.max_dogs - self.booked_dogs

    @classmethod
    def from_row(cls, row) -> 'AvailabilitySlot':
        return cls(
            id=clean_str(row.get('id')) or '',
            product_id=clean_str(row.get('product_id')) or '',
            product_type=normalize_product_type(row.get('product_type')),
            date=clean_str(row.get('date')) or '',
            time_slot=clean_str(row.get('time_slot')),
            max_adults=to_count(row.get('max_adults')),
            booked_adults=to_count(row.get('booked_adults')),
            max_dogs=to_count(row.get('max_dogs')),
            booked_dogs=to_count(row.get('booked_dogs')),
        )


class AvailabilityStore:
    """Availability slots loaded from a CSV/Excel export."""

    def __init__(self, settings: Optional[Settings] = None, availability_file: Optional[Path] = None):
        self.settings = settings or get_settings()
        self.availability_file = Path(availability_file) if availability_file else self.settings.availability_file
        self._load()

    def _load(self):
        if not self.availability_file.exists():
            raise FileNotFoundError(
                f"Availability slots not found at {self.availability_file}. "
                "Set FLIXDOG_AVAILABILITY_FILE to the exported availability table."
            )

        df = read_table(self.availability_file, id_columns=('id', 'product_id'))
        df.columns = [str(c).strip() for c in df.columns]

        self.slots: dict[str, AvailabilitySlot] = {}
        for _, row in df.iterrows():
            slot = AvailabilitySlot.from_row(row)
            if slot.id:
                self.slots[slot.id] = slot

        logger.info("Loaded %d availability slots from %s", len(self.slots), self.availability_file)

    def reload(self):
        """Reload slots from disk."""
        self._load()

    def __len__(self) -> int:
        return len(self.slots)

    def get(self, slot_id: str) -> Optional[AvailabilitySlot]:
        return self.slots.get(str(slot_id).strip())

    def for_product(self, product_id: str) -> list[AvailabilitySlot]:
        """All slots of a product, ordered by date and time."""
        product_id = str(product_id).strip()
        slots = [s for s in self.slots.values() if s.product_id == product_id]
        slots.sort(key=lambda s: (s.date, s.time_slot or ''))
        return slots
