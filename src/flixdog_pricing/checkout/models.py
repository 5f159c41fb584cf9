"""
Data models for checkout quotes.
"""
from dataclasses import dataclass, field
from typing import Optional

from ..engine.models import PricingResult


@dataclass
class TraceStep:
    """A single step in the quote resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class CheckoutRequest:
    """A customer's request to book a product slot."""
    product_id: str
    product_type: str
    availability_slot_id: str
    date: str  # ISO date, YYYY-MM-DD
    guests: int
    dogs: int
    time_slot: Optional[str] = None  # HH:MM


@dataclass
class LineItem:
    """A line item as sent to the payment processor (amounts in cents)."""
    name: str
    unit_amount: int
    quantity: int
    description: Optional[str] = None
    currency: str = "eur"

    @property
    def amount(self) -> int:
        return self.unit_amount * self.quantity


@dataclass
class CheckoutQuote:
    """Authoritative amount to charge for a checkout request."""
    product_id: str
    product_name: str
    product_type: str
    availability_slot_id: str
    guests: int
    dogs: int
    pricing_model: str
    pricing: PricingResult
    total_cents: int
    currency: str = "eur"
    line_items: list[LineItem] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def line_items_total(self) -> int:
        return sum(item.amount for item in self.line_items)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the quote trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
