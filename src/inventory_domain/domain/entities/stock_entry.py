"""Stock Entry entity."""

from dataclasses import dataclass
from datetime import datetime

from .location import LocationRef


@dataclass
class StockEntry:
    """Quantity and reserved quantity of one product at one location."""

    location: LocationRef
    product_id: str
    quantity: int = 0
    reserved_quantity: int = 0
    last_updated: datetime | None = None

    def __post_init__(self) -> None:
        """Post-initialization for validation."""
        if self.reserved_quantity < 0:
            raise ValueError("Reserved quantity cannot be negative.")

    @property
    def available(self) -> int:
        return self.quantity - self.reserved_quantity

    @property
    def is_over_reserved(self) -> bool:
        """True when a physical count dropped below what is already reserved."""
        return self.reserved_quantity > self.quantity
