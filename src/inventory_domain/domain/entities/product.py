"""Product entity."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Product:
    """A catalog product. Identity (`id`, `sku`) does not change after creation."""

    id: str
    name: str
    sku: str
    price: float
    cost: float = 0.0
    min_stock: int = 0
    max_stock: int = 0
    unit: str = "kg"
    category_id: Optional[str] = None
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Post-initialization for validation."""
        if self.price < 0:
            raise ValueError("Price cannot be negative.")
        if self.cost < 0:
            raise ValueError("Cost cannot be negative.")
        if self.min_stock > self.max_stock:
            raise ValueError("Minimum stock cannot exceed maximum stock.")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            sku=data["sku"],
            price=float(data.get("price", 0)),
            cost=float(data.get("cost", 0)),
            min_stock=int(data.get("min_stock", 0)),
            max_stock=int(data.get("max_stock", 0)),
            unit=data.get("unit", "kg"),
            category_id=str(data["category_id"]) if data.get("category_id") is not None else None,
            tags=list(data.get("tags", [])),
        )
