"""Warehouse and Shop entities, plus the LocationRef value object stock is keyed by."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class LocationKind(str, Enum):
    WAREHOUSE = "warehouse"
    SHOP = "shop"


@dataclass(frozen=True)  # Value objects are immutable
class LocationRef:
    """Identifies a warehouse or a shop; warehouse "1" and shop "1" are different locations."""

    kind: LocationKind
    id: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


@dataclass
class Warehouse:
    id: str
    name: str
    address: str = ""
    manager_id: Optional[str] = None
    capacity: int = 0

    @property
    def ref(self) -> LocationRef:
        return LocationRef(LocationKind.WAREHOUSE, self.id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Warehouse":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            address=data.get("address", ""),
            manager_id=str(data["manager_id"]) if data.get("manager_id") is not None else None,
            capacity=int(data.get("capacity", 0)),
        )


@dataclass
class ShopSettings:
    allow_negative_stock: bool = False
    auto_request_threshold: int = 10
    default_tax_rate: float = 7.5
    receipt_template: str = "standard"


@dataclass
class Shop:
    id: str
    name: str
    address: str = ""
    manager_id: Optional[str] = None
    warehouse_ids: list[str] = field(default_factory=list)
    settings: ShopSettings = field(default_factory=ShopSettings)

    @property
    def ref(self) -> LocationRef:
        return LocationRef(LocationKind.SHOP, self.id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Shop":
        raw_settings = data.get("settings", {})
        return cls(
            id=str(data["id"]),
            name=data["name"],
            address=data.get("address", ""),
            manager_id=str(data["manager_id"]) if data.get("manager_id") is not None else None,
            warehouse_ids=[str(w) for w in data.get("warehouse_ids", [])],
            settings=ShopSettings(
                allow_negative_stock=bool(raw_settings.get("allow_negative_stock", False)),
                auto_request_threshold=int(raw_settings.get("auto_request_threshold", 10)),
                default_tax_rate=float(raw_settings.get("default_tax_rate", 7.5)),
                receipt_template=raw_settings.get("receipt_template", "standard"),
            ),
        )
