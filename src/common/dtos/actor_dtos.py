"""Data Transfer Objects for the authenticated actor."""

from dataclasses import dataclass, field
from typing import Any, Optional

WAREHOUSE_BOUND_ROLES = frozenset({"warehouse_manager"})
SHOP_BOUND_ROLES = frozenset({"shop_manager"})

# Fallback permissions when the backend sends none for the user
ROLE_PERMISSIONS: dict[str, list[str]] = {
    "super_admin": [
        "dashboard.view", "users.view", "users.create", "users.edit", "users.delete",
        "logs.view", "settings.view",
    ],
    "tenant_admin": [
        "dashboard.view", "products.view", "products.create", "products.edit", "products.delete",
        "suppliers.view", "suppliers.create", "suppliers.edit", "suppliers.delete",
        "pos.view", "warehouses.view", "warehouses.create", "warehouses.edit", "warehouses.delete",
        "shops.view", "shops.create", "shops.edit", "shops.delete",
        "users.view", "users.create", "users.edit", "users.delete",
        "reports.view", "expenses.view", "expenses.create", "expenses.edit", "expenses.delete",
        "taxes.view", "taxes.create", "taxes.edit", "taxes.delete",
        "events.view", "events.create", "events.edit", "events.delete",
        "logs.view", "settings.view",
    ],
    "admin": [
        "dashboard.view", "users.view", "users.create", "users.edit", "users.delete",
        "warehouses.view", "warehouses.create", "warehouses.edit", "warehouses.delete",
        "shops.view", "shops.create", "shops.edit", "shops.delete",
        "products.view", "products.create", "products.edit", "products.delete",
        "suppliers.view", "suppliers.create", "suppliers.edit", "suppliers.delete",
        "reports.view", "expenses.view", "expenses.create", "taxes.view", "taxes.edit",
        "events.view", "events.create", "events.edit", "pos.view",
        "logs.view", "settings.view",
    ],
    "warehouse_manager": [
        "dashboard.view", "products.view", "products.edit", "stock.view", "stock.edit",
        "requests.view", "requests.approve", "reports.view",
        "incidents.create", "settings.view",
    ],
    "shop_manager": [
        "dashboard.view", "products.view", "sales.create", "customers.view", "customers.create",
        "requests.create", "expenses.view", "expenses.create",
        "incidents.create", "pos.view", "settings.view",
    ],
    "custom": [],
}


def _optional_int(value: Any) -> Optional[int]:
    """Ids arrive as ints, numeric strings or null; zero and blanks mean 'not set'."""
    if value in (None, "", 0, "0"):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class ActorDTO:
    """The authenticated principal performing an operation."""

    id: str
    role: str
    name: str = ""
    shop_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    permissions: list[str] = field(default_factory=list)

    @property
    def is_warehouse_bound(self) -> bool:
        return self.role in WAREHOUSE_BOUND_ROLES

    @property
    def is_shop_bound(self) -> bool:
        return self.role in SHOP_BOUND_ROLES

    def has_permission(self, permission: str) -> bool:
        """Explicit permissions win; otherwise fall back to the role's list."""
        if "*" in self.permissions or permission in self.permissions:
            return True
        fallback = ROLE_PERMISSIONS.get(self.role, [])
        return "*" in fallback or permission in fallback

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "ActorDTO":
        """Creates an ActorDTO from the user object returned by the auth API."""
        return cls(
            id=str(data.get("user_id") or data.get("id") or ""),
            role=data.get("role") or "custom",
            name=data.get("full_name") or data.get("name") or "",
            shop_id=_optional_int(data.get("shop_id")),
            warehouse_id=_optional_int(data.get("warehouse_id")),
            permissions=list(data.get("permissions") or []),
        )
