"""Customer entity."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Customer:
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Customer":
        """Creates a Customer from the customer (user) object returned by the backend."""
        return cls(
            id=int(data.get("user_id") or data.get("id")),
            name=data.get("full_name") or data.get("name") or "",
            email=data.get("email") or None,
            phone=data.get("phone_number") or data.get("phone") or None,
        )
