"""Data Transfer Objects for the external order API."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class OrderItemDTO:
    """One line of an order as the order API expects it."""

    product_id: int
    quantity: int
    unit_price: float


@dataclass
class CreateOrderRequestDTO:
    """Payload for POST /orders. Exactly the location ids the actor's role allows are set."""

    customer_id: int
    items: list[OrderItemDTO] = field(default_factory=list)
    shop_id: Optional[int] = None
    warehouse_id: Optional[int] = None

    def to_payload(self) -> dict[str, Any]:
        """Serialises the request, omitting location ids that are not set."""
        payload: dict[str, Any] = {"customer_id": self.customer_id}
        if self.shop_id:
            payload["shop_id"] = self.shop_id
        if self.warehouse_id:
            payload["warehouse_id"] = self.warehouse_id
        payload["items"] = [
            {"product_id": item.product_id, "quantity": item.quantity, "unit_price": item.unit_price}
            for item in self.items
        ]
        return payload


@dataclass
class OrderDTO:
    """An order persisted by the order API."""

    order_id: Optional[int]
    order_number: Optional[str]
    status: Optional[str] = None
    payment_status: Optional[str] = None
    subtotal: Optional[str] = None
    tax_amount: Optional[str] = None
    discount_amount: Optional[str] = None
    total_amount: Optional[str] = None
    order_date: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "OrderDTO":
        """Creates OrderDTO from the `data` object of a create-order response."""
        order_id = data.get("order_id", data.get("id"))
        return cls(
            order_id=int(order_id) if order_id is not None else None,
            order_number=data.get("order_number"),
            status=data.get("status"),
            payment_status=data.get("payment_status"),
            subtotal=data.get("subtotal"),
            tax_amount=data.get("tax_amount"),
            discount_amount=data.get("discount_amount"),
            total_amount=data.get("total_amount"),
            order_date=data.get("order_date"),
            raw=data,
        )
