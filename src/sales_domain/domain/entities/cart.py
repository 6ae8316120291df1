"""Cart line entity and the cart operations over an ordered list of lines."""

import uuid
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from src.inventory_domain.domain.entities.product import Product


@dataclass(frozen=True)
class CartLine:
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal = Decimal("0")

    @property
    def line_total(self) -> Decimal:
        """Quantity times unit price. The line discount is applied when the cart is priced."""
        return self.quantity * self.unit_price


def add_product(
    lines: list[CartLine], product: Product, quantity: int = 1, line_id: Optional[str] = None
) -> list[CartLine]:
    """Appends a line for the product, or bumps the quantity of the line that already holds it."""
    if quantity <= 0:
        return list(lines)

    for index, line in enumerate(lines):
        if line.product_id == product.id:
            updated = list(lines)
            updated[index] = replace(line, quantity=line.quantity + quantity)
            return updated

    new_line = CartLine(
        id=line_id or uuid.uuid4().hex,
        product_id=product.id,
        product_name=product.name,
        quantity=quantity,
        unit_price=Decimal(str(product.price)),
    )
    return [*lines, new_line]


def remove_line(lines: list[CartLine], line_id: str) -> list[CartLine]:
    return [line for line in lines if line.id != line_id]


def update_quantity(lines: list[CartLine], line_id: str, quantity: int) -> list[CartLine]:
    """Sets a line's quantity; zero or less removes the line."""
    if quantity <= 0:
        return remove_line(lines, line_id)
    return [replace(line, quantity=quantity) if line.id == line_id else line for line in lines]


def set_line_discount(lines: list[CartLine], line_id: str, discount: Decimal) -> list[CartLine]:
    discount = max(Decimal("0"), Decimal(str(discount)))
    return [replace(line, discount=discount) if line.id == line_id else line for line in lines]
