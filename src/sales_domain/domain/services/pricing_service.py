# src/sales_domain/domain/services/pricing_service.py
"""Cart pricing: subtotal, discount, tax and total.

Every function here is pure. Intermediate values stay unrounded; `compute_totals`
rounds each figure half-up to cents for display and payment.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

from src.common.exceptions.custom_exceptions import InvalidAmount
from src.sales_domain.domain.entities.cart import CartLine

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value: Number) -> Decimal:
    """
    Converts through str so floats like 45.99 stay 45.99.

    Raises:
        InvalidAmount: If the value is not a finite number.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidAmount(f"Not a valid amount: {value!r}", original_exception=e)
    if not amount.is_finite():
        raise InvalidAmount(f"Not a valid amount: {value!r}")
    return amount


def round_money(value: Number) -> Decimal:
    return to_money(value).quantize(CENT, rounding=ROUND_HALF_UP)


def clamp_discount_percent(value: Number) -> Decimal:
    """Input-boundary guard: discount percentages live in [0, 100]."""
    return min(max(to_money(value), ZERO), Decimal("100"))


def subtotal(lines: Iterable[CartLine]) -> Decimal:
    return sum((max(line.line_total - line.discount, ZERO) for line in lines), ZERO)


def discount_amount(subtotal_value: Number, discount_percent: Number) -> Decimal:
    return to_money(subtotal_value) * to_money(discount_percent) / 100


def tax_amount(subtotal_value: Number, discount_value: Number, tax_rate: Number) -> Decimal:
    return (to_money(subtotal_value) - to_money(discount_value)) * to_money(tax_rate) / 100


def total(subtotal_value: Number, discount_value: Number, tax_value: Number) -> Decimal:
    return to_money(subtotal_value) - to_money(discount_value) + to_money(tax_value)


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total: Decimal


def compute_totals(lines: Iterable[CartLine], discount_percent: Number, tax_rate: Number) -> CartTotals:
    """Prices a cart. An empty cart prices to zero everywhere."""
    sub = subtotal(lines)
    discount = discount_amount(sub, discount_percent)
    tax = tax_amount(sub, discount, tax_rate)
    return CartTotals(
        subtotal=round_money(sub),
        discount_amount=round_money(discount),
        tax_amount=round_money(tax),
        total=round_money(total(sub, discount, tax)),
    )
