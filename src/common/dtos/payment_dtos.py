"""Data Transfer Objects for payments, gateway callbacks and checkout results."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from src.common.exceptions.custom_exceptions import ApplicationError


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    MOBILE = "mobile"
    BANK = "bank"


# Gateway payment options per method; cash never reaches the gateway
PAYMENT_OPTIONS: dict[PaymentMethod, str] = {
    PaymentMethod.CARD: "card,ussd,banktransfer,mpesa,mobilemoneyrw,mobilemoneygh,mobilemoneyuganda,mobilemoneyzambia",
    PaymentMethod.MOBILE: "mobilemoneyrw,mobilemoneygh,mobilemoneyuganda,mobilemoneyzambia",
    PaymentMethod.BANK: "ussd,banktransfer",
}


@dataclass
class CustomerContactDTO:
    email: str
    phone_number: str
    name: str


@dataclass
class PaymentConfigDTO:
    """Everything the gateway needs to open one payment attempt."""

    public_key: str
    tx_ref: str
    amount: float
    currency: str
    payment_options: str
    customer: CustomerContactDTO
    meta: dict[str, Any] = field(default_factory=dict)
    customizations: dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            "public_key": self.public_key,
            "tx_ref": self.tx_ref,
            "amount": self.amount,
            "currency": self.currency,
            "payment_options": self.payment_options,
            "customer": {
                "email": self.customer.email,
                "phone_number": self.customer.phone_number,
                "name": self.customer.name,
            },
            "meta": dict(self.meta),
            "customizations": dict(self.customizations),
        }


@dataclass(frozen=True)
class PaymentSuccessful:
    transaction_id: str


@dataclass(frozen=True)
class PaymentFailed:
    reason: str


@dataclass(frozen=True)
class PaymentCancelled:
    pass


PaymentOutcome = Union[PaymentSuccessful, PaymentFailed, PaymentCancelled]


def parse_gateway_callback(response: dict[str, Any]) -> PaymentOutcome:
    """Maps a raw gateway callback payload onto the closed set of payment outcomes."""
    status = str(response.get("status") or "").lower()
    if status == "successful":
        return PaymentSuccessful(transaction_id=str(response.get("transaction_id") or ""))
    if status == "cancelled":
        return PaymentCancelled()
    return PaymentFailed(reason=status or "unknown")


@dataclass
class PaymentRecordDTO:
    """A payment the checkout accepted."""

    method: PaymentMethod
    amount: Decimal
    transaction_id: str
    amount_received: Optional[Decimal] = None
    change: Optional[Decimal] = None


@dataclass
class SaleResultDTO:
    """A completed sale. `order_error` is set when the payment went through but the order was not recorded."""

    payment: PaymentRecordDTO
    order_id: Optional[int] = None
    order_number: Optional[str] = None
    order_error: Optional[str] = None

    @property
    def order_recorded(self) -> bool:
        return self.order_error is None and self.order_id is not None


class CheckoutStatus(str, Enum):
    COMPLETED = "completed"
    PAYMENT_FAILED = "payment_failed"
    INCONCLUSIVE = "inconclusive"
    ABORTED = "aborted"


@dataclass
class CheckoutOutcomeDTO:
    """What the POS caller is told when a checkout attempt settles."""

    status: CheckoutStatus
    sale: Optional[SaleResultDTO] = None
    error: Optional[ApplicationError] = None
