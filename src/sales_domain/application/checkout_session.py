# src/sales_domain/application/checkout_session.py
"""State of one POS checkout: the cart, the selected customer and the outstanding payment attempt."""

import logging
import threading
import uuid
from typing import Callable, Optional

from src.common.config.settings import settings
from src.common.dtos.actor_dtos import ActorDTO
from src.common.dtos.payment_dtos import CheckoutOutcomeDTO, PaymentMethod
from src.common.exceptions.custom_exceptions import CheckoutInProgress
from src.inventory_domain.domain.entities.product import Product
from src.sales_domain.domain.entities import cart
from src.sales_domain.domain.entities.cart import CartLine
from src.sales_domain.domain.entities.customer import Customer
from src.sales_domain.domain.services.pricing_service import (
    ZERO,
    CartTotals,
    Number,
    clamp_discount_percent,
    compute_totals,
    to_money,
)

logger = logging.getLogger(__name__)

OutcomeListener = Callable[[CheckoutOutcomeDTO], None]


class CheckoutAttempt:
    """One submission of the cart for payment. Settles at most once."""

    def __init__(self, method: PaymentMethod) -> None:
        self.id = uuid.uuid4().hex
        self.method = method
        self.tx_ref: Optional[str] = None
        self.gateway_opened = False
        self.settled = False
        self.closed = False
        # Reentrant; held while the listener hears about a closed window
        self.lock = threading.RLock()


class CheckoutSession:
    def __init__(
        self, actor: ActorDTO, tax_rate: Optional[Number] = None, listener: Optional[OutcomeListener] = None
    ) -> None:
        self.actor = actor
        self.tax_rate = to_money(tax_rate if tax_rate is not None else settings.DEFAULT_TAX_RATE)
        self.listener = listener
        self.lines: list[CartLine] = []
        self.customer: Optional[Customer] = None
        self.discount_percent = ZERO
        self.payment_method = PaymentMethod.CASH
        self._attempt: Optional[CheckoutAttempt] = None
        self._lock = threading.Lock()
        self._closed = False

    # Cart

    def add_product(self, product: Product, quantity: int = 1) -> None:
        self.lines = cart.add_product(self.lines, product, quantity)

    def update_quantity(self, line_id: str, quantity: int) -> None:
        self.lines = cart.update_quantity(self.lines, line_id, quantity)

    def remove_line(self, line_id: str) -> None:
        self.lines = cart.remove_line(self.lines, line_id)

    def set_line_discount(self, line_id: str, discount: Number) -> None:
        self.lines = cart.set_line_discount(self.lines, line_id, to_money(discount))

    def clear_cart(self) -> None:
        self.lines = []

    def set_discount(self, percent: Number) -> None:
        self.discount_percent = clamp_discount_percent(percent)

    def select_customer(self, customer: Optional[Customer]) -> None:
        self.customer = customer

    def select_payment_method(self, method: PaymentMethod | str) -> None:
        self.payment_method = PaymentMethod(method)

    def totals(self) -> CartTotals:
        return compute_totals(self.lines, self.discount_percent, self.tax_rate)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def reset_after_sale(self) -> None:
        """Clears cart, customer and discount once a sale has gone through."""
        self.lines = []
        self.customer = None
        self.discount_percent = ZERO

    # Payment attempts

    @property
    def in_flight(self) -> bool:
        return self._attempt is not None

    def begin_attempt(self) -> CheckoutAttempt:
        """Starts a payment attempt; only one may be outstanding per session."""
        with self._lock:
            if self._attempt is not None:
                raise CheckoutInProgress()
            self._attempt = CheckoutAttempt(self.payment_method)
            logger.debug(f"Checkout attempt {self._attempt.id} started ({self.payment_method.value})")
            return self._attempt

    def end_attempt(self, attempt: CheckoutAttempt) -> None:
        with self._lock:
            if self._attempt is attempt:
                self._attempt = None
                logger.debug(f"Checkout attempt {attempt.id} released")

    def is_current(self, attempt: CheckoutAttempt) -> bool:
        return self._attempt is attempt

    # Lifecycle

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Detaches the UI. Work already dispatched still runs to completion and is logged,
        but the listener is no longer told about it.
        """
        self._closed = True

    def notify(self, outcome: CheckoutOutcomeDTO) -> None:
        if outcome.error:
            logger.warning(f"Checkout settled as {outcome.status.value}: {outcome.error}")
        else:
            logger.info(f"Checkout settled as {outcome.status.value}")
        if self._closed or self.listener is None:
            return
        self.listener(outcome)
