# src/sales_domain/application/checkout_service.py
"""Checkout orchestration: takes a priced cart through cash or gateway payment and records the order."""

import logging
import time
import uuid
from concurrent.futures import Future
from decimal import Decimal
from typing import Any, Optional

from src.activity_domain.domain.repositories.activity_logger import IActivityLogger
from src.common.config.settings import settings
from src.common.dtos.actor_dtos import ActorDTO
from src.common.dtos.order_dtos import CreateOrderRequestDTO, OrderDTO, OrderItemDTO
from src.common.dtos.payment_dtos import (
    PAYMENT_OPTIONS,
    CheckoutOutcomeDTO,
    CheckoutStatus,
    CustomerContactDTO,
    PaymentCancelled,
    PaymentConfigDTO,
    PaymentFailed,
    PaymentMethod,
    PaymentRecordDTO,
    PaymentSuccessful,
    SaleResultDTO,
    parse_gateway_callback,
)
from src.common.exceptions.custom_exceptions import (
    InvalidActorLocation,
    InvalidAmount,
    InvalidLineItem,
    OrderPersistenceFailure,
    PaymentFailure,
    ValidationError,
)
from src.sales_domain.application.checkout_session import CheckoutAttempt, CheckoutSession
from src.sales_domain.domain.entities.cart import CartLine
from src.sales_domain.domain.gateways.payment_gateway import IPaymentGateway
from src.sales_domain.domain.services.pricing_service import ZERO, CartTotals, Number, to_money
from src.sales_domain.infrastructure.api_clients.order_api_client import OrderApiClient

logger = logging.getLogger(__name__)

MIN_GATEWAY_AMOUNT = Decimal("0.01")
ACTIVITY_MODULE = "pos"


def _now_ms() -> int:
    return int(time.time() * 1000)


class CheckoutService:
    """
    Turns a checkout session into either a completed sale or a reported failure.

    Cash settles synchronously. Gateway payments settle through the gateway's callbacks,
    and the outcome reaches the session's listener.
    """

    def __init__(
        self, order_client: OrderApiClient, gateway: IPaymentGateway, activity_logger: IActivityLogger
    ) -> None:
        """Initializes the CheckoutService."""
        self.order_client = order_client
        self.gateway = gateway
        self.activity_logger = activity_logger

    # Order preparation

    @staticmethod
    def resolve_order_location(actor: ActorDTO) -> tuple[Optional[int], Optional[int]]:
        """
        Returns the (shop_id, warehouse_id) pair to put on an order placed by the actor.

        Warehouse-bound roles send only their warehouse, shop-bound roles only their shop.
        Any other role sends whichever ids it has and needs at least one.
        """
        if actor.is_warehouse_bound:
            if not actor.warehouse_id:
                raise InvalidActorLocation(f"Warehouse ID is required for role '{actor.role}'")
            return None, actor.warehouse_id
        if actor.is_shop_bound:
            if not actor.shop_id:
                raise InvalidActorLocation(f"Shop ID is required for role '{actor.role}'")
            return actor.shop_id, None
        if not actor.shop_id and not actor.warehouse_id:
            raise InvalidActorLocation(f"Either a shop ID or a warehouse ID is required for role '{actor.role}'")
        return actor.shop_id or None, actor.warehouse_id or None

    @staticmethod
    def convert_line_items(lines: list[CartLine]) -> list[OrderItemDTO]:
        items = []
        for line in lines:
            try:
                product_id = int(line.product_id)
            except (TypeError, ValueError) as e:
                raise InvalidLineItem(f"Invalid product ID '{line.product_id}' for '{line.product_name}'", e)
            if product_id <= 0:
                raise InvalidLineItem(f"Invalid product ID '{line.product_id}' for '{line.product_name}'")
            if line.quantity <= 0:
                raise InvalidLineItem(f"Invalid quantity {line.quantity} for '{line.product_name}'")
            items.append(OrderItemDTO(product_id=product_id, quantity=line.quantity, unit_price=float(line.unit_price)))
        return items

    def build_order_request(self, session: CheckoutSession) -> CreateOrderRequestDTO:
        """Checks every order precondition without touching the network."""
        if not session.lines:
            raise ValidationError("No items in cart")
        shop_id, warehouse_id = self.resolve_order_location(session.actor)
        items = self.convert_line_items(session.lines)
        customer_id = session.customer.id if session.customer else settings.WALK_IN_CUSTOMER_ID
        return CreateOrderRequestDTO(customer_id=customer_id, items=items, shop_id=shop_id, warehouse_id=warehouse_id)

    @staticmethod
    def generate_tx_ref() -> str:
        return f"pos-{_now_ms()}-{uuid.uuid4().hex[:9]}"

    @staticmethod
    def build_payment_config(session: CheckoutSession, amount: Decimal, tx_ref: str) -> PaymentConfigDTO:
        customer = session.customer
        contact = CustomerContactDTO(
            email=(customer.email if customer and customer.email else settings.WALK_IN_CUSTOMER_EMAIL),
            phone_number=(customer.phone if customer and customer.phone else settings.WALK_IN_CUSTOMER_PHONE),
            name=(customer.name if customer and customer.name else settings.WALK_IN_CUSTOMER_NAME),
        )
        return PaymentConfigDTO(
            public_key=settings.PAYMENT_GATEWAY_PUBLIC_KEY,
            tx_ref=tx_ref,
            amount=float(amount),
            currency=settings.PAYMENT_CURRENCY,
            payment_options=PAYMENT_OPTIONS[session.payment_method],
            customer=contact,
            meta={"customer_id": str(customer.id) if customer else "walk-in", "pos_sale": True},
            customizations={
                "title": settings.PAYMENT_TITLE,
                "description": f"Payment for {len(session.lines)} item(s) - POS Sale",
                "logo": settings.PAYMENT_LOGO_URL,
            },
        )

    # Cash

    def checkout_cash(self, session: CheckoutSession, amount_received: Number) -> CheckoutOutcomeDTO:
        """
        Settles the cart against cash handed over at the till.

        The sale is reported complete even when the order cannot be recorded; the cash
        is already in the drawer, so the outcome carries an OrderPersistenceFailure for
        manual reconciliation instead.

        Raises:
            ValidationError: For an empty cart, a bad line item or a missing actor location.
            InvalidAmount: If the amount received is malformed or less than the total.
            CheckoutInProgress: If another attempt is outstanding on the session.
        """
        order_request = self.build_order_request(session)
        totals = session.totals()
        received = to_money(amount_received)
        if received < totals.total:
            raise InvalidAmount(f"Amount received {received} is less than the total {totals.total}")

        attempt = session.begin_attempt()
        try:
            payment = PaymentRecordDTO(
                method=PaymentMethod.CASH,
                amount=totals.total,
                transaction_id=f"CASH-{_now_ms()}",
                amount_received=received,
                change=max(received - totals.total, ZERO),
            )
            logger.info(f"Cash payment accepted: total {totals.total}, received {received}, change {payment.change}")
            sale, failure = self._complete_sale(session, order_request, totals, payment)
            session.reset_after_sale()
        finally:
            session.end_attempt(attempt)
        return CheckoutOutcomeDTO(status=CheckoutStatus.COMPLETED, sale=sale, error=failure)

    # Gateway

    def start_gateway_payment(
        self, session: CheckoutSession, dialog_closed: Optional["Future[Any]"] = None
    ) -> CheckoutAttempt:
        """
        Starts a card, mobile or bank payment and returns without waiting for it to settle.

        When `dialog_closed` is given, the gateway is opened only after that future resolves,
        so the checkout dialog is fully gone first. A cancelled or failed future abandons the attempt.
        The payment configuration is built at the moment the gateway is opened.
        """
        if session.payment_method == PaymentMethod.CASH:
            raise ValidationError("Cash payments are settled with checkout_cash")
        self.build_order_request(session)
        total = session.totals().total
        if total < MIN_GATEWAY_AMOUNT:
            raise InvalidAmount(f"Payment amount must be at least {MIN_GATEWAY_AMOUNT}, got {total}")

        attempt = session.begin_attempt()
        if dialog_closed is None:
            self._submit(session, attempt)
        else:
            dialog_closed.add_done_callback(lambda future: self._on_dialog_closed(session, attempt, future))
        return attempt

    def _on_dialog_closed(self, session: CheckoutSession, attempt: CheckoutAttempt, future: "Future[Any]") -> None:
        if future.cancelled() or future.exception() is not None:
            logger.info(f"Checkout dialog did not close cleanly; abandoning attempt {attempt.id}")
            session.end_attempt(attempt)
            return
        self._submit(session, attempt)

    def _submit(self, session: CheckoutSession, attempt: CheckoutAttempt) -> None:
        with attempt.lock:
            if attempt.gateway_opened or attempt.settled:
                logger.warning(f"Payment gateway already opened for attempt {attempt.id}")
                return
            try:
                order_request = self.build_order_request(session)
                totals = session.totals()
                if totals.total < MIN_GATEWAY_AMOUNT:
                    raise InvalidAmount(f"Payment amount must be at least {MIN_GATEWAY_AMOUNT}, got {totals.total}")
            except ValidationError as e:
                attempt.settled = True
                aborted = e
            else:
                aborted = None
                attempt.tx_ref = self.generate_tx_ref()
                attempt.gateway_opened = True
                config = self.build_payment_config(session, totals.total, attempt.tx_ref)

        if aborted is not None:
            logger.warning(f"Checkout attempt {attempt.id} aborted before payment: {aborted}")
            session.end_attempt(attempt)
            session.notify(CheckoutOutcomeDTO(status=CheckoutStatus.ABORTED, error=aborted))
            return

        logger.info(f"Opening payment gateway: tx_ref {attempt.tx_ref}, amount {config.amount} {config.currency}")
        try:
            self.gateway.open_payment(
                config,
                on_callback=lambda response: self._handle_callback(session, attempt, order_request, totals, response),
                on_close=lambda: self._handle_close(session, attempt),
            )
        except Exception as e:
            logger.exception(f"Payment gateway could not be opened for {attempt.tx_ref}")
            with attempt.lock:
                if attempt.settled:
                    return
                attempt.settled = True
            session.end_attempt(attempt)
            session.notify(
                CheckoutOutcomeDTO(
                    status=CheckoutStatus.PAYMENT_FAILED,
                    error=PaymentFailure(f"Payment gateway could not be opened: {e}", status="gateway_error"),
                )
            )

    def _handle_callback(
        self,
        session: CheckoutSession,
        attempt: CheckoutAttempt,
        order_request: CreateOrderRequestDTO,
        totals: CartTotals,
        response: dict[str, Any],
    ) -> None:
        outcome = parse_gateway_callback(response)
        with attempt.lock:
            if attempt.settled:
                logger.warning(f"Ignoring repeated gateway callback for {attempt.tx_ref}: {response.get('status')}")
                return
            attempt.settled = True
            late = attempt.closed
        if late:
            logger.warning(f"Late gateway callback for {attempt.tx_ref} after the window closed: {response.get('status')}")
        else:
            logger.info(f"Gateway callback for {attempt.tx_ref}: {response.get('status')}")

        if isinstance(outcome, PaymentSuccessful):
            payment = PaymentRecordDTO(
                method=attempt.method,
                amount=totals.total,
                transaction_id=outcome.transaction_id or attempt.tx_ref,
            )
            sale, failure = self._complete_sale(session, order_request, totals, payment)
            # A late callback must not wipe a cart that a newer attempt is paying for
            if session.is_current(attempt) or not session.in_flight:
                session.reset_after_sale()
            result = CheckoutOutcomeDTO(status=CheckoutStatus.COMPLETED, sale=sale, error=failure)
        elif isinstance(outcome, PaymentCancelled):
            result = CheckoutOutcomeDTO(
                status=CheckoutStatus.PAYMENT_FAILED,
                error=PaymentFailure("Payment was cancelled", status="cancelled"),
            )
        elif isinstance(outcome, PaymentFailed):
            result = CheckoutOutcomeDTO(
                status=CheckoutStatus.PAYMENT_FAILED,
                error=PaymentFailure(f"Payment failed with status '{outcome.reason}'", status=outcome.reason),
            )
        else:
            raise TypeError(f"Unhandled payment outcome: {outcome!r}")

        session.end_attempt(attempt)
        session.notify(result)

    def _handle_close(self, session: CheckoutSession, attempt: CheckoutAttempt) -> None:
        # INCONCLUSIVE is reported under the lock, ahead of any racing callback
        with attempt.lock:
            if attempt.settled or attempt.closed:
                return
            attempt.closed = True
            # No terminal status yet; a callback that still arrives is processed normally
            logger.warning(f"Payment window closed without a result for {attempt.tx_ref}")
            if session.is_current(attempt):
                session.end_attempt(attempt)
                session.notify(CheckoutOutcomeDTO(status=CheckoutStatus.INCONCLUSIVE))

    # Order recording

    def _complete_sale(
        self,
        session: CheckoutSession,
        order_request: CreateOrderRequestDTO,
        totals: CartTotals,
        payment: PaymentRecordDTO,
    ) -> tuple[SaleResultDTO, Optional[OrderPersistenceFailure]]:
        order: Optional[OrderDTO] = None
        failure: Optional[OrderPersistenceFailure] = None
        try:
            order = self.order_client.create_order(order_request)
        except Exception as e:
            failure = OrderPersistenceFailure(f"Payment received but the order was not recorded: {e}", e)
            logger.exception(
                f"Order creation failed after payment {payment.transaction_id} of {payment.amount}; "
                f"manual reconciliation required"
            )

        sale = SaleResultDTO(
            payment=payment,
            order_id=order.order_id if order else None,
            order_number=order.order_number if order else None,
            order_error=failure.message if failure else None,
        )
        self.activity_logger.log(
            session.actor,
            "sale_completed",
            ACTIVITY_MODULE,
            {
                "total": float(totals.total),
                "itemCount": sum(item.quantity for item in order_request.items),
                "customer": session.customer.name if session.customer else settings.WALK_IN_CUSTOMER_NAME,
                "paymentMethod": payment.method.value,
                "transactionId": payment.transaction_id,
                "orderId": sale.order_id,
                "orderNumber": sale.order_number,
            },
        )
        return sale, failure
