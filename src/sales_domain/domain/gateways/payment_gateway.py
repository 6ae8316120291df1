"""Payment gateway interface."""
from abc import ABC, abstractmethod
from typing import Any, Callable

from src.common.dtos.payment_dtos import PaymentConfigDTO

GatewayCallback = Callable[[dict[str, Any]], None]
GatewayCloseCallback = Callable[[], None]


class IPaymentGateway(ABC):

    @abstractmethod
    def open_payment(
        self, config: PaymentConfigDTO, on_callback: GatewayCallback, on_close: GatewayCloseCallback
    ) -> None:
        """
        Opens the payment widget for one attempt and returns without waiting.
        `on_callback` receives the provider's response (`status`, `transaction_id`, ...);
        `on_close` fires when the widget goes away, whether or not a status arrived.
        Either may be called from another thread.
        """
        pass
