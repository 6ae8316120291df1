"""Custom application-wide exceptions."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class APIError(ApplicationError):
    """Exception raised for errors during external API calls."""

    def __init__(
        self,
        message: str = "API call failed",
        original_exception: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, original_exception)
        self.status_code = status_code
        self.message = f"API Error: {message}"
        if status_code:
            self.message += f" (Status Code: {status_code})"


class DatabaseError(ApplicationError):
    """Exception raised for errors during database operations."""

    def __init__(self, message: str = "Database operation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Database Error: {message}"


class ValidationError(ApplicationError):
    """Malformed input, rejected before any side effect."""

    def __init__(self, message: str = "Validation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)


class InvalidQuantity(ValidationError):
    """A stock quantity was negative or otherwise unusable."""


class InsufficientStock(ValidationError):
    """Not enough available units at a location."""

    def __init__(self, message: str = "Insufficient stock", available: int | None = None) -> None:
        super().__init__(message)
        self.available = available


class InvalidActorLocation(ValidationError):
    """The acting user lacks the shop/warehouse id their role requires for an order."""


class InvalidLineItem(ValidationError):
    """A cart line could not be converted into an order item."""


class InvalidAmount(ValidationError):
    """A money amount that is malformed or below what the checkout requires."""


class InvalidStateTransition(ApplicationError):
    """A stock request transition not allowed from its current status."""

    def __init__(self, request_id: str, current_status: str, action: str) -> None:
        super().__init__(f"Cannot {action} stock request {request_id} while it is {current_status}")
        self.request_id = request_id
        self.current_status = current_status
        self.action = action


class NotFoundError(ApplicationError):
    """A referenced entity does not exist."""


class AuthorizationError(ApplicationError):
    """The actor lacks the capability needed for an operation."""


class CheckoutInProgress(ApplicationError):
    """A payment is already outstanding for this checkout session."""

    def __init__(self, message: str = "A payment is already being processed for this checkout") -> None:
        super().__init__(message)


class PaymentFailure(ApplicationError):
    """The payment gateway reported a non-successful payment."""

    def __init__(self, message: str = "Payment failed", status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


class OrderPersistenceFailure(ApplicationError):
    """The payment went through but the order could not be recorded."""

    def __init__(self, message: str = "Order creation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
