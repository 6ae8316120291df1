"""Stock Request entity and its state machine."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from src.common.exceptions.custom_exceptions import InvalidStateTransition


class StockRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    FULFILLED = "fulfilled"


# action -> (required current status, resulting status)
TRANSITIONS: dict[str, tuple[StockRequestStatus, StockRequestStatus]] = {
    "approve": (StockRequestStatus.PENDING, StockRequestStatus.APPROVED),
    "decline": (StockRequestStatus.PENDING, StockRequestStatus.DECLINED),
    "fulfill": (StockRequestStatus.APPROVED, StockRequestStatus.FULFILLED),
}

TERMINAL_STATUSES = frozenset({StockRequestStatus.DECLINED, StockRequestStatus.FULFILLED})


@dataclass
class StockRequest:
    """A shop's ask for a quantity of one product from one warehouse."""

    id: str
    shop_id: str
    warehouse_id: str
    product_id: str
    requested_quantity: int
    requested_by: str
    status: StockRequestStatus = StockRequestStatus.PENDING
    approved_by: Optional[str] = None
    approved_quantity: Optional[int] = None
    fulfilled_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Post-initialization for validation."""
        if self.requested_quantity <= 0:
            raise ValueError("Requested quantity must be positive.")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition(self, action: str, at: datetime) -> None:
        """Moves to the status `action` leads to, or raises InvalidStateTransition."""
        required, resulting = TRANSITIONS[action]
        if self.status != required:
            raise InvalidStateTransition(self.id, self.status.value, action)
        self.status = resulting
        self.updated_at = at
