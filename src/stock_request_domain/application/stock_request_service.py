# src/stock_request_domain/application/stock_request_service.py
"""Application service driving stock requests between shops and warehouses."""

import dataclasses
import logging
import uuid
from typing import Optional

from src.activity_domain.domain.repositories.activity_logger import IActivityLogger
from src.common.dtos.actor_dtos import ActorDTO
from src.common.exceptions.custom_exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.common.utils.date_utils import utc_now
from src.inventory_domain.application.stock_ledger_service import StockLedgerService
from src.inventory_domain.domain.entities.location import LocationKind, LocationRef
from src.stock_request_domain.domain.entities.stock_request import StockRequest, StockRequestStatus
from src.stock_request_domain.domain.repositories.stock_request_repository import IStockRequestRepository

logger = logging.getLogger(__name__)

APPROVE_PERMISSION = "requests.approve"
ACTIVITY_MODULE = "shops"


class StockRequestApplicationService:
    """Creates stock requests and moves them through pending, approved, declined and fulfilled."""

    def __init__(
        self,
        request_repo: IStockRequestRepository,
        ledger: StockLedgerService,
        activity_logger: IActivityLogger,
    ) -> None:
        """Initializes the StockRequestApplicationService."""
        self.request_repo = request_repo
        self.ledger = ledger
        self.activity_logger = activity_logger

    def create_request(
        self,
        shop_id: Optional[str],
        warehouse_id: Optional[str],
        product_id: Optional[str],
        requested_quantity: Optional[int],
        requested_by: ActorDTO,
        notes: Optional[str] = None,
    ) -> StockRequest:
        """Opens a pending request. Duplicate pending requests for the same triple are allowed."""
        missing = [
            name
            for name, value in (("shop", shop_id), ("warehouse", warehouse_id), ("product", product_id))
            if not value
        ]
        if missing:
            raise ValidationError(f"Stock request is missing: {', '.join(missing)}")
        if requested_quantity is None or requested_quantity <= 0:
            raise ValidationError(f"Requested quantity must be positive, got {requested_quantity}")

        now = utc_now()
        request = StockRequest(
            id=uuid.uuid4().hex,
            shop_id=str(shop_id),
            warehouse_id=str(warehouse_id),
            product_id=str(product_id),
            requested_quantity=int(requested_quantity),
            requested_by=requested_by.id,
            notes=notes or None,
            created_at=now,
            updated_at=now,
        )
        self.request_repo.save_request(request)

        logger.info(
            f"Stock request {request.id} created: {request.requested_quantity} of product {request.product_id} "
            f"for shop {request.shop_id} from warehouse {request.warehouse_id}"
        )
        self._log_activity(requested_by, "stock_request_created", request, quantity=request.requested_quantity)
        return request

    def approve(
        self, request_id: str, approved_by: ActorDTO, approved_quantity: Optional[int] = None
    ) -> StockRequest:
        """pending -> approved. Records approval only; the ledger moves on `fulfill`."""
        request = self.get_request(request_id)
        self._require_capability(approved_by, request, "approve")

        quantity = request.requested_quantity if approved_quantity is None else approved_quantity
        if quantity <= 0 or quantity > request.requested_quantity:
            raise ValidationError(
                f"Approved quantity must be between 1 and {request.requested_quantity}, got {quantity}"
            )

        request.transition("approve", utc_now())
        request.approved_by = approved_by.id
        request.approved_quantity = quantity
        self.request_repo.save_request(request)

        logger.info(f"Stock request {request.id} approved by {approved_by.id} for {quantity} units")
        self._log_activity(approved_by, "stock_request_approved", request, quantity=quantity)
        return request

    def decline(self, request_id: str, declined_by: ActorDTO) -> StockRequest:
        """pending -> declined. No stock moves."""
        request = self.get_request(request_id)
        self._require_capability(declined_by, request, "decline")

        request.transition("decline", utc_now())
        request.approved_by = declined_by.id
        self.request_repo.save_request(request)

        logger.info(f"Stock request {request.id} declined by {declined_by.id}")
        self._log_activity(declined_by, "stock_request_declined", request)
        return request

    def fulfill(self, request_id: str, fulfilled_by: ActorDTO) -> StockRequest:
        """
        approved -> fulfilled, moving the approved quantity from the warehouse to the shop.

        The fulfilled status is saved before any stock moves, so a failed save leaves both
        the request and the ledger untouched. If the transfer then fails, the approved
        request is saved back.

        Raises:
            InsufficientStock: If the warehouse cannot cover the approved quantity.
            DatabaseError: If the request cannot be saved.
        """
        request = self.get_request(request_id)
        self._require_capability(fulfilled_by, request, "fulfill")

        approved = dataclasses.replace(request)
        request.transition("fulfill", utc_now())
        request.fulfilled_by = fulfilled_by.id
        self.request_repo.save_request(request)

        try:
            self.ledger.transfer(
                source=LocationRef(LocationKind.WAREHOUSE, request.warehouse_id),
                target=LocationRef(LocationKind.SHOP, request.shop_id),
                product_id=request.product_id,
                quantity=request.approved_quantity,
            )
        except Exception:
            logger.warning(f"Stock transfer for request {request.id} failed; reverting it to approved")
            self.request_repo.save_request(approved)
            raise

        logger.info(f"Stock request {request.id} fulfilled by {fulfilled_by.id}")
        self._log_activity(fulfilled_by, "stock_request_fulfilled", request, quantity=request.approved_quantity)
        return request

    def get_request(self, request_id: str) -> StockRequest:
        request = self.request_repo.get_request(request_id)
        if request is None:
            raise NotFoundError(f"Stock request {request_id} not found")
        return request

    def list_requests(
        self,
        shop_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
        status: Optional[StockRequestStatus] = None,
    ) -> list[StockRequest]:
        return self.request_repo.list_requests(shop_id=shop_id, warehouse_id=warehouse_id, status=status)

    def pending_count_for_shop(self, shop_id: str) -> int:
        return len(self.request_repo.list_requests(shop_id=shop_id, status=StockRequestStatus.PENDING))

    def _require_capability(self, actor: ActorDTO, request: StockRequest, action: str) -> None:
        if not actor.has_permission(APPROVE_PERMISSION):
            raise AuthorizationError(f"User {actor.id} ({actor.role}) may not {action} stock requests")
        if actor.is_warehouse_bound and actor.warehouse_id and str(actor.warehouse_id) != request.warehouse_id:
            raise AuthorizationError(
                f"User {actor.id} manages warehouse {actor.warehouse_id} and may not {action} "
                f"requests addressed to warehouse {request.warehouse_id}"
            )

    def _log_activity(self, actor: ActorDTO, action: str, request: StockRequest, **extra) -> None:
        details = {
            "requestId": request.id,
            "shop": request.shop_id,
            "warehouse": request.warehouse_id,
            "product": request.product_id,
            **extra,
        }
        self.activity_logger.log(actor, action, ACTIVITY_MODULE, details)
