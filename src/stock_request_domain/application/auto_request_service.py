"""Raises stock requests for shops whose stock fell to their auto-request threshold."""

import logging

from src.common.dtos.actor_dtos import ActorDTO
from src.inventory_domain.application.inventory_store import InventoryStore
from src.inventory_domain.application.stock_ledger_service import StockLedgerService
from src.stock_request_domain.application.stock_request_service import StockRequestApplicationService
from src.stock_request_domain.domain.entities.stock_request import StockRequest, StockRequestStatus

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = ActorDTO(id="system", role="system", name="Auto Request")


class AutoRequestService:

    def __init__(
        self,
        store: InventoryStore,
        ledger: StockLedgerService,
        request_service: StockRequestApplicationService,
        actor: ActorDTO = SYSTEM_ACTOR,
    ) -> None:
        self.store = store
        self.ledger = ledger
        self.request_service = request_service
        self.actor = actor

    def run(self) -> list[StockRequest]:
        """
        Scans every shop with a linked warehouse. A product the shop stocks at or below
        the shop's threshold gets a request topping it up to the product's max stock,
        unless a pending request for the same shop, warehouse and product already exists.
        """
        created: list[StockRequest] = []

        for shop in self.store.shops.values():
            if not shop.warehouse_ids:
                logger.debug(f"Shop {shop.id} has no linked warehouse, skipping auto requests")
                continue
            warehouse_id = shop.warehouse_ids[0]
            threshold = shop.settings.auto_request_threshold

            pending = {
                (r.warehouse_id, r.product_id)
                for r in self.request_service.list_requests(shop_id=shop.id, status=StockRequestStatus.PENDING)
            }

            for entry in self.ledger.entries_at(shop.ref):
                product = self.store.products.get(entry.product_id)
                if product is None or entry.quantity > threshold:
                    continue
                if (warehouse_id, product.id) in pending:
                    continue

                quantity = product.max_stock - entry.quantity
                if quantity <= 0:
                    continue

                try:
                    request = self.request_service.create_request(
                        shop_id=shop.id,
                        warehouse_id=warehouse_id,
                        product_id=product.id,
                        requested_quantity=quantity,
                        requested_by=self.actor,
                        notes=f"Automatic request: stock {entry.quantity} at or below threshold {threshold}",
                    )
                except Exception as e:
                    logger.error(f"Auto request for product {product.id} at shop {shop.id} failed: {e}")
                    continue
                created.append(request)

        logger.info(f"Auto request scan finished, {len(created)} requests created")
        return created
