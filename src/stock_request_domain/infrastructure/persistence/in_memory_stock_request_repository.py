"""In-memory implementation of the stock request repository."""

import dataclasses
from threading import Lock
from typing import Optional

from src.stock_request_domain.domain.entities.stock_request import StockRequest, StockRequestStatus
from src.stock_request_domain.domain.repositories.stock_request_repository import IStockRequestRepository


class InMemoryStockRequestRepository(IStockRequestRepository):

    def __init__(self) -> None:
        self._requests: dict[str, StockRequest] = {}
        self._lock = Lock()

    def save_request(self, request: StockRequest) -> None:
        with self._lock:
            self._requests[request.id] = dataclasses.replace(request)

    def get_request(self, request_id: str) -> Optional[StockRequest]:
        with self._lock:
            request = self._requests.get(request_id)
            return dataclasses.replace(request) if request else None

    def list_requests(
        self,
        shop_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
        status: Optional[StockRequestStatus] = None,
    ) -> list[StockRequest]:
        with self._lock:
            # dicts keep insertion order, so this is creation order
            return [
                dataclasses.replace(r)
                for r in self._requests.values()
                if (shop_id is None or r.shop_id == shop_id)
                and (warehouse_id is None or r.warehouse_id == warehouse_id)
                and (status is None or r.status == status)
            ]
