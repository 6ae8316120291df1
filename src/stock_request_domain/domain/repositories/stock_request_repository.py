# src/stock_request_domain/domain/repositories/stock_request_repository.py
"""Stock request repository interface."""
from abc import ABC, abstractmethod
from typing import Optional

from src.stock_request_domain.domain.entities.stock_request import StockRequest, StockRequestStatus


class IStockRequestRepository(ABC):

    @abstractmethod
    def save_request(self, request: StockRequest) -> None:
        """Inserts or updates a stock request."""
        pass

    @abstractmethod
    def get_request(self, request_id: str) -> Optional[StockRequest]:
        """Retrieves a stock request by id."""
        pass

    @abstractmethod
    def list_requests(
        self,
        shop_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
        status: Optional[StockRequestStatus] = None,
    ) -> list[StockRequest]:
        """Retrieves requests matching every given filter, oldest first."""
        pass
