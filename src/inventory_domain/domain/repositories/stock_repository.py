# src/inventory_domain/domain/repositories/stock_repository.py
"""Stock ledger repository interface."""
from abc import ABC, abstractmethod
from typing import Optional

from src.inventory_domain.domain.entities.location import LocationRef
from src.inventory_domain.domain.entities.stock_entry import StockEntry


class IStockRepository(ABC):

    @abstractmethod
    def get_entry(self, location: LocationRef, product_id: str) -> Optional[StockEntry]:
        """Returns the stored entry for a (location, product) pair, or None."""
        pass

    @abstractmethod
    def save_entry(self, entry: StockEntry) -> None:
        """Inserts or replaces the entry for its (location, product) pair."""
        pass

    @abstractmethod
    def save_entries(self, entries: list[StockEntry]) -> None:
        """Saves several entries atomically (all or none)."""
        pass

    @abstractmethod
    def get_entries_by_product(self, product_id: str) -> list[StockEntry]:
        """Retrieves every entry of a product across locations."""
        pass

    @abstractmethod
    def get_entries_by_location(self, location: LocationRef) -> list[StockEntry]:
        """Retrieves every entry stored at a location."""
        pass

    @abstractmethod
    def get_all_entries(self) -> list[StockEntry]:
        """Retrieves every stored entry."""
        pass
