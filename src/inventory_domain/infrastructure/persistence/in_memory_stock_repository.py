"""In-memory implementation of the stock repository."""

import dataclasses
from threading import Lock
from typing import Optional

from src.inventory_domain.domain.entities.location import LocationRef
from src.inventory_domain.domain.entities.stock_entry import StockEntry
from src.inventory_domain.domain.repositories.stock_repository import IStockRepository


class InMemoryStockRepository(IStockRepository):
    """Keeps entries in a dict keyed by (location, product). Stored entries are copies."""

    def __init__(self) -> None:
        self._entries: dict[tuple[LocationRef, str], StockEntry] = {}
        self._lock = Lock()

    def get_entry(self, location: LocationRef, product_id: str) -> Optional[StockEntry]:
        with self._lock:
            entry = self._entries.get((location, product_id))
            return dataclasses.replace(entry) if entry else None

    def save_entry(self, entry: StockEntry) -> None:
        with self._lock:
            self._entries[(entry.location, entry.product_id)] = dataclasses.replace(entry)

    def save_entries(self, entries: list[StockEntry]) -> None:
        with self._lock:
            for entry in entries:
                self._entries[(entry.location, entry.product_id)] = dataclasses.replace(entry)

    def get_entries_by_product(self, product_id: str) -> list[StockEntry]:
        with self._lock:
            return [dataclasses.replace(e) for (_, pid), e in self._entries.items() if pid == product_id]

    def get_entries_by_location(self, location: LocationRef) -> list[StockEntry]:
        with self._lock:
            return [dataclasses.replace(e) for (loc, _), e in self._entries.items() if loc == location]

    def get_all_entries(self) -> list[StockEntry]:
        with self._lock:
            return [dataclasses.replace(e) for e in self._entries.values()]
