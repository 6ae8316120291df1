# src/inventory_domain/application/stock_ledger_service.py
"""Application service for the per-location stock ledger."""

import dataclasses
import logging
from typing import Optional

from src.common.exceptions.custom_exceptions import InsufficientStock, InvalidQuantity
from src.common.utils.date_utils import utc_now
from src.inventory_domain.domain.entities.location import LocationRef
from src.inventory_domain.domain.entities.product import Product
from src.inventory_domain.domain.entities.stock_entry import StockEntry
from src.inventory_domain.domain.repositories.stock_repository import IStockRepository

logger = logging.getLogger(__name__)


class StockLedgerService:
    """Reads and writes stock entries. Writes to the same (location, product) key are last-write-wins."""

    def __init__(self, stock_repo: IStockRepository) -> None:
        self.stock_repo = stock_repo

    def get_entry(self, location: LocationRef, product_id: str) -> StockEntry:
        """Returns the stored entry or an implicit zero entry. Never fails for a missing pair."""
        entry = self.stock_repo.get_entry(location, product_id)
        if entry is None:
            return StockEntry(location=location, product_id=product_id)
        return entry

    def set_quantity(self, location: LocationRef, product_id: str, quantity: int) -> StockEntry:
        """Sets the on-hand quantity. Reserved quantity is left untouched."""
        if quantity is None or quantity < 0:
            raise InvalidQuantity(f"Stock quantity for product {product_id} at {location} cannot be negative: {quantity}")

        entry = dataclasses.replace(self.get_entry(location, product_id), quantity=quantity, last_updated=utc_now())
        self.stock_repo.save_entry(entry)

        if entry.is_over_reserved:
            logger.warning(
                f"Stock for product {product_id} at {location} is now {quantity}, "
                f"below its reserved quantity {entry.reserved_quantity}"
            )
        logger.info(f"Set stock for product {product_id} at {location} to {quantity}")
        return entry

    def entries_at(self, location: LocationRef) -> list[StockEntry]:
        """Every product stocked at a location."""
        return self.stock_repo.get_entries_by_location(location)

    def total_across_locations(self, product_id: str) -> int:
        """Sum of on-hand quantity of a product over every location."""
        return sum(entry.quantity for entry in self.stock_repo.get_entries_by_product(product_id))

    @staticmethod
    def is_low_stock(product: Product, entry: StockEntry) -> bool:
        return entry.quantity <= product.min_stock

    def low_stock_entries(self, products: list[Product], location: Optional[LocationRef] = None) -> list[StockEntry]:
        """Entries at or below their product's minimum stock, optionally for one location."""
        products_by_id = {product.id: product for product in products}
        if location is not None:
            entries = self.stock_repo.get_entries_by_location(location)
        else:
            entries = self.stock_repo.get_all_entries()

        return [
            entry
            for entry in entries
            if entry.product_id in products_by_id and self.is_low_stock(products_by_id[entry.product_id], entry)
        ]

    def reserve(self, location: LocationRef, product_id: str, quantity: int) -> StockEntry:
        """Holds units back from the available quantity."""
        if quantity <= 0:
            raise InvalidQuantity(f"Reservation quantity must be positive: {quantity}")

        entry = self.get_entry(location, product_id)
        if quantity > entry.available:
            raise InsufficientStock(
                f"Cannot reserve {quantity} of product {product_id} at {location}: only {entry.available} available",
                available=entry.available,
            )

        entry = dataclasses.replace(
            entry, reserved_quantity=entry.reserved_quantity + quantity, last_updated=utc_now()
        )
        self.stock_repo.save_entry(entry)
        logger.info(f"Reserved {quantity} of product {product_id} at {location}")
        return entry

    def release(self, location: LocationRef, product_id: str, quantity: int) -> StockEntry:
        """Returns reserved units to the available quantity. Never drops below zero reserved."""
        if quantity <= 0:
            raise InvalidQuantity(f"Release quantity must be positive: {quantity}")

        entry = self.get_entry(location, product_id)
        entry = dataclasses.replace(
            entry, reserved_quantity=max(0, entry.reserved_quantity - quantity), last_updated=utc_now()
        )
        self.stock_repo.save_entry(entry)
        logger.info(f"Released {quantity} of product {product_id} at {location}")
        return entry

    def transfer(
        self,
        source: LocationRef,
        target: LocationRef,
        product_id: str,
        quantity: int,
        allow_negative: bool = False,
    ) -> tuple[StockEntry, StockEntry]:
        """Moves units from one location to another in a single repository write."""
        if quantity <= 0:
            raise InvalidQuantity(f"Transfer quantity must be positive: {quantity}")
        if source == target:
            raise InvalidQuantity(f"Cannot transfer product {product_id} from {source} to itself")

        source_entry = self.get_entry(source, product_id)
        if not allow_negative and quantity > source_entry.available:
            raise InsufficientStock(
                f"Cannot move {quantity} of product {product_id} from {source}: only {source_entry.available} available",
                available=source_entry.available,
            )
        target_entry = self.get_entry(target, product_id)

        now = utc_now()
        source_entry = dataclasses.replace(source_entry, quantity=source_entry.quantity - quantity, last_updated=now)
        target_entry = dataclasses.replace(target_entry, quantity=target_entry.quantity + quantity, last_updated=now)
        self.stock_repo.save_entries([source_entry, target_entry])

        logger.info(f"Transferred {quantity} of product {product_id} from {source} to {target}")
        return source_entry, target_entry
