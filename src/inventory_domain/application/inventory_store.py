# src/inventory_domain/application/inventory_store.py
"""Session-scoped store for the catalog and the repositories behind the ledger and requests."""

import json
import logging
from typing import Any, Optional

from src.activity_domain.domain.repositories.activity_logger import IActivityLogger
from src.common.exceptions.custom_exceptions import ApplicationError, NotFoundError
from src.inventory_domain.domain.entities.location import LocationKind, LocationRef, Shop, Warehouse
from src.inventory_domain.domain.entities.product import Product
from src.inventory_domain.domain.entities.stock_entry import StockEntry
from src.inventory_domain.domain.repositories.stock_repository import IStockRepository
from src.stock_request_domain.domain.repositories.stock_request_repository import IStockRequestRepository

logger = logging.getLogger(__name__)


class InventoryStore:
    """
    Holds products, warehouses and shops for one session together with the stock,
    request and activity collaborators. Build it at session start and `close()` it
    (or use it as a context manager) at session end.
    """

    def __init__(
        self,
        stock_repo: IStockRepository,
        request_repo: IStockRequestRepository,
        activity_logger: IActivityLogger,
        products: Optional[list[Product]] = None,
        warehouses: Optional[list[Warehouse]] = None,
        shops: Optional[list[Shop]] = None,
    ) -> None:
        self.stock_repo = stock_repo
        self.request_repo = request_repo
        self.activity_logger = activity_logger
        self.products: dict[str, Product] = {p.id: p for p in products or []}
        self.warehouses: dict[str, Warehouse] = {w.id: w for w in warehouses or []}
        self.shops: dict[str, Shop] = {s.id: s for s in shops or []}
        self._closed = False

    def get_product(self, product_id: str) -> Product:
        product = self.products.get(str(product_id))
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def get_warehouse(self, warehouse_id: str) -> Warehouse:
        warehouse = self.warehouses.get(str(warehouse_id))
        if warehouse is None:
            raise NotFoundError(f"Warehouse {warehouse_id} not found")
        return warehouse

    def get_shop(self, shop_id: str) -> Shop:
        shop = self.shops.get(str(shop_id))
        if shop is None:
            raise NotFoundError(f"Shop {shop_id} not found")
        return shop

    def find_products(self, search_term: str) -> list[Product]:
        """Case-insensitive match on product name or SKU."""
        term = search_term.lower()
        return [p for p in self.products.values() if term in p.name.lower() or term in p.sku.lower()]

    def load_catalog(self, catalog: dict[str, Any]) -> None:
        """Loads products, warehouses and shops, and seeds stock for pairs that have none yet."""
        for raw in catalog.get("products", []):
            product = Product.from_dict(raw)
            self.products[product.id] = product
        for raw in catalog.get("warehouses", []):
            warehouse = Warehouse.from_dict(raw)
            self.warehouses[warehouse.id] = warehouse
        for raw in catalog.get("shops", []):
            shop = Shop.from_dict(raw)
            self.shops[shop.id] = shop

        seeded = 0
        for raw in catalog.get("stock", []):
            location = LocationRef(LocationKind(raw["location_kind"]), str(raw["location_id"]))
            product_id = str(raw["product_id"])
            if self.stock_repo.get_entry(location, product_id) is not None:
                continue
            self.stock_repo.save_entry(
                StockEntry(
                    location=location,
                    product_id=product_id,
                    quantity=int(raw.get("quantity", 0)),
                    reserved_quantity=int(raw.get("reserved_quantity", 0)),
                )
            )
            seeded += 1

        logger.info(
            f"Catalog loaded: {len(self.products)} products, {len(self.warehouses)} warehouses, "
            f"{len(self.shops)} shops, {seeded} stock entries seeded"
        )

    def load_catalog_file(self, catalog_path: str) -> None:
        try:
            with open(catalog_path, "r", encoding="utf-8") as f:
                catalog = json.load(f)
        except FileNotFoundError:
            raise ApplicationError(f"Catalog file not found at {catalog_path}")
        except json.JSONDecodeError:
            raise ApplicationError(f"Error decoding catalog from {catalog_path}")

        if not isinstance(catalog, dict):
            raise ApplicationError("Invalid catalog format")
        self.load_catalog(catalog)

    def close(self) -> None:
        """Releases repository connections and flushes the activity log. Safe to call more than once."""
        if self._closed:
            return
        for collaborator in (self.stock_repo, self.request_repo, self.activity_logger):
            close = getattr(collaborator, "close", None)
            if callable(close):
                close()
        self.products.clear()
        self.warehouses.clear()
        self.shops.clear()
        self._closed = True
        logger.info("Inventory store closed")

    def __enter__(self) -> "InventoryStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
