"""Tests for the Inventory Store."""

import json
from unittest.mock import Mock

import pytest

from src.common.exceptions.custom_exceptions import ApplicationError, NotFoundError
from src.inventory_domain.application.inventory_store import InventoryStore
from src.inventory_domain.domain.entities.location import LocationKind, LocationRef
from src.inventory_domain.domain.entities.stock_entry import StockEntry
from src.inventory_domain.infrastructure.persistence.mysql_stock_repository import MySQLStockRepository
from src.stock_request_domain.infrastructure.persistence.mysql_stock_request_repository import (
    MySQLStockRequestRepository,
)


@pytest.fixture
def sample_catalog() -> dict:
    return {
        "products": [
            {"id": 1, "name": "Tira Groundnuts Premium Grade", "sku": "GN-TIRA-001", "price": 45.99,
             "min_stock": 50, "max_stock": 500},
            {"id": 2, "name": "White Groundnuts Export Quality", "sku": "GN-WHITE-002", "price": 52.99,
             "min_stock": 75, "max_stock": 750},
        ],
        "warehouses": [{"id": 1, "name": "Main Processing Center", "capacity": 5000}],
        "shops": [
            {"id": 1, "name": "Groundnut Mart Downtown", "warehouse_ids": [1],
             "settings": {"auto_request_threshold": 15, "receipt_template": "premium"}}
        ],
        "stock": [
            {"location_kind": "warehouse", "location_id": 1, "product_id": 1, "quantity": 150, "reserved_quantity": 10},
            {"location_kind": "shop", "location_id": 1, "product_id": 1, "quantity": 8},
        ],
    }


def test_get_unknown_entities_raise_not_found(store) -> None:
    with pytest.raises(NotFoundError):
        store.get_product("99")
    with pytest.raises(NotFoundError):
        store.get_warehouse("99")
    with pytest.raises(NotFoundError):
        store.get_shop("99")


def test_find_products_matches_name_or_sku(store) -> None:
    assert [p.id for p in store.find_products("tira")] == ["1"]
    assert [p.id for p in store.find_products("gn-red")] == ["3"]
    assert len(store.find_products("groundnuts")) == 2


def test_load_catalog(stock_repo, request_repo, activity_log, sample_catalog) -> None:
    store = InventoryStore(stock_repo, request_repo, activity_log)

    store.load_catalog(sample_catalog)

    assert store.get_product("1").price == 45.99
    assert store.get_shop("1").warehouse_ids == ["1"]
    assert store.get_shop("1").settings.auto_request_threshold == 15
    entry = stock_repo.get_entry(LocationRef(LocationKind.WAREHOUSE, "1"), "1")
    assert entry.quantity == 150
    assert entry.reserved_quantity == 10
    assert stock_repo.get_entry(LocationRef(LocationKind.SHOP, "1"), "1").quantity == 8


def test_load_catalog_does_not_overwrite_existing_stock(stock_repo, request_repo, activity_log, sample_catalog) -> None:
    warehouse = LocationRef(LocationKind.WAREHOUSE, "1")
    stock_repo.save_entry(StockEntry(location=warehouse, product_id="1", quantity=42))
    store = InventoryStore(stock_repo, request_repo, activity_log)

    store.load_catalog(sample_catalog)

    assert stock_repo.get_entry(warehouse, "1").quantity == 42


def test_load_catalog_file(mocker, stock_repo, request_repo, activity_log, sample_catalog) -> None:
    mocker.patch("builtins.open", mocker.mock_open(read_data=json.dumps(sample_catalog)))
    store = InventoryStore(stock_repo, request_repo, activity_log)

    store.load_catalog_file("dummy_path/catalog.json")

    assert len(store.products) == 2


def test_load_catalog_file_not_found(mocker, store) -> None:
    mocker.patch("builtins.open", side_effect=FileNotFoundError)

    with pytest.raises(ApplicationError, match="Catalog file not found"):
        store.load_catalog_file("missing.json")


def test_load_catalog_file_invalid_json(mocker, store) -> None:
    mocker.patch("builtins.open", mocker.mock_open(read_data="{not json"))

    with pytest.raises(ApplicationError, match="Error decoding catalog"):
        store.load_catalog_file("broken.json")


def test_close_releases_repositories_once(activity_log) -> None:
    stock_repo = Mock(spec=MySQLStockRepository)
    request_repo = Mock(spec=MySQLStockRequestRepository)

    with InventoryStore(stock_repo, request_repo, activity_log) as store:
        pass
    store.close()

    stock_repo.close.assert_called_once()
    request_repo.close.assert_called_once()
    assert store.products == {}
