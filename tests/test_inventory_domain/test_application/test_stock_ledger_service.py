# tests/test_inventory_domain/test_application/test_stock_ledger_service.py
"""Tests for the Stock Ledger Service."""

import pytest

from src.common.exceptions.custom_exceptions import InsufficientStock, InvalidQuantity
from src.inventory_domain.domain.entities.location import LocationKind, LocationRef
from src.inventory_domain.domain.entities.stock_entry import StockEntry


def test_get_entry_returns_zero_entry_for_unknown_pair(ledger, shop_ref) -> None:
    entry = ledger.get_entry(shop_ref, "1")

    assert entry.quantity == 0
    assert entry.reserved_quantity == 0
    assert entry.available == 0


def test_set_quantity_creates_and_overwrites(ledger, warehouse_ref) -> None:
    ledger.set_quantity(warehouse_ref, "1", 150)
    entry = ledger.set_quantity(warehouse_ref, "1", 120)

    assert entry.quantity == 120
    assert entry.last_updated is not None
    assert ledger.get_entry(warehouse_ref, "1").quantity == 120


@pytest.mark.parametrize("quantity", [-1, None])
def test_set_quantity_rejects_negative_or_missing(ledger, warehouse_ref, quantity) -> None:
    with pytest.raises(InvalidQuantity):
        ledger.set_quantity(warehouse_ref, "1", quantity)

    assert ledger.stock_repo.get_entry(warehouse_ref, "1") is None


def test_set_quantity_below_reserved_is_flagged(ledger, stock_repo, warehouse_ref) -> None:
    """A physical count lower than the reservations is recorded, and the entry reports it."""
    stock_repo.save_entry(StockEntry(location=warehouse_ref, product_id="1", quantity=150, reserved_quantity=10))

    entry = ledger.set_quantity(warehouse_ref, "1", 5)

    assert entry.quantity == 5
    assert entry.reserved_quantity == 10
    assert entry.is_over_reserved
    assert entry.available == -5


def test_warehouse_and_shop_with_same_id_are_separate(ledger) -> None:
    warehouse = LocationRef(LocationKind.WAREHOUSE, "1")
    shop = LocationRef(LocationKind.SHOP, "1")

    ledger.set_quantity(warehouse, "1", 150)
    ledger.set_quantity(shop, "1", 8)

    assert ledger.get_entry(warehouse, "1").quantity == 150
    assert ledger.get_entry(shop, "1").quantity == 8
    assert ledger.total_across_locations("1") == 158


def test_reserve_reduces_available(ledger, stock_repo, warehouse_ref) -> None:
    stock_repo.save_entry(StockEntry(location=warehouse_ref, product_id="1", quantity=150, reserved_quantity=10))

    entry = ledger.reserve(warehouse_ref, "1", 40)

    assert entry.reserved_quantity == 50
    assert entry.available == 100


def test_reserve_more_than_available_raises(ledger, stock_repo, warehouse_ref) -> None:
    stock_repo.save_entry(StockEntry(location=warehouse_ref, product_id="1", quantity=150, reserved_quantity=10))

    with pytest.raises(InsufficientStock) as exc_info:
        ledger.reserve(warehouse_ref, "1", 141)

    assert exc_info.value.available == 140
    assert ledger.get_entry(warehouse_ref, "1").reserved_quantity == 10


def test_release_never_goes_below_zero(ledger, stock_repo, warehouse_ref) -> None:
    stock_repo.save_entry(StockEntry(location=warehouse_ref, product_id="1", quantity=150, reserved_quantity=10))

    entry = ledger.release(warehouse_ref, "1", 25)

    assert entry.reserved_quantity == 0


def test_transfer_moves_units_between_locations(ledger, warehouse_ref, shop_ref) -> None:
    ledger.set_quantity(warehouse_ref, "1", 150)
    ledger.set_quantity(shop_ref, "1", 8)

    source, target = ledger.transfer(warehouse_ref, shop_ref, "1", 42)

    assert source.quantity == 108
    assert target.quantity == 50
    assert ledger.total_across_locations("1") == 158


def test_transfer_respects_reservations(ledger, stock_repo, warehouse_ref, shop_ref) -> None:
    stock_repo.save_entry(StockEntry(location=warehouse_ref, product_id="1", quantity=50, reserved_quantity=20))

    with pytest.raises(InsufficientStock):
        ledger.transfer(warehouse_ref, shop_ref, "1", 31)

    assert ledger.get_entry(warehouse_ref, "1").quantity == 50
    assert stock_repo.get_entry(shop_ref, "1") is None


def test_transfer_to_same_location_is_rejected(ledger, warehouse_ref) -> None:
    ledger.set_quantity(warehouse_ref, "1", 10)

    with pytest.raises(InvalidQuantity):
        ledger.transfer(warehouse_ref, warehouse_ref, "1", 5)


def test_low_stock_uses_at_or_below_min(ledger, tira_product, red_product, warehouse_ref, shop_ref) -> None:
    ledger.set_quantity(warehouse_ref, tira_product.id, 150)
    ledger.set_quantity(shop_ref, tira_product.id, 50)  # exactly min_stock
    ledger.set_quantity(shop_ref, red_product.id, 41)

    low = ledger.low_stock_entries([tira_product, red_product])

    assert [(e.location, e.product_id) for e in low] == [(shop_ref, tira_product.id)]
    assert ledger.low_stock_entries([tira_product, red_product], location=warehouse_ref) == []
