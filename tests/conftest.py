# tests/conftest.py
from unittest.mock import Mock

import pytest

from src.activity_domain.infrastructure.persistence.in_memory_activity_log import InMemoryActivityLog
from src.common.config.settings import settings
from src.common.dtos.actor_dtos import ActorDTO
from src.inventory_domain.application.inventory_store import InventoryStore
from src.inventory_domain.application.stock_ledger_service import StockLedgerService
from src.inventory_domain.domain.entities.location import LocationKind, LocationRef, Shop, ShopSettings, Warehouse
from src.inventory_domain.domain.entities.product import Product
from src.inventory_domain.infrastructure.persistence.in_memory_stock_repository import InMemoryStockRepository
from src.sales_domain.application.checkout_service import CheckoutService
from src.sales_domain.application.checkout_session import CheckoutSession
from src.sales_domain.domain.gateways.payment_gateway import IPaymentGateway
from src.sales_domain.infrastructure.api_clients.order_api_client import OrderApiClient
from src.stock_request_domain.application.stock_request_service import StockRequestApplicationService
from src.stock_request_domain.infrastructure.persistence.in_memory_stock_request_repository import (
    InMemoryStockRequestRepository,
)


@pytest.fixture(autouse=True)
def mock_settings_api_info(mocker) -> None:
    """Mocks the API and pricing settings for consistent testing."""
    mocker.patch.object(settings, "ORDER_API_BASE_URL", "https://api.example.com")
    mocker.patch.object(settings, "ORDER_API_TOKEN", "test_token")
    mocker.patch.object(settings, "TENANT_ID", "1")
    mocker.patch.object(settings, "ACTIVITY_LOG_API_BASE_URL", None)
    mocker.patch.object(settings, "DEFAULT_TAX_RATE", 8.25)
    mocker.patch.object(settings, "WALK_IN_CUSTOMER_ID", 1)


@pytest.fixture
def warehouse_ref() -> LocationRef:
    return LocationRef(LocationKind.WAREHOUSE, "1")


@pytest.fixture
def shop_ref() -> LocationRef:
    return LocationRef(LocationKind.SHOP, "1")


@pytest.fixture
def tira_product() -> Product:
    """Sample product priced 45.99."""
    return Product(
        id="1", name="Tira Groundnuts Premium Grade", sku="GN-TIRA-001", price=45.99, cost=32.0,
        min_stock=50, max_stock=500,
    )


@pytest.fixture
def red_product() -> Product:
    return Product(
        id="3", name="Red Groundnuts Local Grade", sku="GN-RED-003", price=38.50, cost=26.0,
        min_stock=40, max_stock=400,
    )


@pytest.fixture
def shop_manager() -> ActorDTO:
    return ActorDTO(id="4", role="shop_manager", name="Shop Manager", shop_id=1)


@pytest.fixture
def warehouse_manager() -> ActorDTO:
    return ActorDTO(id="3", role="warehouse_manager", name="Warehouse Manager", warehouse_id=1)


@pytest.fixture
def activity_log() -> InMemoryActivityLog:
    return InMemoryActivityLog()


@pytest.fixture
def stock_repo() -> InMemoryStockRepository:
    return InMemoryStockRepository()


@pytest.fixture
def request_repo() -> InMemoryStockRequestRepository:
    return InMemoryStockRequestRepository()


@pytest.fixture
def ledger(stock_repo) -> StockLedgerService:
    return StockLedgerService(stock_repo)


@pytest.fixture
def request_service(request_repo, ledger, activity_log) -> StockRequestApplicationService:
    """StockRequestApplicationService over in-memory repositories."""
    return StockRequestApplicationService(request_repo=request_repo, ledger=ledger, activity_logger=activity_log)


@pytest.fixture
def store(stock_repo, request_repo, activity_log, tira_product, red_product) -> InventoryStore:
    """Store with two products, warehouse 1 and shop 1 linked to it."""
    return InventoryStore(
        stock_repo,
        request_repo,
        activity_log,
        products=[tira_product, red_product],
        warehouses=[Warehouse(id="1", name="Main Processing Center", capacity=5000)],
        shops=[Shop(id="1", name="Groundnut Mart Downtown", warehouse_ids=["1"], settings=ShopSettings())],
    )


@pytest.fixture
def mock_order_client() -> Mock:
    """Mock for OrderApiClient."""
    return Mock(spec=OrderApiClient)


@pytest.fixture
def mock_gateway() -> Mock:
    """Mock for the payment gateway."""
    return Mock(spec=IPaymentGateway)


@pytest.fixture
def checkout_service(mock_order_client, mock_gateway, activity_log) -> CheckoutService:
    return CheckoutService(order_client=mock_order_client, gateway=mock_gateway, activity_logger=activity_log)


@pytest.fixture
def outcomes() -> list:
    """Collects outcomes delivered to a session listener."""
    return []


@pytest.fixture
def checkout_session(shop_manager, outcomes) -> CheckoutSession:
    return CheckoutSession(actor=shop_manager, listener=outcomes.append)
