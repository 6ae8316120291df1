# main.py
"""Main application entry point for the daily stock review: auto requests and low stock report."""

import logging
import time
from datetime import datetime

import pytz
import schedule

from src.activity_domain.domain.repositories.activity_logger import IActivityLogger
from src.activity_domain.infrastructure.api_clients.activity_log_api_client import ActivityLogApiClient
from src.activity_domain.infrastructure.persistence.in_memory_activity_log import InMemoryActivityLog
from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import ApplicationError, DatabaseError
from src.common.logger_config import setup_logging
from src.inventory_domain.application.inventory_store import InventoryStore
from src.inventory_domain.application.stock_ledger_service import StockLedgerService
from src.inventory_domain.infrastructure.persistence.in_memory_stock_repository import InMemoryStockRepository
from src.inventory_domain.infrastructure.persistence.mysql_stock_repository import MySQLStockRepository
from src.stock_request_domain.application.auto_request_service import AutoRequestService
from src.stock_request_domain.application.stock_request_service import StockRequestApplicationService
from src.stock_request_domain.infrastructure.persistence.in_memory_stock_request_repository import (
    InMemoryStockRequestRepository,
)
from src.stock_request_domain.infrastructure.persistence.mysql_stock_request_repository import (
    MySQLStockRequestRepository,
)

logger = logging.getLogger(__name__)


def create_activity_logger() -> IActivityLogger:
    if settings.ACTIVITY_LOG_API_BASE_URL:
        return ActivityLogApiClient()
    return InMemoryActivityLog()


def create_inventory_store() -> InventoryStore:
    """Wires the repositories for the configured backend and loads the catalog."""
    if settings.STORE_BACKEND == "mysql":
        stock_repo = MySQLStockRepository()
        request_repo = MySQLStockRequestRepository()
        try:
            stock_repo.create_tables()
            request_repo.create_tables()
            logger.info("✅ Database tables created/verified successfully")
        except DatabaseError as e:
            logger.error(f"❌ Error creating inventory database tables: {e}")
            raise
    else:
        stock_repo = InMemoryStockRepository()
        request_repo = InMemoryStockRequestRepository()

    store = InventoryStore(stock_repo, request_repo, create_activity_logger())
    store.load_catalog_file(settings.CATALOG_PATH)
    return store


def report_low_stock(store: InventoryStore, ledger: StockLedgerService) -> None:
    low_entries = ledger.low_stock_entries(list(store.products.values()))
    if not low_entries:
        logger.info("📦 No low stock entries")
        return

    logger.info(f"⚠️  {len(low_entries)} low stock entries:")
    for entry in low_entries:
        product = store.products[entry.product_id]
        logger.info(
            f"   {entry.location}: {product.name} ({product.sku}) "
            f"quantity {entry.quantity}, min {product.min_stock}, available {entry.available}"
        )


def run_daily_stock_review() -> None:
    """Raises automatic stock requests for shops and reports low stock across all locations."""
    logger.info(f"\n{'='*80}")
    logger.info("🚀 Starting daily stock review")
    logger.info(f"📅 Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"{'='*80}")

    try:
        with create_inventory_store() as store:
            ledger = StockLedgerService(store.stock_repo)
            request_service = StockRequestApplicationService(store.request_repo, ledger, store.activity_logger)

            created = AutoRequestService(store, ledger, request_service).run()
            for request in created:
                logger.info(
                    f"   📝 Requested {request.requested_quantity} of product {request.product_id} "
                    f"for shop {request.shop_id} from warehouse {request.warehouse_id}"
                )

            report_low_stock(store, ledger)
    except ApplicationError as e:
        logger.error(f"An error occurred during the stock review: {e}")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")

    logger.info(f"⏱️  Stock review finished at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")


if __name__ == "__main__":
    setup_logging()
    logger.info("🎯 Groundnut Inventory stock review service")
    logger.info(f"📅 Scheduling stock review every day at {settings.SCHEDULE_TIME} {settings.SCHEDULE_TIMEZONE}")

    schedule_tz = pytz.timezone(settings.SCHEDULE_TIMEZONE)
    schedule.every().day.at(settings.SCHEDULE_TIME, schedule_tz).do(run_daily_stock_review)

    logger.info("🔄 Running immediate review...")
    run_daily_stock_review()

    logger.info("⏰ Scheduler started. Waiting for scheduled time...")
    while True:
        schedule.run_pending()
        time.sleep(30)
