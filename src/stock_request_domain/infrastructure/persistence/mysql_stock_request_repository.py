# src/stock_request_domain/infrastructure/persistence/mysql_stock_request_repository.py
"""MySQL implementation of the stock request repository."""

import logging
from typing import Optional

import mysql.connector
from mysql.connector import Error

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import DatabaseError
from src.common.utils.date_utils import format_datetime_for_db, parse_datetime_from_db
from src.stock_request_domain.domain.entities.stock_request import StockRequest, StockRequestStatus
from src.stock_request_domain.domain.repositories.stock_request_repository import IStockRequestRepository

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = """
id, shop_id, warehouse_id, product_id, requested_quantity, requested_by, status,
approved_by, approved_quantity, fulfilled_by, notes, created_at, updated_at
"""


class MySQLStockRequestRepository(IStockRequestRepository):
    """MySQL implementation of the Stock Request Repository."""

    def __init__(self) -> None:
        """Initializes the repository."""
        self._connection = None

    def _get_connection(self):
        """Establishes or returns an active MySQL database connection."""
        if not self._connection or not self._connection.is_connected():
            try:
                self._connection = mysql.connector.connect(
                    host=settings.DB_HOST,
                    database=settings.DB_DATABASE,
                    user=settings.DB_USER,
                    password=settings.DB_PASSWORD,
                    autocommit=False,
                    charset="utf8mb4",
                    use_unicode=True,
                )
            except Error as e:
                raise DatabaseError(f"Failed to connect to MySQL: {e}", original_exception=e)
        return self._connection

    @staticmethod
    def _row_to_request(row: dict) -> StockRequest:
        return StockRequest(
            id=row["id"],
            shop_id=str(row["shop_id"]),
            warehouse_id=str(row["warehouse_id"]),
            product_id=str(row["product_id"]),
            requested_quantity=row["requested_quantity"],
            requested_by=row["requested_by"],
            status=StockRequestStatus(row["status"]),
            approved_by=row["approved_by"],
            approved_quantity=row["approved_quantity"],
            fulfilled_by=row["fulfilled_by"],
            notes=row["notes"],
            created_at=parse_datetime_from_db(row["created_at"]),
            updated_at=parse_datetime_from_db(row["updated_at"]),
        )

    def create_tables(self) -> None:
        """Creates the stock requests table if it does not exist."""
        create_requests_table_query = """
        CREATE TABLE IF NOT EXISTS gni_stock_requests (
            id VARCHAR(64) PRIMARY KEY,
            shop_id VARCHAR(64) NOT NULL,
            warehouse_id VARCHAR(64) NOT NULL,
            product_id VARCHAR(64) NOT NULL,
            requested_quantity INT UNSIGNED NOT NULL,
            requested_by VARCHAR(64) NOT NULL,
            status VARCHAR(20) NOT NULL,
            approved_by VARCHAR(64),
            approved_quantity INT UNSIGNED,
            fulfilled_by VARCHAR(64),
            notes TEXT,
            created_at DATETIME,
            updated_at DATETIME,
            INDEX idx_shop_status (shop_id, status),
            INDEX idx_warehouse_status (warehouse_id, status)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(create_requests_table_query)
            conn.commit()
            logger.info("Stock requests table checked/created.")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error creating stock requests table: {e}", original_exception=e)
        finally:
            cursor.close()

    def save_request(self, request: StockRequest) -> None:
        """Saves or updates a stock request."""
        conn = self._get_connection()
        cursor = conn.cursor()

        insert_query = """
        INSERT INTO gni_stock_requests
        (id, shop_id, warehouse_id, product_id, requested_quantity, requested_by, status,
         approved_by, approved_quantity, fulfilled_by, notes, created_at, updated_at)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        ON DUPLICATE KEY UPDATE
        status = VALUES(status),
        approved_by = VALUES(approved_by),
        approved_quantity = VALUES(approved_quantity),
        fulfilled_by = VALUES(fulfilled_by),
        notes = VALUES(notes),
        updated_at = VALUES(updated_at)
        """
        params = (
            request.id,
            request.shop_id,
            request.warehouse_id,
            request.product_id,
            request.requested_quantity,
            request.requested_by,
            request.status.value,
            request.approved_by,
            request.approved_quantity,
            request.fulfilled_by,
            request.notes,
            format_datetime_for_db(request.created_at),
            format_datetime_for_db(request.updated_at),
        )

        try:
            cursor.execute(insert_query, params)
            conn.commit()
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error saving stock request {request.id}: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_request(self, request_id: str) -> Optional[StockRequest]:
        """Retrieves a stock request by id."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {_SELECT_COLUMNS} FROM gni_stock_requests WHERE id = %s LIMIT 1", (request_id,))
            row = cursor.fetchone()
            return self._row_to_request(row) if row else None
        except Error as e:
            raise DatabaseError(f"Error fetching stock request {request_id}: {e}", original_exception=e)
        finally:
            cursor.close()

    def list_requests(
        self,
        shop_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
        status: Optional[StockRequestStatus] = None,
    ) -> list[StockRequest]:
        """Retrieves requests matching every given filter, oldest first."""
        conditions = []
        params: list = []
        if shop_id is not None:
            conditions.append("shop_id = %s")
            params.append(shop_id)
        if warehouse_id is not None:
            conditions.append("warehouse_id = %s")
            params.append(warehouse_id)
        if status is not None:
            conditions.append("status = %s")
            params.append(status.value)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {_SELECT_COLUMNS} FROM gni_stock_requests {where} ORDER BY created_at", tuple(params))
            return [self._row_to_request(row) for row in cursor.fetchall()]
        except Error as e:
            raise DatabaseError(f"Error listing stock requests: {e}", original_exception=e)
        finally:
            cursor.close()

    def close(self) -> None:
        """Closes the database connection."""
        if self._connection and self._connection.is_connected():
            self._connection.close()
        self._connection = None
