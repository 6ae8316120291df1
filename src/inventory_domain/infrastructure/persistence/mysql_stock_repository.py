# src/inventory_domain/infrastructure/persistence/mysql_stock_repository.py
"""MySQL implementation of the stock repository."""

import logging
from typing import Optional

import mysql.connector
from mysql.connector import Error

from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import DatabaseError
from src.common.utils.date_utils import format_datetime_for_db, parse_datetime_from_db
from src.inventory_domain.domain.entities.location import LocationKind, LocationRef
from src.inventory_domain.domain.entities.stock_entry import StockEntry
from src.inventory_domain.domain.repositories.stock_repository import IStockRepository

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = "location_kind, location_id, product_id, quantity, reserved_quantity, last_updated"

_UPSERT_QUERY = """
INSERT INTO gni_stock_entries
(location_kind, location_id, product_id, quantity, reserved_quantity, last_updated)
VALUES (%s, %s, %s, %s, %s, %s)
ON DUPLICATE KEY UPDATE
quantity = VALUES(quantity),
reserved_quantity = VALUES(reserved_quantity),
last_updated = VALUES(last_updated)
"""


class MySQLStockRepository(IStockRepository):
    """MySQL implementation of the Stock Repository."""

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
    def _entry_params(entry: StockEntry) -> tuple:
        return (
            entry.location.kind.value,
            entry.location.id,
            entry.product_id,
            entry.quantity,
            entry.reserved_quantity,
            format_datetime_for_db(entry.last_updated),
        )

    @staticmethod
    def _row_to_entry(row: dict) -> StockEntry:
        return StockEntry(
            location=LocationRef(LocationKind(row["location_kind"]), str(row["location_id"])),
            product_id=str(row["product_id"]),
            quantity=row["quantity"],
            reserved_quantity=row["reserved_quantity"],
            last_updated=parse_datetime_from_db(row["last_updated"]),
        )

    def create_tables(self) -> None:
        """Creates the stock entries table if it does not exist."""
        create_stock_table_query = """
        CREATE TABLE IF NOT EXISTS gni_stock_entries (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            location_kind VARCHAR(20) NOT NULL,
            location_id VARCHAR(64) NOT NULL,
            product_id VARCHAR(64) NOT NULL,
            quantity INT NOT NULL DEFAULT 0,
            reserved_quantity INT UNSIGNED NOT NULL DEFAULT 0,
            last_updated DATETIME,
            UNIQUE KEY uk_location_product (location_kind, location_id, product_id),
            INDEX idx_product (product_id)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(create_stock_table_query)
            conn.commit()
            logger.info("Stock entries table checked/created.")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error creating stock entries table: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_entry(self, location: LocationRef, product_id: str) -> Optional[StockEntry]:
        """Retrieves the entry for a (location, product) pair."""
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            query = f"""
            SELECT {_SELECT_COLUMNS}
            FROM gni_stock_entries
            WHERE location_kind = %s AND location_id = %s AND product_id = %s
            LIMIT 1
            """
            cursor.execute(query, (location.kind.value, location.id, product_id))
            row = cursor.fetchone()
            return self._row_to_entry(row) if row else None
        except Error as e:
            raise DatabaseError(f"Error fetching stock for product {product_id} at {location}: {e}", original_exception=e)
        finally:
            cursor.close()

    def save_entry(self, entry: StockEntry) -> None:
        """Saves or updates a single stock entry."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(_UPSERT_QUERY, self._entry_params(entry))
            conn.commit()
        except Error as e:
            conn.rollback()
            raise DatabaseError(
                f"Error saving stock for product {entry.product_id} at {entry.location}: {e}", original_exception=e
            )
        finally:
            cursor.close()

    def save_entries(self, entries: list[StockEntry]) -> None:
        """Saves several entries in one transaction."""
        if not entries:
            return

        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.executemany(_UPSERT_QUERY, [self._entry_params(entry) for entry in entries])
            conn.commit()
            logger.debug(f"Saved {len(entries)} stock entries in one transaction")
        except Error as e:
            conn.rollback()
            raise DatabaseError(f"Error saving stock entries: {e}", original_exception=e)
        finally:
            cursor.close()

    def _fetch_entries(self, where: str, params: tuple) -> list[StockEntry]:
        conn = self._get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {_SELECT_COLUMNS} FROM gni_stock_entries {where}", params)
            return [self._row_to_entry(row) for row in cursor.fetchall()]
        except Error as e:
            raise DatabaseError(f"Error fetching stock entries: {e}", original_exception=e)
        finally:
            cursor.close()

    def get_entries_by_product(self, product_id: str) -> list[StockEntry]:
        return self._fetch_entries("WHERE product_id = %s", (product_id,))

    def get_entries_by_location(self, location: LocationRef) -> list[StockEntry]:
        return self._fetch_entries("WHERE location_kind = %s AND location_id = %s", (location.kind.value, location.id))

    def get_all_entries(self) -> list[StockEntry]:
        return self._fetch_entries("", ())

    def close(self) -> None:
        """Closes the database connection."""
        if self._connection and self._connection.is_connected():
            self._connection.close()
        self._connection = None
