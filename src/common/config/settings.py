"""Application settings and environment variables."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


class Settings:
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_DATABASE: str = os.getenv("DB_NAME", "groundnut_inventory_db")
    DB_USER: str = os.getenv("DB_USER", "user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")

    # "memory" keeps stock and requests in-process, "mysql" persists them
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "memory")
    CATALOG_PATH: str = os.getenv(
        "CATALOG_PATH", os.path.join(os.path.dirname(__file__), "catalog.json")
    )

    ORDER_API_BASE_URL: str = os.getenv("ORDER_API_BASE_URL", "https://seba.hanohost.net/api")
    ORDER_API_TOKEN: Optional[str] = os.getenv("ORDER_API_TOKEN")
    TENANT_ID: Optional[str] = os.getenv("TENANT_ID")

    ACTIVITY_LOG_API_BASE_URL: Optional[str] = os.getenv("ACTIVITY_LOG_API_BASE_URL")

    PAYMENT_GATEWAY_PUBLIC_KEY: str = os.getenv("PAYMENT_GATEWAY_PUBLIC_KEY", "FLWPUBK_TEST-xxxxxxxxxxxxxxxxxxxxx-X")
    PAYMENT_CURRENCY: str = os.getenv("PAYMENT_CURRENCY", "RWF")
    PAYMENT_TITLE: str = os.getenv("PAYMENT_TITLE", "POS Sale Payment")
    PAYMENT_LOGO_URL: str = os.getenv(
        "PAYMENT_LOGO_URL",
        "https://raw.githubusercontent.com/simple-icons/simple-icons/develop/icons/flutter.svg",
    )

    DEFAULT_TAX_RATE: float = float(os.getenv("DEFAULT_TAX_RATE", "8.25"))

    # Walk-in customer used when the cashier selects nobody
    WALK_IN_CUSTOMER_ID: int = int(os.getenv("WALK_IN_CUSTOMER_ID", "1"))
    WALK_IN_CUSTOMER_NAME: str = os.getenv("WALK_IN_CUSTOMER_NAME", "Walk-in Customer")
    WALK_IN_CUSTOMER_EMAIL: str = os.getenv("WALK_IN_CUSTOMER_EMAIL", "pos-customer@example.com")
    WALK_IN_CUSTOMER_PHONE: str = os.getenv("WALK_IN_CUSTOMER_PHONE", "+250000000000")

    # Scheduler settings
    SCHEDULE_TIME: str = os.getenv("SCHEDULE_TIME", "18:00")
    SCHEDULE_TIMEZONE: str = os.getenv("SCHEDULE_TIMEZONE", "Africa/Kigali")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL


settings = Settings()
