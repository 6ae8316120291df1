# sales_domain/infrastructure/api_clients/order_api_client.py
"""Client for the backend order API."""

import json
import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.common.config.settings import settings
from src.common.dtos.order_dtos import CreateOrderRequestDTO, OrderDTO
from src.common.exceptions.custom_exceptions import APIError

logger = logging.getLogger(__name__)


class OrderApiClient:
    def __init__(self) -> None:
        self.base_url = settings.ORDER_API_BASE_URL
        self.token = settings.ORDER_API_TOKEN
        self.tenant_id = settings.TENANT_ID

        # Order creation is not idempotent, so only reads are retried
        self.session = requests.Session()
        retry_strategy = Retry(
            total=3,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            backoff_factor=1,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.tenant_id:
            headers["X-Tenant-ID"] = str(self.tenant_id)
        return headers

    def create_order(self, order_request: CreateOrderRequestDTO) -> OrderDTO:
        """Posts a new order and returns it as recorded by the backend."""
        if not self.token:
            raise APIError("ORDER_API_TOKEN is not set in environment variables.")

        url = f"{self.base_url}/orders"
        payload = order_request.to_payload()
        logger.info(
            f"Creating order for customer {order_request.customer_id} with {len(order_request.items)} item(s) "
            f"(shop: {order_request.shop_id}, warehouse: {order_request.warehouse_id})"
        )
        logger.debug(f"Order payload: {payload}")

        try:
            response = self.session.post(url, json=payload, headers=self._headers(), timeout=30)
        except requests.exceptions.Timeout as e:
            raise APIError(f"Order creation request timed out: {e}", original_exception=e)
        except requests.exceptions.RequestException as e:
            raise APIError(f"Order creation request failed: {e}", original_exception=e)

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise APIError(
                f"Failed to decode order API response: {e}. Raw response: {response.text}",
                original_exception=e,
                status_code=response.status_code,
            )

        if response.ok and data.get("success"):
            order = OrderDTO.from_api_response(data.get("data") or {})
            logger.info(f"Order {order.order_number} created (id {order.order_id})")
            return order

        message = data.get("message") or f"Failed to create order. Status: {response.status_code}"
        logger.error(f"Failed to create order: {message}")
        raise APIError(message, status_code=response.status_code)

    def __del__(self) -> None:
        """Clean up the session when the object is destroyed."""
        if hasattr(self, "session"):
            self.session.close()
