"""Client shipping activity log entries to the backend."""

import concurrent.futures
import logging

import requests

from src.activity_domain.domain.entities.activity_log_entry import ActivityLogEntry
from src.activity_domain.domain.repositories.activity_logger import IActivityLogger
from src.common.config.settings import settings

logger = logging.getLogger(__name__)

POST_TIMEOUT = 5


class ActivityLogApiClient(IActivityLogger):
    """Ships entries from a background worker so callers never wait on the backend."""

    def __init__(self) -> None:
        self.base_url = settings.ACTIVITY_LOG_API_BASE_URL
        self.token = settings.ORDER_API_TOKEN
        self.tenant_id = settings.TENANT_ID
        self.session = requests.Session()
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="activity-log")

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.tenant_id:
            headers["X-Tenant-ID"] = str(self.tenant_id)
        return headers

    def record(self, entry: ActivityLogEntry) -> None:
        """Queues the entry for shipping and returns immediately."""
        if not self.base_url:
            logger.warning(f"ACTIVITY_LOG_API_BASE_URL is not set, dropping activity '{entry.action}'")
            return
        try:
            self.executor.submit(self._post, entry)
        except RuntimeError:
            logger.warning(f"Activity log client is closed, dropping activity '{entry.action}' ({entry.id})")

    def _post(self, entry: ActivityLogEntry) -> None:
        url = f"{self.base_url}/activity-logs"
        try:
            response = self.session.post(url, json=entry.to_payload(), headers=self._headers(), timeout=POST_TIMEOUT)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Failed to ship activity '{entry.action}' ({entry.id}): {e}")

    def close(self) -> None:
        """Waits for queued entries to be shipped, then closes the session."""
        self.executor.shutdown(wait=True)
        self.session.close()

    def __del__(self) -> None:
        """Clean up the executor and session when the object is destroyed."""
        if hasattr(self, "executor"):
            self.executor.shutdown(wait=False)
        if hasattr(self, "session"):
            self.session.close()
