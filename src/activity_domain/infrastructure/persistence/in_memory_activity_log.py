"""In-memory activity log keeping the most recent entries."""

import logging
from collections import deque
from threading import Lock

from src.activity_domain.domain.entities.activity_log_entry import ActivityLogEntry
from src.activity_domain.domain.repositories.activity_logger import IActivityLogger

logger = logging.getLogger(__name__)

MAX_ENTRIES = 1000


class InMemoryActivityLog(IActivityLogger):
    """Newest entries first; the oldest fall off past `max_entries`."""

    def __init__(self, max_entries: int = MAX_ENTRIES) -> None:
        self._entries: deque[ActivityLogEntry] = deque(maxlen=max_entries)
        self._lock = Lock()

    def record(self, entry: ActivityLogEntry) -> None:
        with self._lock:
            self._entries.appendleft(entry)
        logger.debug(f"Activity: {entry.actor_name or entry.actor_id} {entry.action} in {entry.module}")

    def entries(self, module: str | None = None) -> list[ActivityLogEntry]:
        with self._lock:
            return [e for e in self._entries if module is None or e.module == module]
