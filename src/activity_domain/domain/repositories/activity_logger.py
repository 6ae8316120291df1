"""Activity logger interface."""
import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.activity_domain.domain.entities.activity_log_entry import ActivityLogEntry
from src.common.dtos.actor_dtos import ActorDTO
from src.common.utils.date_utils import utc_now


class IActivityLogger(ABC):
    """Fire-and-forget audit trail. Implementations must never raise from `log`."""

    def log(self, actor: ActorDTO, action: str, module: str, details: Optional[dict[str, Any]] = None) -> None:
        """Builds an entry for the actor's action and records it."""
        entry = ActivityLogEntry(
            id=uuid.uuid4().hex,
            actor_id=actor.id,
            actor_name=actor.name,
            action=action,
            module=module,
            timestamp=utc_now(),
            details=details or {},
        )
        self.record(entry)

    @abstractmethod
    def record(self, entry: ActivityLogEntry) -> None:
        """Stores or ships one entry."""
        pass
