"""Activity Log Entry entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class ActivityLogEntry:
    """One audited action performed by an actor."""

    id: str
    actor_id: str
    actor_name: str
    action: str
    module: str
    timestamp: datetime
    details: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.actor_id,
            "user_name": self.actor_name,
            "action": self.action,
            "module": self.module,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }
