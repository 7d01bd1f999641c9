"""Event models for infrastructure event system."""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


@dataclass
class Event:
    """A record of something that happened, handed to registered handlers.

    The bus is the boundary between the HTTP entry point and delivery, so
    ``metadata`` must stay JSON-serializable.
    """

    event_type: str
    """The type of event (e.g., 'notification.requested')."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    """When the event occurred (UTC)."""

    correlation_id: UUID = field(default_factory=uuid4)
    """Unique ID to track related log entries across the system."""

    user_id: str = ""
    """User the event is about."""

    metadata: Dict[str, Any] = field(default_factory=dict)
    """Custom metadata for this event type."""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to dictionary.

        Returns:
            Dictionary with ISO format timestamp and string correlation id.
        """
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["correlation_id"] = str(self.correlation_id)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """Deserialize event from dictionary.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        try:
            timestamp = data.get("timestamp")
            if isinstance(timestamp, str):
                timestamp = datetime.fromisoformat(timestamp)
            elif timestamp is None:
                timestamp = datetime.now(timezone.utc)

            correlation_id = data.get("correlation_id")
            if isinstance(correlation_id, str):
                correlation_id = UUID(correlation_id)
            elif correlation_id is None:
                correlation_id = uuid4()

            return cls(
                event_type=data["event_type"],
                timestamp=timestamp,
                correlation_id=correlation_id,
                user_id=data.get("user_id", ""),
                metadata=data.get("metadata", {}),
            )
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid event data: {e}") from e
