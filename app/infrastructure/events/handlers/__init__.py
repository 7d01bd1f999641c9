"""Event handlers for infrastructure event system."""

from infrastructure.events.handlers.notifications import (
    NOTIFICATION_REQUESTED,
    enqueue_notification,
    handle_notification_requested,
)

__all__ = [
    "NOTIFICATION_REQUESTED",
    "enqueue_notification",
    "handle_notification_requested",
]
