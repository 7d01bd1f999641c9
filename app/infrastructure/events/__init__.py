"""Infrastructure event system - in-process event bus.

Decouples the HTTP entry point from notification delivery.

Usage:

    from infrastructure.events import Event, register_event_handler, dispatch_event

    @register_event_handler("notification.requested")
    def handle(event: Event) -> None:
        ...

    dispatch_event(Event(event_type="notification.requested", metadata={...}))

    # Or on the executor
    from infrastructure.events import dispatch_background
    dispatch_background(event)
"""

from infrastructure.events.dispatcher import (
    clear_handlers,
    dispatch_background,
    dispatch_event,
    get_handlers_for_event,
    get_registered_events,
    register_event_handler,
    shutdown_event_executor,
    start_event_executor,
)
from infrastructure.events.models import Event

__all__ = [
    "Event",
    "clear_handlers",
    "dispatch_event",
    "dispatch_background",
    "register_event_handler",
    "get_registered_events",
    "get_handlers_for_event",
    "start_event_executor",
    "shutdown_event_executor",
]
