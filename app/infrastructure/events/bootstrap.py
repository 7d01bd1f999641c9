"""Register infrastructure event handlers at startup."""

from infrastructure.events.dispatcher import register_event_handler
from infrastructure.events.handlers import (
    NOTIFICATION_REQUESTED,
    handle_notification_requested,
)
from infrastructure.logging import get_module_logger

logger = get_module_logger()


def register_infrastructure_handlers() -> None:
    """Register all infrastructure event handlers.

    Call once at application startup before any events are dispatched.
    Calling again does not register duplicates.
    """
    register_event_handler(NOTIFICATION_REQUESTED)(handle_notification_requested)
    logger.info(
        "infrastructure_handlers_registered",
        handlers=[handle_notification_requested.__name__],
    )
