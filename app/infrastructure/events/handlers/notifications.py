"""Queue boundary for notification delivery.

The HTTP entry point publishes a ``notification.requested`` event carrying
the JSON-dumped message; this handler rebuilds the message and hands it to
the notification service on an executor thread.
"""

from typing import Optional, TYPE_CHECKING

from pydantic import ValidationError

from infrastructure.events.dispatcher import dispatch_background, dispatch_event
from infrastructure.events.models import Event
from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import DispatchOutcome, NotificationMessage

if TYPE_CHECKING:
    from infrastructure.notifications.service import NotificationService

logger = get_module_logger()

NOTIFICATION_REQUESTED = "notification.requested"


def enqueue_notification(
    message: NotificationMessage,
    background: bool = True,
) -> Event:
    """Publish a message for delivery.

    Args:
        message: Validated message
        background: Deliver on the event executor (default) or inline

    Returns:
        The published event

    Raises:
        RuntimeError: If the background executor is unavailable
    """
    event = Event(
        event_type=NOTIFICATION_REQUESTED,
        user_id=message.user_id,
        metadata={"message": message.model_dump(mode="json")},
    )

    logger.info(
        "notification_requested",
        message_id=message.message_id,
        user_id=message.user_id,
        channels=[c.value for c in message.channels],
        background=background,
        correlation_id=str(event.correlation_id),
    )

    if background:
        dispatch_background(event)
    else:
        dispatch_event(event)
    return event


def handle_notification_requested(
    event: Event,
    service: Optional["NotificationService"] = None,
) -> DispatchOutcome:
    """Deliver the message carried by a ``notification.requested`` event.

    Args:
        event: Event whose ``metadata["message"]`` holds the dumped message
        service: Notification service; the application singleton by default

    Returns:
        DispatchOutcome when every channel was delivered

    Raises:
        ValueError: If the payload is missing or not a valid message
        ChannelExhaustedError: If any channel could not be delivered
    """
    payload = event.metadata.get("message")
    if payload is None:
        raise ValueError("notification.requested event has no message payload")

    try:
        message = NotificationMessage.model_validate(payload)
    except ValidationError as e:
        logger.error(
            "notification_payload_invalid",
            correlation_id=str(event.correlation_id),
            error=str(e),
        )
        raise ValueError(f"Invalid notification payload: {e}") from e

    if service is None:
        from infrastructure.services.providers import get_notification_service

        service = get_notification_service()

    return service.notify(message)
