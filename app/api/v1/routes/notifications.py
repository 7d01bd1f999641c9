"""Notification test endpoints.

Parse query parameters, validate recipients, build the message and hand it
to the event bus. Delivery happens on the event executor, so a 200 means
"accepted", not "delivered".
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query

from infrastructure.events.handlers.notifications import enqueue_notification
from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    ALLOWED_CHANNELS,
    Channel,
    NotificationMessage,
    build_message,
    resolve_recipients,
)
from infrastructure.services import NotificationServiceDep

logger = get_module_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])

DEFAULT_USER_ID = "demo-user"


def _enqueue(message: NotificationMessage, failure_detail: str) -> None:
    try:
        enqueue_notification(message)
    except Exception as e:  # pylint: disable=broad-except
        logger.error(
            "notification_enqueue_failed",
            message_id=message.message_id,
            user_id=message.user_id,
            error=str(e),
        )
        raise HTTPException(status_code=500, detail=f"{failure_detail}: {e}") from e


def _resolve_single(channel: Channel, raw: Optional[str]) -> Dict[Channel, str]:
    resolved = resolve_recipients(channel.value, {channel.value: raw})
    if not resolved.has_recipients:
        raise HTTPException(status_code=400, detail="; ".join(resolved.error_messages))
    return resolved.to


@router.get("/send")
def send_notification(
    channels: str = Query("email", description="Comma separated channels"),
    to_email: Optional[str] = Query(None, alias="toEmail"),
    to_sms: Optional[str] = Query(None, alias="toSms"),
    subject: Optional[str] = Query(None),
    body: Optional[str] = Query(None),
    user_id: str = Query(DEFAULT_USER_ID, alias="userId"),
):
    """Send a test notification on one or more channels.

    Channels whose recipient is invalid are dropped and reported; the
    request only fails when no channel is left.

    Returns:
        dict: ``message`` ("Sent via: email, sms", suffixed with
        ". Errors: ..." when a channel was dropped), plus the sent and
        skipped channels, the errors and the message id.
    """
    resolved = resolve_recipients(
        channels,
        {Channel.EMAIL.value: to_email, Channel.SMS.value: to_sms},
    )

    if resolved.request_error is not None:
        raise HTTPException(status_code=400, detail=resolved.request_error.message)
    if not resolved.has_recipients:
        raise HTTPException(status_code=400, detail="; ".join(resolved.error_messages))

    message = build_message(
        user_id=user_id,
        to=resolved.to,
        subject=subject,
        body=body,
        template="TEST_NOTIFICATION",
    )
    _enqueue(message, "Failed to send notification")

    sent: List[str] = [c.value for c in message.channels]
    skipped: List[str] = [
        c.value for c in ALLOWED_CHANNELS if c not in message.channels
    ]
    logger.info(
        "notification_enqueued",
        message_id=message.message_id,
        user_id=message.user_id,
        sent=sent,
        skipped=skipped,
    )

    text = "Sent via: " + ", ".join(sent)
    if resolved.errors:
        text += ". Errors: " + "; ".join(resolved.error_messages)

    return {
        "message": text,
        "message_id": message.message_id,
        "sent": sent,
        "skipped": skipped,
        "errors": resolved.error_messages,
    }


@router.get("/send-email")
def send_test_email(to: Optional[str] = Query(None)):
    """Send a test email to a single address."""
    recipients = _resolve_single(Channel.EMAIL, to)
    message = build_message(
        user_id=DEFAULT_USER_ID,
        to=recipients,
        subject="Just testing",
        body="Test email.",
        template="TEST_EMAIL",
    )
    _enqueue(message, "Failed to send email")
    return {
        "message": f"Email sent to: {recipients[Channel.EMAIL]}",
        "message_id": message.message_id,
    }


@router.get("/send-sms")
def send_test_sms(to: Optional[str] = Query(None)):
    """Send a test SMS to a single phone number."""
    recipients = _resolve_single(Channel.SMS, to)
    message = build_message(
        user_id=DEFAULT_USER_ID,
        to=recipients,
        subject="",
        body="Test SMS",
        template="TEST_SMS",
    )
    _enqueue(message, "Failed to send SMS")
    return {
        "message": f"SMS sent to: {recipients[Channel.SMS]}",
        "message_id": message.message_id,
    }


@router.get("/channels")
def list_channels(notification_service: NotificationServiceDep):
    """List channels with at least one registered provider."""
    return {
        "channels": [c.value for c in notification_service.get_available_channels()],
        "providers": notification_service.list_providers(),
    }
