"""SMS provider using the Twilio REST API."""

from typing import Any

import structlog
from twilio.base.exceptions import TwilioException

from infrastructure.notifications.models import Channel, NotificationMessage
from infrastructure.notifications.providers.base import NotificationProvider
from infrastructure.operations import OperationResult, classify_twilio_error

logger = structlog.get_logger()


class TwilioSmsProvider(NotificationProvider):
    """SMS notification provider using the Twilio Messages API.

    Usually registered after SNS as the secondary SMS gateway.

    Args:
        client: ``twilio.rest.Client`` instance
        from_number: Sender phone number registered with Twilio
    """

    def __init__(self, client: Any, from_number: str):
        if not from_number:
            raise ValueError("Twilio sender number is required")
        self._client = client
        self._from_number = from_number
        logger.info("initialized_twilio_sms_provider", from_number=from_number)

    @property
    def provider_id(self) -> str:
        return "twilio"

    def supports(self, channel: str) -> bool:
        return channel == Channel.SMS

    def send(self, message: NotificationMessage) -> OperationResult:
        """Send the message body as an SMS.

        The body falls back to the subject when missing; an empty body is sent as is.

        Args:
            message: Message with an sms recipient.

        Returns:
            OperationResult with ``sid`` and ``status`` on success.
        """
        to = message.recipient_for(Channel.SMS)
        if not to:
            return OperationResult.permanent_error(
                "No SMS recipient defined", error_code="MISSING_RECIPIENT"
            )
        body = message.body
        if body is None:
            body = message.subject if message.subject is not None else ""

        try:
            sms = self._client.messages.create(
                to=to,
                from_=self._from_number,
                body=body,
            )
        except TwilioException as e:
            result = classify_twilio_error(e)
            logger.error(
                "twilio_sms_failed",
                to=to,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        logger.info("twilio_sms_sent", to=to, sid=sms.sid, status=sms.status)
        return OperationResult.success(
            data={"sid": sms.sid, "status": sms.status},
            message=f"Sent SMS to {to}",
        )
