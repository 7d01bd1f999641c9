"""Email provider using AWS SES (v2 API)."""

from typing import Any, Dict, Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from infrastructure.notifications.models import Channel, NotificationMessage
from infrastructure.notifications.providers.base import NotificationProvider
from infrastructure.operations import OperationResult, classify_aws_error

logger = structlog.get_logger()

DEFAULT_EMAIL_SUBJECT = "No subject"
DEFAULT_EMAIL_BODY = "no body"


class SesEmailProvider(NotificationProvider):
    """Email notification provider using the SES v2 ``send_email`` API.

    Only supports the email channel. The sender address comes from
    configuration and must be a verified SES identity.

    Args:
        client: boto3 ``sesv2`` client
        sender: From address (e.g. "notifications@example.com")
        configuration_set: Optional SES configuration set name
    """

    def __init__(
        self,
        client: Any,
        sender: str,
        configuration_set: Optional[str] = None,
    ):
        if not sender:
            raise ValueError("SES sender address is required")
        self._client = client
        self._sender = sender
        self._configuration_set = configuration_set
        logger.info("initialized_ses_email_provider", sender=sender)

    @property
    def provider_id(self) -> str:
        return "ses"

    def supports(self, channel: str) -> bool:
        return channel == Channel.EMAIL

    def send(self, message: NotificationMessage) -> OperationResult:
        """Send the message as an HTML email.

        Args:
            message: Message with an email recipient.

        Returns:
            OperationResult with ``message_id`` on success.
        """
        recipient = message.recipient_for(Channel.EMAIL)
        if not recipient:
            return OperationResult.permanent_error(
                "No email recipient defined", error_code="MISSING_RECIPIENT"
            )

        request = self._build_request(message, recipient)
        try:
            response = self._client.send_email(**request)
        except (ClientError, BotoCoreError) as e:
            result = classify_aws_error(e)
            logger.error(
                "ses_email_failed",
                to=recipient,
                subject=message.subject,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        message_id = response.get("MessageId")
        logger.info(
            "ses_email_sent",
            to=recipient,
            subject=message.subject,
            ses_message_id=message_id,
        )
        return OperationResult.success(
            data={"message_id": message_id}, message=f"Sent email to {recipient}"
        )

    def _build_request(
        self, message: NotificationMessage, recipient: str
    ) -> Dict[str, Any]:
        subject = message.subject
        if subject is None:
            subject = DEFAULT_EMAIL_SUBJECT
        body = message.body if message.body is not None else DEFAULT_EMAIL_BODY
        request: Dict[str, Any] = {
            "FromEmailAddress": self._sender,
            "Destination": {"ToAddresses": [recipient]},
            "Content": {
                "Simple": {
                    "Subject": {
                        "Data": subject,
                        "Charset": "UTF-8",
                    },
                    "Body": {
                        "Html": {
                            "Data": body,
                            "Charset": "UTF-8",
                        }
                    },
                }
            },
        }
        if self._configuration_set:
            request["ConfigurationSetName"] = self._configuration_set
        return request
