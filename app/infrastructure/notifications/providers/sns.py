"""SMS provider using AWS SNS direct publish."""

from typing import Any, Dict, Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from infrastructure.notifications.models import Channel, NotificationMessage
from infrastructure.notifications.providers.base import NotificationProvider
from infrastructure.operations import OperationResult, classify_aws_error

logger = structlog.get_logger()


class SnsSmsProvider(NotificationProvider):
    """SMS notification provider publishing straight to a phone number.

    Requires recipients in E.164 format (+12025550123), which the recipient
    validator guarantees.

    Args:
        client: boto3 ``sns`` client
        sender_id: Optional alphanumeric sender ID (not honoured in every
            country)
        sms_type: "Transactional" or "Promotional"
    """

    def __init__(
        self,
        client: Any,
        sender_id: Optional[str] = None,
        sms_type: str = "Transactional",
    ):
        self._client = client
        self._sender_id = sender_id
        self._sms_type = sms_type
        logger.info("initialized_sns_sms_provider", sms_type=sms_type)

    @property
    def provider_id(self) -> str:
        return "sns"

    def supports(self, channel: str) -> bool:
        return channel == Channel.SMS

    def send(self, message: NotificationMessage) -> OperationResult:
        """Publish the message body as an SMS.

        Args:
            message: Message with an sms recipient.

        Returns:
            OperationResult with ``message_id`` on success.
        """
        phone_number = message.recipient_for(Channel.SMS)
        if not phone_number:
            return OperationResult.permanent_error(
                "SNS: no SMS recipient", error_code="MISSING_RECIPIENT"
            )

        try:
            response = self._client.publish(
                PhoneNumber=phone_number,
                Message=message.body if message.body is not None else "",
                MessageAttributes=self._message_attributes(),
            )
        except (ClientError, BotoCoreError) as e:
            result = classify_aws_error(e)
            logger.error(
                "sns_sms_failed",
                phone_number=phone_number,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        message_id = response.get("MessageId")
        logger.info(
            "sns_sms_sent", phone_number=phone_number, sns_message_id=message_id
        )
        return OperationResult.success(
            data={"message_id": message_id}, message=f"Sent SMS to {phone_number}"
        )

    def _message_attributes(self) -> Dict[str, Dict[str, str]]:
        attributes = {
            "AWS.SNS.SMS.SMSType": {
                "DataType": "String",
                "StringValue": self._sms_type,
            }
        }
        if self._sender_id:
            attributes["AWS.SNS.SMS.SenderID"] = {
                "DataType": "String",
                "StringValue": self._sender_id,
            }
        return attributes
