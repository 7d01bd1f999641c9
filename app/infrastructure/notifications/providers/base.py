"""Notification provider abstract base class.

All provider implementations (SES, SNS, Twilio) must implement this interface.
"""

from abc import ABC, abstractmethod

from infrastructure.notifications.models import NotificationMessage
from infrastructure.operations import OperationResult


class NotificationProvider(ABC):
    """Abstract base class for notification providers.

    A provider wraps one transport SDK and delivers on one or more channels:
    - SesEmailProvider: AWS SES email
    - SnsSmsProvider: AWS SNS SMS
    - TwilioSmsProvider: Twilio SMS

    The dispatcher selects providers through ``supports`` only, so a new
    transport or channel never requires dispatcher changes.

    Example Implementation:
        class PushProvider(NotificationProvider):

            @property
            def provider_id(self) -> str:
                return "fcm"

            def supports(self, channel: str) -> bool:
                return channel == "push"

            def send(self, message: NotificationMessage) -> OperationResult:
                token = message.recipient_for("push")
                ...
                return OperationResult.success(data={"message_id": "..."})
    """

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Provider identifier used in outcomes and logs (ses, sns, twilio).

        Returns:
            Provider name string
        """
        pass

    @abstractmethod
    def supports(self, channel: str) -> bool:
        """Check whether this provider can deliver on a channel.

        Must be pure: no I/O, no side effects.

        Args:
            channel: Channel name (e.g. "email", "sms")

        Returns:
            True if the provider can attempt delivery on the channel
        """
        pass

    @abstractmethod
    def send(self, message: NotificationMessage) -> OperationResult:
        """Attempt delivery of the message.

        Transport failures should be returned as a non-success
        OperationResult. Anything raised is also treated as a failed attempt
        by the dispatcher, so the next provider is tried either way.

        Args:
            message: Message to deliver

        Returns:
            OperationResult; on success ``data`` carries the transport id

        Example:
            result = provider.send(message)
            if not result.is_success:
                logger.error("send_failed", error=result.message)
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider_id={self.provider_id!r})"
