"""Notification dispatcher with ordered provider fallback.

Delivers one NotificationMessage on each of its channels:
- Tries providers in registration order (explicit priority)
- Stops at the first provider that succeeds for a channel (no duplicate sends)
- Keeps going with the remaining channels when one channel is exhausted
- Writes an audit entry per delivered channel and an error entry per
  failed attempt

Usage Example:
    from infrastructure.notifications import (
        NotificationDispatcher,
        SesEmailProvider,
        SnsSmsProvider,
        TwilioSmsProvider,
    )

    dispatcher = NotificationDispatcher(
        providers=[ses_provider, sns_provider, twilio_provider],
    )

    try:
        outcome = dispatcher.notify(message)
    except ChannelExhaustedError as e:
        # e.channel failed, e.outcome.sent_channels were still delivered
        ...
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from infrastructure.notifications.exceptions import ChannelExhaustedError
from infrastructure.notifications.models import (
    ALLOWED_CHANNELS,
    Channel,
    ChannelOutcome,
    DispatchOutcome,
    NotificationMessage,
    ProviderAttempt,
)
from infrastructure.notifications.providers.base import NotificationProvider

logger = structlog.get_logger()
audit_log = structlog.get_logger("notifications.audit")

AUDIT_EVENT = "notification.audit"
NO_PROVIDER_AVAILABLE = "no provider available"


class NotificationDispatcher:
    """Multi-provider notification dispatcher.

    Providers are fixed at construction. The dispatcher holds no per-call
    state, so concurrent ``notify`` calls for different messages are safe.

    Attributes:
        providers: Providers in priority order
        logger: Error sink, receives one entry per failed attempt
        audit_logger: Audit sink, receives one entry per delivered channel

    Example:
        dispatcher = NotificationDispatcher(
            providers=[SesEmailProvider(...), SnsSmsProvider(...)],
        )
        outcome = dispatcher.dispatch(message)
    """

    def __init__(
        self,
        providers: Sequence[NotificationProvider],
        error_logger: Optional[Any] = None,
        audit_logger: Optional[Any] = None,
    ):
        """Initialize notification dispatcher.

        Args:
            providers: Providers in priority order
            error_logger: Optional error/diagnostic logger (structlog-compatible)
            audit_logger: Optional audit logger (structlog-compatible)
        """
        self.providers: Tuple[NotificationProvider, ...] = tuple(providers)
        self.logger = error_logger if error_logger is not None else logger
        self.audit_logger = audit_logger if audit_logger is not None else audit_log

        self.logger.info(
            "initialized_notification_dispatcher",
            providers=[p.provider_id for p in self.providers],
            channels=[c.value for c in self.get_available_channels()],
        )

    def notify(self, message: NotificationMessage) -> DispatchOutcome:
        """Deliver the message on every channel, raising if any channel failed.

        All channels are attempted before raising. Channels that were
        delivered are not rolled back.

        Args:
            message: Message to deliver

        Returns:
            DispatchOutcome with every channel sent

        Raises:
            ChannelExhaustedError: Naming the first failed channel, chained to
                the last exception raised by one of its providers (if any)
        """
        outcome, last_exceptions = self._dispatch(message)

        failed = outcome.failed_channels
        if not failed:
            return outcome

        channel = failed[0]
        error = ChannelExhaustedError(
            channel=channel,
            outcome=outcome,
            last_error=outcome.outcomes[channel].error,
        )
        self.logger.error(
            "notification_channel_exhausted",
            message_id=message.message_id,
            user_id=message.user_id,
            channel=channel.value,
            failed_channels=[c.value for c in failed],
            sent_channels=[c.value for c in outcome.sent_channels],
            error=str(error),
        )
        raise error from last_exceptions.get(channel)

    def dispatch(self, message: NotificationMessage) -> DispatchOutcome:
        """Deliver the message on every channel and return the outcome.

        Unlike ``notify`` this never raises for provider failures; failed
        channels are reported in the outcome.

        Args:
            message: Message to deliver

        Returns:
            DispatchOutcome with one ChannelOutcome per channel
        """
        outcome, _ = self._dispatch(message)
        return outcome

    def _dispatch(
        self, message: NotificationMessage
    ) -> Tuple[DispatchOutcome, Dict[Channel, BaseException]]:
        outcome = DispatchOutcome(
            user_id=message.user_id, message_id=message.message_id
        )
        last_exceptions: Dict[Channel, BaseException] = {}

        for channel in message.channels:
            channel_outcome, exc = self._send_channel(message, channel)
            outcome.outcomes[channel] = channel_outcome
            if exc is not None:
                last_exceptions[channel] = exc

        self.logger.info(
            "notification_dispatched",
            message_id=message.message_id,
            user_id=message.user_id,
            channel_count=len(message.channels),
            sent_count=len(outcome.sent_channels),
            failed_count=len(outcome.failed_channels),
        )
        return outcome, last_exceptions

    def _send_channel(
        self, message: NotificationMessage, channel: Channel
    ) -> Tuple[ChannelOutcome, Optional[BaseException]]:
        """Try capable providers in order until one succeeds.

        Returns:
            The channel outcome and the last exception raised by a provider
            for this channel, if the last failure was an exception
        """
        attempts: List[ProviderAttempt] = []
        last_error: Optional[str] = None
        last_exception: Optional[BaseException] = None

        for provider in self.providers:
            if not provider.supports(channel.value):
                continue

            try:
                result = provider.send(message)
            except Exception as e:  # pylint: disable=broad-except
                error_text = f"{type(e).__name__}: {e}"
                retryable = None
                last_exception = e
            else:
                if result.is_success:
                    attempts.append(
                        ProviderAttempt(provider=provider.provider_id, success=True)
                    )
                    self._audit(message, channel, provider)
                    return (
                        ChannelOutcome(
                            channel=channel,
                            sent=True,
                            provider_used=provider.provider_id,
                            attempts=attempts,
                        ),
                        None,
                    )
                error_text = result.describe()
                retryable = result.is_retryable
                last_exception = None

            attempts.append(
                ProviderAttempt(
                    provider=provider.provider_id, success=False, error=error_text
                )
            )
            last_error = error_text
            self.logger.error(
                "notification_provider_failed",
                message_id=message.message_id,
                channel=channel.value,
                provider=provider.provider_id,
                error=error_text,
                retryable=retryable,
            )

        if not attempts:
            self.logger.warning(
                "notification_no_provider",
                message_id=message.message_id,
                channel=channel.value,
            )

        return (
            ChannelOutcome(
                channel=channel,
                sent=False,
                error=last_error or NO_PROVIDER_AVAILABLE,
                attempts=attempts,
            ),
            last_exception,
        )

    def _audit(
        self,
        message: NotificationMessage,
        channel: Channel,
        provider: NotificationProvider,
    ) -> None:
        self.audit_logger.info(
            AUDIT_EVENT,
            user_id=message.user_id,
            channel=channel.value,
            recipient=message.to[channel],
            sent_at=datetime.now(timezone.utc).isoformat(),
            provider=provider.provider_id,
            message_id=message.message_id,
        )

    def get_available_channels(self) -> List[Channel]:
        """Get channels supported by at least one registered provider.

        Returns:
            List of channels in declaration order
        """
        return [
            channel
            for channel in ALLOWED_CHANNELS
            if any(p.supports(channel.value) for p in self.providers)
        ]

    def get_providers_for(self, channel: str) -> List[NotificationProvider]:
        """Get providers that support a channel, in priority order."""
        return [p for p in self.providers if p.supports(channel)]
