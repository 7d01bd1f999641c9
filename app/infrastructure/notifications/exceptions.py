"""Notification dispatch exceptions."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.notifications.models import Channel, DispatchOutcome


class NotificationError(Exception):
    """Base exception for the notification system."""


class EmptyRecipientsError(NotificationError, ValueError):
    """Raised when a message is built without any validated recipient."""

    def __init__(self, message: str = "Cannot build a notification without recipients"):
        super().__init__(message)


class ChannelExhaustedError(NotificationError):
    """Every capable provider failed for at least one channel.

    Raised by ``NotificationDispatcher.notify`` after all channels have been
    attempted. Channels that were delivered stay delivered; inspect
    ``outcome`` to tell a partial failure from a total one.

    Attributes:
        channel: First channel (in attempt order) that failed
        failed_channels: Every failed channel, in attempt order
        outcome: Full dispatch outcome, including delivered channels
        last_error: Last provider error for ``channel``
    """

    def __init__(
        self,
        channel: "Channel",
        outcome: "DispatchOutcome",
        last_error: Optional[str] = None,
    ):
        self.channel = channel
        self.outcome = outcome
        self.failed_channels: List["Channel"] = outcome.failed_channels
        self.last_error = last_error or "unknown"

        message = (
            f"All providers failed for channel '{channel.value}'. "
            f"Last error: {self.last_error}"
        )
        others = [c.value for c in self.failed_channels if c != channel]
        if others:
            message += f" (also failed: {', '.join(others)})"
        super().__init__(message)

    @property
    def is_partial(self) -> bool:
        """True when at least one other channel was delivered."""
        return bool(self.outcome.sent_channels)
