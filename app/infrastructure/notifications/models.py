"""Notification system core models.

Channel-agnostic notification models for centralized dispatch.
Callers define message content, providers handle delivery.

Uses Pydantic BaseModel for:
- Construction-time invariant checks on the message
- JSON round-tripping across the queue boundary
- Type safety with proper error messages
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple
from enum import Enum
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

DEFAULT_SUBJECT = "Hello!"
DEFAULT_BODY = "This is a multi-channel test."


class Channel(str, Enum):
    """Delivery channels a notification can be sent on.

    Adding a channel means adding a member here, a recipient rule in
    ``validation`` and at least one provider that supports it.
    """

    EMAIL = "email"
    SMS = "sms"


ALLOWED_CHANNELS: Tuple[Channel, ...] = tuple(Channel)


class NotificationMessage(BaseModel):
    """Immutable unit of work handed to the dispatcher.

    Built once by ``build_message`` after recipient validation and consumed
    exactly once by ``NotificationDispatcher``. The model is frozen and ``to``
    and ``data`` are read-only mappings, so providers cannot alter what later
    providers, channels or the audit entry see.

    Attributes:
        user_id: Opaque identifier of the recipient user (non-empty)
        channels: Attempt order; unique, non-empty, allowed values only
        to: Validated address per channel; keys match ``channels`` exactly
        subject: Subject line (email oriented)
        body: Message body; used by SMS providers
        data: Auxiliary template payload, opaque to the dispatcher
        template: Optional template identifier, carried through untouched
        message_id: Correlation id for every log entry of this dispatch

    Example:
        message = NotificationMessage(
            user_id="user-123",
            channels=[Channel.EMAIL, Channel.SMS],
            to={"email": "user@example.com", "sms": "+12025550123"},
            subject="Hi",
            body="Test",
        )
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    channels: Tuple[Channel, ...] = Field(..., min_length=1)
    to: Mapping[Channel, str]
    subject: Optional[str] = None
    body: Optional[str] = None
    data: Mapping[str, Any] = Field(default_factory=dict)
    template: Optional[str] = None
    message_id: str = Field(default_factory=lambda: str(uuid4()))

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Ensure user id is not blank."""
        if not v.strip():
            raise ValueError("user_id cannot be blank")
        return v

    @field_validator("channels")
    @classmethod
    def validate_unique_channels(cls, v: Tuple[Channel, ...]) -> Tuple[Channel, ...]:
        """Reject duplicate channels."""
        if len(set(v)) != len(v):
            raise ValueError("channels must not contain duplicates")
        return v

    @field_validator("to", "data", mode="after")
    @classmethod
    def freeze_mapping(cls, v: Mapping[Any, Any]) -> Mapping[Any, Any]:
        """Copy into a read-only view; writes raise TypeError."""
        return MappingProxyType(dict(v))

    @field_serializer("to", "data")
    def serialize_mapping(self, v: Mapping[Any, Any]) -> Dict[Any, Any]:
        return dict(v)

    @model_validator(mode="after")
    def validate_recipients_match_channels(self) -> "NotificationMessage":
        """Every channel needs exactly one non-empty address."""
        if set(self.to) != set(self.channels):
            raise ValueError(
                "recipient channels "
                f"{sorted(c.value for c in self.to)} do not match requested "
                f"channels {sorted(c.value for c in self.channels)}"
            )
        empty = [c.value for c, address in self.to.items() if not address.strip()]
        if empty:
            raise ValueError(f"empty recipient address for: {', '.join(empty)}")
        return self

    def recipient_for(self, channel: str) -> Optional[str]:
        """Address for a channel, or None when the channel was not requested."""
        try:
            return self.to.get(Channel(channel))
        except ValueError:
            return None


class ProviderAttempt(BaseModel):
    """One provider's send attempt for one channel."""

    provider: str
    success: bool
    error: Optional[str] = None


class ChannelOutcome(BaseModel):
    """Result of dispatching one channel.

    Attributes:
        channel: Channel that was attempted
        sent: True only when exactly one provider reported success
        provider_used: Id of the provider that delivered, if any
        error: Last provider error, or "no provider available"
        attempts: Every provider attempt made for the channel, in order
    """

    channel: Channel
    sent: bool
    provider_used: Optional[str] = None
    error: Optional[str] = None
    attempts: List[ProviderAttempt] = Field(default_factory=list)


class DispatchOutcome(BaseModel):
    """Aggregate result of one ``notify`` call.

    Owned by the dispatcher for the duration of the call and returned (or
    attached to ``ChannelExhaustedError``). Not persisted.

    Example:
        outcome = dispatcher.dispatch(message)
        if outcome.is_partial:
            logger.warning("partial_delivery", failed=outcome.failed_channels)
    """

    user_id: str
    message_id: str
    outcomes: Dict[Channel, ChannelOutcome] = Field(default_factory=dict)

    @property
    def sent_channels(self) -> List[Channel]:
        """Channels delivered, in attempt order."""
        return [c for c, outcome in self.outcomes.items() if outcome.sent]

    @property
    def failed_channels(self) -> List[Channel]:
        """Channels where every capable provider failed, in attempt order."""
        return [c for c, outcome in self.outcomes.items() if not outcome.sent]

    @property
    def is_success(self) -> bool:
        """Check if every channel was delivered."""
        return not self.failed_channels

    @property
    def is_partial(self) -> bool:
        """Check if some but not all channels were delivered."""
        return bool(self.sent_channels) and bool(self.failed_channels)

    def __getitem__(self, channel: str) -> ChannelOutcome:
        return self.outcomes[Channel(channel)]
