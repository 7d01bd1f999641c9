"""Centralized notification dispatcher.

Provides multi-channel notification delivery (Email, SMS) with:
- Recipient validation and E.164 phone normalization
- Ordered provider fallback per channel (SES, SNS, Twilio)
- Partial-failure accounting across channels
- Audit entry per delivered channel

Usage:
    from infrastructure.notifications import (
        ChannelExhaustedError,
        build_message,
        resolve_recipients,
    )
    from infrastructure.services import get_notification_service

    resolved = resolve_recipients(
        "email,sms", {"email": "user@example.com", "sms": "+12025550123"}
    )
    message = build_message("user-123", resolved.to, subject="Hi", body="Test")

    try:
        outcome = get_notification_service().notify(message)
    except ChannelExhaustedError as e:
        logger.error(
            "notification_failed", channel=e.channel, sent=e.outcome.sent_channels
        )
"""

# Models
from infrastructure.notifications.models import (
    ALLOWED_CHANNELS,
    Channel,
    ChannelOutcome,
    DispatchOutcome,
    NotificationMessage,
    ProviderAttempt,
)

# Exceptions
from infrastructure.notifications.exceptions import (
    ChannelExhaustedError,
    EmptyRecipientsError,
    NotificationError,
)

# Validation
from infrastructure.notifications.validation import (
    RecipientError,
    RecipientErrorReason,
    ResolvedRecipients,
    build_message,
    normalize_email,
    normalize_phone,
    resolve_channels,
    resolve_recipients,
)

# Dispatcher
from infrastructure.notifications.dispatcher import NotificationDispatcher

# Providers
from infrastructure.notifications.providers import (
    NotificationProvider,
    SesEmailProvider,
    SnsSmsProvider,
    TwilioSmsProvider,
)

# Service
from infrastructure.notifications.service import NotificationService

__all__ = [
    # Models
    "ALLOWED_CHANNELS",
    "Channel",
    "ChannelOutcome",
    "DispatchOutcome",
    "NotificationMessage",
    "ProviderAttempt",
    # Exceptions
    "ChannelExhaustedError",
    "EmptyRecipientsError",
    "NotificationError",
    # Validation
    "RecipientError",
    "RecipientErrorReason",
    "ResolvedRecipients",
    "build_message",
    "normalize_email",
    "normalize_phone",
    "resolve_channels",
    "resolve_recipients",
    # Dispatcher
    "NotificationDispatcher",
    # Providers
    "NotificationProvider",
    "SesEmailProvider",
    "SnsSmsProvider",
    "TwilioSmsProvider",
    # Service
    "NotificationService",
]
