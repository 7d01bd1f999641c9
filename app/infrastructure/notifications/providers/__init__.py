"""Notification provider implementations."""

from infrastructure.notifications.providers.base import NotificationProvider
from infrastructure.notifications.providers.ses import SesEmailProvider
from infrastructure.notifications.providers.sns import SnsSmsProvider
from infrastructure.notifications.providers.twilio import TwilioSmsProvider

__all__ = [
    "NotificationProvider",
    "SesEmailProvider",
    "SnsSmsProvider",
    "TwilioSmsProvider",
]
