"""Notification service for dependency injection.

Provides a class-based interface to the notification system for easier DI and testing.
"""

from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

import structlog

from infrastructure.clients.aws import get_boto3_client
from infrastructure.clients.twilio import get_twilio_client
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    Channel,
    DispatchOutcome,
    NotificationMessage,
)
from infrastructure.notifications.providers import (
    NotificationProvider,
    SesEmailProvider,
    SnsSmsProvider,
    TwilioSmsProvider,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()


def build_ses_provider(settings: "Settings") -> Optional[NotificationProvider]:
    if not settings.notifications.EMAIL_FROM:
        logger.warning(
            "notification_provider_skipped", provider="ses", reason="EMAIL_FROM not set"
        )
        return None
    client = get_boto3_client(
        "sesv2",
        session_config=settings.aws.session_config(),
        client_config=settings.aws.client_config(),
    )
    return SesEmailProvider(
        client=client,
        sender=settings.notifications.EMAIL_FROM,
        configuration_set=settings.notifications.SES_CONFIGURATION_SET,
    )


def build_sns_provider(settings: "Settings") -> Optional[NotificationProvider]:
    client = get_boto3_client(
        "sns",
        session_config=settings.aws.session_config(),
        client_config=settings.aws.client_config(),
    )
    return SnsSmsProvider(
        client=client,
        sender_id=settings.notifications.SNS_SENDER_ID,
    )


def build_twilio_provider(settings: "Settings") -> Optional[NotificationProvider]:
    if not settings.twilio.is_configured:
        logger.warning(
            "notification_provider_skipped",
            provider="twilio",
            reason="Twilio credentials not set",
        )
        return None
    return TwilioSmsProvider(
        client=get_twilio_client(settings.twilio),
        from_number=settings.twilio.TWILIO_FROM_NUMBER,
    )


SMS_PROVIDER_BUILDERS: Dict[
    str, Callable[["Settings"], Optional[NotificationProvider]]
] = {
    "sns": build_sns_provider,
    "twilio": build_twilio_provider,
}


def build_default_providers(settings: "Settings") -> List[NotificationProvider]:
    """Build providers from settings in priority order.

    Email (SES) comes first, then SMS gateways following
    ``SMS_PROVIDER_ORDER``. Providers missing their configuration are skipped.

    Args:
        settings: Application settings

    Returns:
        Providers in registration order
    """
    providers: List[NotificationProvider] = []

    ses = build_ses_provider(settings)
    if ses is not None:
        providers.append(ses)

    for name in settings.notifications.SMS_PROVIDER_ORDER:
        provider = SMS_PROVIDER_BUILDERS[name](settings)
        if provider is not None:
            providers.append(provider)

    return providers


class NotificationService:
    """Class-based notification service.

    Wraps the NotificationDispatcher with a service interface to support
    dependency injection and easier testing with mocks.

    This is a thin facade - all actual work is delegated to the underlying
    NotificationDispatcher instance.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.get("/channels")
        def list_channels(notification_service: NotificationServiceDep):
            return notification_service.get_available_channels()

        # Direct instantiation
        from infrastructure.services import get_settings
        from infrastructure.notifications import NotificationService

        settings = get_settings()
        service = NotificationService(settings)
        outcome = service.dispatch(message)
    """

    def __init__(
        self,
        settings: "Settings",
        providers: Optional[Sequence[NotificationProvider]] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Settings instance (required, passed from provider).
            providers: Optional providers in priority order. If not provided,
                      creates default providers based on settings.
            dispatcher: Optional pre-configured NotificationDispatcher instance.
                       If not provided, creates one with providers.
        """
        if dispatcher is None:
            if providers is None:
                providers = build_default_providers(settings)
            dispatcher = NotificationDispatcher(providers=providers)

        self._dispatcher = dispatcher
        self._settings = settings

    def notify(self, message: NotificationMessage) -> DispatchOutcome:
        """Deliver on every channel of the message.

        Raises:
            ChannelExhaustedError: If any channel could not be delivered
        """
        return self._dispatcher.notify(message)

    def dispatch(self, message: NotificationMessage) -> DispatchOutcome:
        """Deliver on every channel, reporting failures in the outcome."""
        return self._dispatcher.dispatch(message)

    def list_providers(self) -> List[str]:
        """List registered provider ids in priority order."""
        return [p.provider_id for p in self._dispatcher.providers]

    def get_available_channels(self) -> List[Channel]:
        return self._dispatcher.get_available_channels()

    @property
    def dispatcher(self) -> NotificationDispatcher:
        """Access underlying NotificationDispatcher instance.

        Returns:
            The underlying NotificationDispatcher instance
        """
        return self._dispatcher
