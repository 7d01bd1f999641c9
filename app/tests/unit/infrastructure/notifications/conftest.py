"""Test fixtures for notification infrastructure tests."""

import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

from infrastructure.notifications.models import Channel, NotificationMessage
from infrastructure.notifications.providers.base import NotificationProvider
from infrastructure.operations import OperationResult


class FakeProvider(NotificationProvider):
    """In-memory provider with scripted results.

    ``results`` is consumed one per ``send`` call; an Exception instance in
    the script is raised instead of returned.
    """

    def __init__(
        self,
        provider_id: str,
        channels: List[str],
        results: Optional[List[Any]] = None,
    ):
        self._provider_id = provider_id
        self._channels = set(channels)
        self._results = list(results or [])
        self.sent: List[NotificationMessage] = []

    @property
    def provider_id(self) -> str:
        return self._provider_id

    def supports(self, channel: str) -> bool:
        return channel in self._channels

    def send(self, message: NotificationMessage) -> OperationResult:
        self.sent.append(message)
        result = self._results.pop(0) if self._results else OperationResult.success()
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def provider_factory():
    """Factory for creating FakeProvider instances.

    Example:
        ses = provider_factory("ses", ["email"])
        flaky = provider_factory(
            "sns", ["sms"], results=[OperationResult.transient_error("down")]
        )
    """

    def _factory(
        provider_id: str = "fake",
        channels: Optional[List[str]] = None,
        results: Optional[List[Any]] = None,
    ) -> FakeProvider:
        return FakeProvider(provider_id, channels or ["email"], results)

    return _factory


@pytest.fixture
def message_factory():
    """Factory for creating NotificationMessage instances.

    Example:
        message = message_factory()
        sms_only = message_factory(to={"sms": "+12025550123"})
    """

    def _factory(
        user_id: str = "user-123",
        to: Optional[Dict[str, str]] = None,
        subject: Optional[str] = "Test subject",
        body: Optional[str] = "Test body",
        data: Optional[Dict[str, Any]] = None,
        template: Optional[str] = None,
    ) -> NotificationMessage:
        if to is None:
            to = {"email": "user@example.com", "sms": "+12025550123"}
        return NotificationMessage(
            user_id=user_id,
            channels=tuple(Channel(c) for c in to),
            to={Channel(c): address for c, address in to.items()},
            subject=subject,
            body=body,
            data=data or {},
            template=template,
        )

    return _factory


@pytest.fixture
def error_logger():
    """Mock error sink."""
    return MagicMock()


@pytest.fixture
def audit_logger():
    """Mock audit sink."""
    return MagicMock()


@pytest.fixture
def calls_for():
    """Return the calls of ``mock_logger.<method>`` for one event name.

    Example:
        failures = calls_for(error_logger, "error", "notification_provider_failed")
    """

    def _calls_for(mock_logger: MagicMock, method: str, event: str) -> List[Any]:
        return [
            c
            for c in getattr(mock_logger, method).call_args_list
            if c.args[0] == event
        ]

    return _calls_for


@pytest.fixture
def mock_settings():
    """Mock Settings with SES, SNS and Twilio configured."""
    mock = MagicMock()
    mock.aws.session_config.return_value = {"region_name": "ca-central-1"}
    mock.aws.client_config.return_value = {}
    mock.notifications.EMAIL_FROM = "noreply@example.com"
    mock.notifications.SES_CONFIGURATION_SET = None
    mock.notifications.SNS_SENDER_ID = "Notify"
    mock.notifications.SMS_PROVIDER_ORDER = ["sns", "twilio"]
    mock.twilio.is_configured = True
    mock.twilio.TWILIO_ACCOUNT_SID = "AC123"
    mock.twilio.TWILIO_AUTH_TOKEN = "secret"
    mock.twilio.TWILIO_FROM_NUMBER = "+15005550006"
    return mock
