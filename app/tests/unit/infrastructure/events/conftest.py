"""Fixtures for infrastructure event system tests."""

import pytest
from datetime import datetime, timezone
from uuid import uuid4
from unittest.mock import MagicMock, patch

from infrastructure.events.models import Event
from infrastructure.events.dispatcher import clear_handlers


@pytest.fixture
def event_factory():
    """Factory for creating test events."""

    def _factory(
        event_type: str = "test.event",
        timestamp: datetime = None,
        correlation_id=None,
        user_id: str = "user-123",
        metadata: dict = None,
    ):
        return Event(
            event_type=event_type,
            timestamp=timestamp or datetime.now(timezone.utc),
            correlation_id=correlation_id or uuid4(),
            user_id=user_id,
            metadata=metadata or {},
        )

    return _factory


@pytest.fixture(autouse=True)
def clear_event_handlers():
    """Clear event handlers before and after test."""
    clear_handlers()
    yield
    clear_handlers()


@pytest.fixture
def mock_event_handler():
    """Mock event handler function."""
    handler = MagicMock()
    handler.__name__ = "mock_event_handler"
    return handler


@pytest.fixture
def mock_logger():
    """Patch the event dispatcher's module logger."""
    with patch("infrastructure.events.dispatcher.logger") as mock:
        yield mock
