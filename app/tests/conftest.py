import pytest

from infrastructure.events.dispatcher import clear_handlers
from infrastructure.services.providers import get_notification_service, get_settings


@pytest.fixture(autouse=True)
def reset_singletons():
    """Drop cached settings, services and event handlers between tests."""
    yield
    get_settings.cache_clear()
    get_notification_service.cache_clear()
    clear_handlers()
