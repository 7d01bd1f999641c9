"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    NotificationServiceDep,
    SettingsDep,
)
from infrastructure.services.providers import (
    get_notification_service,
    get_settings,
)

__all__ = [
    "SettingsDep",
    "NotificationServiceDep",
    "get_settings",
    "get_notification_service",
]
