"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.notifications.service import NotificationService


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The single source of truth for settings in the process. Infrastructure
    packages call this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Route handlers should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return {"region": settings.aws.AWS_REGION}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_notification_service() -> NotificationService:
    """
    Get application-scoped notification service singleton.

    Providers and their SDK clients are built once from settings; the
    dispatcher is stateless between calls, so sharing it across requests
    and executor threads is safe.

    Returns:
        NotificationService: Cached service with the default providers.

    Usage:
        @router.get("/channels")
        def list_channels(notification_service: NotificationServiceDep):
            return notification_service.get_available_channels()
    """
    return NotificationService(settings=get_settings())
