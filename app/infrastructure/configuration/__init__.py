"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
domain-based organization.

Exports:
    Settings: Main settings class
    AwsSettings, TwilioSettings, NotificationSettings: section classes
        (useful for overrides in tests)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    sender = settings.notifications.EMAIL_FROM
    sms_order = settings.notifications.SMS_PROVIDER_ORDER
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.integrations import AwsSettings, TwilioSettings
from infrastructure.configuration.features import NotificationSettings

__all__ = ["Settings", "AwsSettings", "TwilioSettings", "NotificationSettings"]
