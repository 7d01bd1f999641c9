"""Notification service configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.integrations import AwsSettings, TwilioSettings
from infrastructure.configuration.features import NotificationSettings


class Settings(BaseSettings):
    """Notification service configuration settings - main aggregator.

    Aggregates domain-specific settings into a single configuration object:

    - **Integrations**: transport configuration (AWS SES/SNS, Twilio)
    - **Features**: provider registration (sender identities, SMS priority)

    Environment Variables:
        PREFIX: Environment prefix; empty in production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        region = settings.aws.AWS_REGION
        if settings.twilio.is_configured:
            ...
        ```
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    aws: AwsSettings
    twilio: TwilioSettings
    notifications: NotificationSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "aws": AwsSettings,
            "twilio": TwilioSettings,
            "notifications": NotificationSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
