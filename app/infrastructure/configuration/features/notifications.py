"""Notification dispatch feature settings."""

from typing import Any, List, Optional

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


KNOWN_SMS_PROVIDERS = ("sns", "twilio")


class NotificationSettings(FeatureSettings):
    """Configuration for provider registration.

    Environment Variables:
        EMAIL_FROM: Sender address for the SES email provider. The email
            provider is not registered when this is empty.
        SES_CONFIGURATION_SET: Optional SES configuration set name
        SNS_SENDER_ID: Optional alphanumeric sender ID for SNS SMS
        SMS_PROVIDER_ORDER: JSON list giving SMS gateway priority
            (default: ["sns", "twilio"])

    Example:
        ```python
        settings = get_settings()

        for name in settings.notifications.SMS_PROVIDER_ORDER:
            ...
        ```
    """

    EMAIL_FROM: Optional[str] = Field(default=None, alias="EMAIL_FROM")
    SES_CONFIGURATION_SET: Optional[str] = Field(
        default=None, alias="SES_CONFIGURATION_SET"
    )
    SNS_SENDER_ID: Optional[str] = Field(default=None, alias="SNS_SENDER_ID")
    SMS_PROVIDER_ORDER: List[str] = Field(
        default_factory=lambda: list(KNOWN_SMS_PROVIDERS),
        alias="SMS_PROVIDER_ORDER",
    )

    @field_validator("SMS_PROVIDER_ORDER", mode="after")
    @classmethod
    def _validate_sms_provider_order(cls, v: List[Any]) -> List[str]:
        """Normalize names, drop duplicates and reject unknown gateways."""
        order: List[str] = []
        for name in v:
            normalized = str(name).strip().lower()
            if not normalized or normalized in order:
                continue
            if normalized not in KNOWN_SMS_PROVIDERS:
                raise ValueError(
                    f"Unknown SMS provider '{name}'. "
                    f"Expected one of: {', '.join(KNOWN_SMS_PROVIDERS)}"
                )
            order.append(normalized)
        return order
