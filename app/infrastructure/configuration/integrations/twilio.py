"""Twilio integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class TwilioSettings(IntegrationSettings):
    """Twilio REST API configuration.

    Environment Variables:
        TWILIO_ACCOUNT_SID: Twilio account identifier
        TWILIO_AUTH_TOKEN: Twilio auth token
        TWILIO_FROM_NUMBER: Sender phone number registered with Twilio (E.164)
    """

    TWILIO_ACCOUNT_SID: str | None = Field(default=None, alias="TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN: str | None = Field(default=None, alias="TWILIO_AUTH_TOKEN")
    TWILIO_FROM_NUMBER: str | None = Field(default=None, alias="TWILIO_FROM_NUMBER")

    @property
    def is_configured(self) -> bool:
        """True when all credentials and the sender number are present."""
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_FROM_NUMBER
        )
