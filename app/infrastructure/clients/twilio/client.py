"""Twilio REST client construction."""

from twilio.rest import Client  # type: ignore

from infrastructure.configuration import TwilioSettings


def get_twilio_client(settings: TwilioSettings) -> Client:
    """Create a Twilio REST client from settings.

    Raises:
        ValueError: If the account SID or auth token is missing.
    """
    if not settings.TWILIO_ACCOUNT_SID or not settings.TWILIO_AUTH_TOKEN:
        raise ValueError("Twilio credentials are not configured")
    return Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
