"""Twilio REST client factory."""

from infrastructure.clients.twilio.client import get_twilio_client

__all__ = ["get_twilio_client"]
