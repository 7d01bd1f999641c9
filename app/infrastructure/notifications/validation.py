"""Channel and recipient validation.

Turns raw request fields into a validated channel list and recipient map
before a ``NotificationMessage`` exists. Pure: no I/O, no logging, never
raises. Every failure is reported as a ``RecipientError`` so the caller can
pick the response code.

Usage:
    resolved = resolve_recipients(
        "email,sms",
        {"email": "user@example.com", "sms": "+1 (202) 555-0123"},
    )
    if resolved.request_error:
        return bad_request(resolved.error_messages)
    if not resolved.has_recipients:
        return bad_request(resolved.error_messages)

    message = build_message("user-123", resolved.to, subject="Hi", body="Test")
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from email_validator import (
    validate_email as email_validator_validate,
    EmailNotValidError,
)

from infrastructure.notifications.exceptions import EmptyRecipientsError
from infrastructure.notifications.models import (
    ALLOWED_CHANNELS,
    DEFAULT_BODY,
    DEFAULT_SUBJECT,
    Channel,
    NotificationMessage,
)

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
_NON_DIGITS = re.compile(r"\D")


class RecipientErrorReason(Enum):
    """Why a channel was rejected."""

    INVALID_EMAIL = "invalid_email"
    INVALID_PHONE = "invalid_phone"
    NO_ALLOWED_CHANNEL = "no_allowed_channel"


@dataclass(frozen=True)
class RecipientError:
    """Structured validation failure.

    Attributes:
        channel: Channel the error applies to; None for request-level errors
        reason: Machine-readable reason
        message: Human-readable message, safe to return to the caller
    """

    channel: Optional[Channel]
    reason: RecipientErrorReason
    message: str


@dataclass(frozen=True)
class ResolvedRecipients:
    """Outcome of ``resolve_recipients``.

    Attributes:
        channels: Allowed channels requested, in input order
        to: Validated addresses, keyed in ``channels`` order; channels whose
            recipient failed validation are absent
        errors: Validation errors in validation order
    """

    channels: Tuple[Channel, ...] = ()
    to: Dict[Channel, str] = field(default_factory=dict)
    errors: List[RecipientError] = field(default_factory=list)

    @property
    def has_recipients(self) -> bool:
        return bool(self.to)

    @property
    def skipped_channels(self) -> List[Channel]:
        """Requested channels dropped because their recipient was invalid."""
        return [c for c in self.channels if c not in self.to]

    @property
    def request_error(self) -> Optional[RecipientError]:
        """The request-level error, if no allowed channel was selected."""
        for error in self.errors:
            if error.reason is RecipientErrorReason.NO_ALLOWED_CHANNEL:
                return error
        return None

    @property
    def error_messages(self) -> List[str]:
        return [error.message for error in self.errors]


def resolve_channels(raw_channels: Optional[str]) -> Tuple[Channel, ...]:
    """Parse a comma separated channel string.

    Tokens are trimmed, empty tokens dropped, duplicates removed keeping the
    first occurrence, and unknown tokens silently excluded. Input order is
    preserved.

    Args:
        raw_channels: e.g. "sms, email,push,sms"

    Returns:
        Tuple of allowed channels, e.g. (Channel.SMS, Channel.EMAIL)
    """
    allowed = {c.value: c for c in ALLOWED_CHANNELS}
    resolved: List[Channel] = []
    for token in (raw_channels or "").split(","):
        token = token.strip()
        if not token or token not in allowed:
            continue
        channel = allowed[token]
        if channel not in resolved:
            resolved.append(channel)
    return tuple(resolved)


def normalize_email(raw: Optional[str]) -> Optional[str]:
    """Validate an email address.

    The value must be a bare address; display-name forms such as
    "Name <user@example.com>" are rejected.

    Returns:
        The normalized address, or None if missing or invalid.
    """
    if raw is None or not raw.strip():
        return None
    try:
        validated = email_validator_validate(raw.strip(), check_deliverability=False)
    except EmailNotValidError:
        return None
    return validated.normalized


def normalize_phone(raw: Optional[str]) -> Optional[str]:
    """Normalize a phone number to E.164.

    Every non-digit character is stripped and a leading "+" added, so
    "+1 (234) 567-8901" becomes "+12345678901".

    Returns:
        The E.164 number, or None if missing or invalid.
    """
    if raw is None:
        return None
    candidate = "+" + _NON_DIGITS.sub("", raw)
    if not E164_PATTERN.match(candidate):
        return None
    return candidate


@dataclass(frozen=True)
class _RecipientRule:
    normalize: Callable[[Optional[str]], Optional[str]]
    reason: RecipientErrorReason
    message: str


RECIPIENT_RULES: Dict[Channel, _RecipientRule] = {
    Channel.EMAIL: _RecipientRule(
        normalize=normalize_email,
        reason=RecipientErrorReason.INVALID_EMAIL,
        message="Email invalid or missing.",
    ),
    Channel.SMS: _RecipientRule(
        normalize=normalize_phone,
        reason=RecipientErrorReason.INVALID_PHONE,
        message="SMS invalid or missing",
    ),
}


def no_allowed_channel_message() -> str:
    return "Invalid channel(s) specified. Allowed channels: " + ", ".join(
        c.value for c in ALLOWED_CHANNELS
    )


def resolve_recipients(
    raw_channels: Optional[str], fields: Mapping[str, Optional[str]]
) -> ResolvedRecipients:
    """Resolve channels and validate one recipient per channel.

    Args:
        raw_channels: Comma separated channel names from the request
        fields: Raw recipient per channel name, e.g.
            {"email": "user@example.com", "sms": "+12025550123"}

    Returns:
        ResolvedRecipients with the allowed channels, the validated ``to``
        map and the errors. When no allowed channel is selected the result
        holds a single NO_ALLOWED_CHANNEL error and no recipients.
    """
    channels = resolve_channels(raw_channels)
    if not channels:
        return ResolvedRecipients(
            errors=[
                RecipientError(
                    channel=None,
                    reason=RecipientErrorReason.NO_ALLOWED_CHANNEL,
                    message=no_allowed_channel_message(),
                )
            ]
        )

    to: Dict[Channel, str] = {}
    errors: List[RecipientError] = []
    for channel in channels:
        rule = RECIPIENT_RULES[channel]
        address = rule.normalize(fields.get(channel.value))
        if address is None:
            errors.append(RecipientError(channel, rule.reason, rule.message))
            continue
        to[channel] = address

    return ResolvedRecipients(channels=channels, to=to, errors=errors)


def build_message(
    user_id: str,
    to: Mapping[Channel, str],
    subject: Optional[str] = None,
    body: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    template: Optional[str] = None,
) -> NotificationMessage:
    """Build the immutable message from validated recipients.

    ``channels`` follows the iteration order of ``to``.

    Raises:
        EmptyRecipientsError: If ``to`` is empty. Check
            ``ResolvedRecipients.has_recipients`` first.
    """
    if not to:
        raise EmptyRecipientsError()
    return NotificationMessage(
        user_id=user_id,
        channels=tuple(Channel(c) for c in to),
        to={Channel(c): address for c, address in to.items()},
        subject=subject if subject is not None else DEFAULT_SUBJECT,
        body=body if body is not None else DEFAULT_BODY,
        data=dict(data or {}),
        template=template,
    )
