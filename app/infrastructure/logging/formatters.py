"""Structlog processors shared by the logging setup.

Usage:
    from infrastructure.logging.formatters import mask_sensitive_data

    configure_logging(
        extra_processors=[mask_sensitive_data(additional_patterns={"otp"})]
    )
"""

from typing import Any

# Keys containing any of these fragments are redacted
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "authorization",
        "credential",
        "account_sid",
    }
)


def add_app_info(app_name: str, app_version: str = "unknown"):
    """Create a processor that adds application name and version.

    Args:
        app_name: Name of the application.
        app_version: Version string, usually the git SHA.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.setdefault("app_name", app_name)
        event_dict.setdefault("app_version", app_version)
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
):
    """Create a processor that masks values of sensitive keys.

    Matching is case-insensitive on the key name.

    Args:
        mask_value: Replacement for sensitive values.
        additional_patterns: Extra key fragments to treat as sensitive.

    Returns:
        A structlog processor function.

    Example:
        >>> processor = mask_sensitive_data()
        >>> processor(None, "info", {"TWILIO_AUTH_TOKEN": "abc", "channel": "sms"})
        {'TWILIO_AUTH_TOKEN': '***REDACTED***', 'channel': 'sms'}
    """
    patterns = SENSITIVE_PATTERNS
    if additional_patterns:
        patterns = patterns | frozenset(additional_patterns)

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        masked: dict[str, Any] = {}
        for key, value in event_dict.items():
            key_lower = key.lower()
            if value is not None and any(p in key_lower for p in patterns):
                masked[key] = mask_value
            else:
                masked[key] = value
        return masked

    return processor


def truncate_large_values(max_length: int = 500):
    """Create a processor that truncates long string values.

    Args:
        max_length: Maximum string length before truncation.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    value[:max_length] + f"...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
