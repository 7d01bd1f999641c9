"""Structured logging infrastructure.

Centralized structlog configuration for the notification service.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_logger(): Get a logger, optionally named (e.g. the audit logger)
    - get_module_logger(): Get a logger for the calling module
    - bind_request_context(): Context manager for request-scoped logging
    - get_correlation_id(): Current correlation ID from context
    - clear_request_context(): Clear all request context

Example:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging()

    logger = get_module_logger()
    logger.info("module_initialized")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_logger,
    get_module_logger,
)
from infrastructure.logging.context import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
)
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)

__all__ = [
    # Setup
    "configure_logging",
    "get_logger",
    "get_module_logger",
    # Context
    "bind_request_context",
    "clear_request_context",
    "get_correlation_id",
    # Formatters
    "SENSITIVE_PATTERNS",
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
]
