"""Operation status enumeration.

Status codes for provider send attempts and other outbound operations, used
to tell retryable failures apart from permanent ones.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (network, timeout, throttling)
        PERMANENT_ERROR: Non-retryable error (bad recipient, rejected payload)
        UNAUTHORIZED: Provider credentials rejected
        NOT_FOUND: Remote resource not found
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"

    @property
    def is_retryable(self) -> bool:
        """Whether an upstream consumer may reasonably retry later."""
        return self is OperationStatus.TRANSIENT_ERROR
