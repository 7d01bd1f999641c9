"""Operation result types and status enums.

This module contains standardized result types for outbound operations,
including status enums, result dataclasses, and error classifiers for
transport exceptions.
"""

from infrastructure.operations.classifiers import (
    classify_aws_error,
    classify_twilio_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_aws_error",
    "classify_twilio_error",
]
