"""Operation result types and status enums.

Standardized result types for infrastructure operations, including the
status enum, the result dataclass, and classifiers that convert provider
exceptions into results.
"""

from infrastructure.operations.classifiers import (
    NETWORK_ERROR_CODES,
    classify_aws_error,
    classify_http_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "NETWORK_ERROR_CODES",
    "classify_http_error",
    "classify_aws_error",
]
