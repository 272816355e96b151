"""Send failure classifier.

Decides whether a failed send is worth retrying. Typed error codes set by
``classify_http_error`` are consulted first; only failures without a known
code fall back to matching their message against ``FAILURE_PATTERNS``.

Categories:
    NETWORK: retryable with exponential backoff
    TLS: retryable with linear backoff (handshake and decoder failures)
    FATAL: provider rejections, bad payloads and anything unrecognised
"""

from enum import Enum
from typing import Optional

from infrastructure.operations import NETWORK_ERROR_CODES, OperationResult, OperationStatus
from infrastructure.operations.classifiers import TLS_ERROR


class FailureCategory(Enum):
    NETWORK = "network"
    TLS = "tls"
    FATAL = "fatal"

    @property
    def retryable(self) -> bool:
        return self is not FailureCategory.FATAL


# Ordered: TLS fragments come first so "handshake timeout" counts as TLS.
# Matching is case-insensitive.
FAILURE_PATTERNS: tuple[tuple[str, FailureCategory], ...] = (
    ("decoder routines::unsupported", FailureCategory.TLS),
    ("getting metadata from plugin failed", FailureCategory.TLS),
    ("sslerror", FailureCategory.TLS),
    ("certificate verify failed", FailureCategory.TLS),
    ("tlsv1", FailureCategory.TLS),
    ("handshake", FailureCategory.TLS),
    ("fetch failed", FailureCategory.NETWORK),
    ("etimedout", FailureCategory.NETWORK),
    ("econnrefused", FailureCategory.NETWORK),
    ("econnreset", FailureCategory.NETWORK),
    ("connection refused", FailureCategory.NETWORK),
    ("connection reset", FailureCategory.NETWORK),
    ("name or service not known", FailureCategory.NETWORK),
    ("temporary failure in name resolution", FailureCategory.NETWORK),
    ("timed out", FailureCategory.NETWORK),
    ("timeout", FailureCategory.NETWORK),
    ("network", FailureCategory.NETWORK),
)


def match_failure_pattern(message: Optional[str]) -> Optional[FailureCategory]:
    """Return the category of the first pattern found in message, if any."""
    if not message:
        return None
    lowered = message.lower()
    for fragment, category in FAILURE_PATTERNS:
        if fragment in lowered:
            return category
    return None


def classify_send_failure(result: OperationResult) -> FailureCategory:
    """Classify a failed provider call.

    Args:
        result: Non-successful OperationResult returned by the email client

    Returns:
        FailureCategory for the failure
    """
    if result.error_code == TLS_ERROR:
        return FailureCategory.TLS

    if result.error_code in NETWORK_ERROR_CODES:
        return FailureCategory.NETWORK

    # A provider error payload is a definitive answer, whatever its wording.
    if result.status == OperationStatus.PERMANENT_ERROR and result.data:
        return FailureCategory.FATAL

    return match_failure_pattern(result.message) or FailureCategory.FATAL
