"""Error classifiers for provider exceptions.

Converts provider-specific exceptions (requests for the email API, botocore
for DynamoDB) into standardized OperationResult objects so the rest of the
application never inspects third-party exception types directly.

Key Functions:
- classify_http_error(): requests exceptions → OperationResult
- classify_aws_error(): botocore ClientError → OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = session.post(url, json=payload, timeout=10)
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

import requests
from botocore.exceptions import ClientError

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# Machine error codes attached to transport failures. The notification
# classifier treats every code in this set as a network failure.
TIMEOUT = "TIMEOUT"
CONNECTION_ERROR = "CONNECTION_ERROR"
TLS_ERROR = "TLS_ERROR"
NETWORK_ERROR_CODES = frozenset({TIMEOUT, CONNECTION_ERROR, TLS_ERROR})


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify a transport-level HTTP exception into an OperationResult.

    Mapping:
    - requests.exceptions.SSLError → TRANSIENT_ERROR / TLS_ERROR
    - requests.Timeout (connect or read) → TRANSIENT_ERROR / TIMEOUT
    - requests.ConnectionError (refused, DNS) → TRANSIENT_ERROR / CONNECTION_ERROR
    - Other RequestException (bad URL, invalid header) → PERMANENT_ERROR
    - Anything else → PERMANENT_ERROR / UNEXPECTED_ERROR

    SSLError is a subclass of ConnectionError, so it is checked first.

    Args:
        exc: Exception raised while calling an HTTP API

    Returns:
        OperationResult with status, message and error_code
    """
    if isinstance(exc, requests.exceptions.SSLError):
        return OperationResult.transient_error(
            f"TLS handshake failed: {exc}",
            error_code=TLS_ERROR,
        )

    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"Request timed out: {exc}",
            error_code=TIMEOUT,
        )

    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"Connection error: {exc}",
            error_code=CONNECTION_ERROR,
        )

    if isinstance(exc, requests.RequestException):
        return OperationResult.permanent_error(
            f"Request error: {type(exc).__name__}: {exc}",
            error_code="REQUEST_ERROR",
        )

    return OperationResult.permanent_error(
        f"Unexpected error: {type(exc).__name__}: {exc}",
        error_code="UNEXPECTED_ERROR",
    )


def classify_aws_error(exc: Exception) -> OperationResult:
    """Classify AWS SDK errors into OperationResult.

    Error Code Mapping:
    - ConditionalCheckFailedException: conditional write lost → CONFLICT
    - ThrottlingException / ProvisionedThroughputExceededException /
      RequestLimitExceeded → TRANSIENT_ERROR with retry_after
    - AccessDeniedException / UnrecognizedClientException → UNAUTHORIZED
    - ResourceNotFoundException: missing table → NOT_FOUND
    - ValidationException: bad expression or item → PERMANENT_ERROR
    - Other: → TRANSIENT_ERROR (AWS convention, most failures are temporary)

    Args:
        exc: Exception raised by boto3/botocore

    Returns:
        OperationResult with appropriate status, message and error_code
    """
    if not isinstance(exc, ClientError):
        return OperationResult.transient_error(
            f"AWS connection error: {type(exc).__name__}: {exc}",
            error_code=CONNECTION_ERROR,
        )

    error_info = exc.response.get("Error", {}) if exc.response else {}
    error_code = error_info.get("Code", "Unknown")
    error_message = error_info.get("Message", str(exc))

    if error_code == "ConditionalCheckFailedException":
        return OperationResult.conflict(error_message, error_code=error_code)

    if error_code in (
        "ThrottlingException",
        "ProvisionedThroughputExceededException",
        "RequestLimitExceeded",
    ):
        retry_after = None
        try:
            retry_after = int(exc.response.get("RetryAfter", 0)) or None
        except (TypeError, ValueError):
            retry_after = None
        return OperationResult.transient_error(
            error_message, error_code=error_code, retry_after=retry_after
        )

    if error_code in ("AccessDeniedException", "UnrecognizedClientException"):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED, error_message, error_code=error_code
        )

    if error_code == "ResourceNotFoundException":
        return OperationResult.error(
            OperationStatus.NOT_FOUND, error_message, error_code=error_code
        )

    if error_code == "ValidationException":
        return OperationResult.permanent_error(error_message, error_code=error_code)

    return OperationResult.transient_error(
        f"AWS client error: {error_code}: {error_message}",
        error_code=error_code,
    )
