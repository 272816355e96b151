"""HTTP response mapping for form submissions."""

from typing import Any, Optional

from fastapi.responses import JSONResponse

from infrastructure.models import APIResponse, ErrorResponse
from infrastructure.notifications import (
    DeliveryError,
    DispatchOutcome,
    DispatchState,
    SendResult,
)


def format_success_response(
    message: str, data: Optional[dict[str, Any]] = None, already_sent: Optional[bool] = None
) -> JSONResponse:
    body = APIResponse(message=message, data=data, already_sent=already_sent)
    return JSONResponse(status_code=200, content=body.to_content())


def format_error_response(
    status_code: int, error: str, message: str, details: Any = None
) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.to_content())


def contact_success(result: SendResult) -> JSONResponse:
    return format_success_response("Email sent successfully", data=result.data)


def contact_failure(error: DeliveryError) -> JSONResponse:
    return format_error_response(
        500,
        "Failed to send email",
        "There was an error sending your message. Please try again later.",
        details=error.detail or error.message,
    )


def confirmation_response(outcome: DispatchOutcome) -> JSONResponse:
    """Map a dispatch outcome to the confirmation endpoint response.

    200 sent or already sent, 409 in flight, 429 attempt ceiling, 500 otherwise.
    """
    if outcome.state == DispatchState.SKIP_ALREADY_SENT:
        return format_success_response(
            "Confirmation email was already sent to this user", already_sent=True
        )

    if outcome.state == DispatchState.RECORD_SUCCESS:
        return format_success_response(
            "Confirmation email sent successfully", data=outcome.data
        )

    if outcome.state == DispatchState.SKIP_RATE_LIMITED:
        return format_error_response(
            429,
            "Too many attempts",
            "Maximum number of email attempts reached. Please contact support.",
        )

    if outcome.state == DispatchState.SKIP_IN_FLIGHT:
        return format_error_response(
            409,
            "Request in progress",
            "A confirmation email for this address is already being sent. Please try again shortly.",
        )

    error = outcome.error
    return format_error_response(
        500,
        "Failed to send confirmation email",
        "There was an error sending the confirmation email. Please try again later.",
        details=(error.detail or error.message) if error else outcome.message,
    )
