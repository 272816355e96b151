"""Form submission endpoints.

POST /api/send-email         relay a contact form message to the inbox
POST /api/send-confirmation  send a registration confirmation, once per email
GET  /api/health             provider configuration and store connectivity
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from infrastructure.notifications import DeliveryError
from infrastructure.services import FormsServiceDep, get_settings
from modules.forms.responses import (
    confirmation_response,
    contact_failure,
    contact_success,
)
from modules.forms.schemas import ContactMessageRequest, RegistrationRequest

logger = get_module_logger()
router = APIRouter(prefix="/api", tags=["Forms"])
limiter = get_limiter()


def _forms_rate_limit() -> str:
    return get_settings().server.FORMS_RATE_LIMIT


@router.post("/send-email")
@limiter.limit(_forms_rate_limit)
def send_email(
    request: Request,  # pylint: disable=unused-argument
    body: ContactMessageRequest,
    forms: FormsServiceDep,
) -> JSONResponse:
    """Relay a contact form submission."""
    try:
        result = forms.send_contact_message(body)
    except DeliveryError as e:
        logger.error(
            "contact_message_failed",
            kind=e.kind.value,
            error=e.message,
            attempts=e.attempts,
        )
        return contact_failure(e)
    return contact_success(result)


@router.post("/send-confirmation")
@limiter.limit(_forms_rate_limit)
def send_confirmation(
    request: Request,  # pylint: disable=unused-argument
    body: RegistrationRequest,
    forms: FormsServiceDep,
) -> JSONResponse:
    """Send the registration confirmation email unless it was already sent."""
    outcome = forms.send_registration_confirmation(body)
    logger.info(
        "registration_confirmation_processed",
        state=outcome.state.value,
        attempts=outcome.attempts,
        error_kind=outcome.error_kind.value if outcome.error_kind else None,
    )
    return confirmation_response(outcome)


@router.get("/health")
@limiter.limit("50/minute")
def forms_health(request: Request, forms: FormsServiceDep):  # pylint: disable=unused-argument
    """Email provider and delivery record store status."""
    return forms.health().model_dump(by_alias=True, exclude_none=True)
