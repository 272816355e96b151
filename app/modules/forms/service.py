"""Forms service.

Handler logic behind the form endpoints: contact messages are relayed once
through the retrying sender; registration confirmations go through the
idempotent dispatcher keyed by the registrant's email.
"""

from functools import partial
from typing import TYPE_CHECKING, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    CancellationToken,
    DispatchOutcome,
    NotificationService,
    SendResult,
)
from modules.forms.schemas import ContactMessageRequest, FormsHealthResponse, RegistrationRequest
from modules.forms.templates import (
    course_display_name,
    render_contact_message,
    render_registration_confirmation,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


class FormsService:
    """Contact and registration form handling.

    Args:
        settings: Settings instance
        notifications: NotificationService providing the sender and dispatcher
    """

    def __init__(self, settings: "Settings", notifications: NotificationService):
        self._forms = settings.forms
        self._notifications = notifications
        self._confirmations = notifications.dispatcher(
            partial(
                render_registration_confirmation,
                sender=self._forms.CONFIRMATION_FROM,
                reply_to=str(self._forms.CONFIRMATION_REPLY_TO),
                exam_date=self._forms.EXAM_DATE,
            )
        )

    def send_contact_message(
        self,
        request: ContactMessageRequest,
        cancel_token: Optional[CancellationToken] = None,
    ) -> SendResult:
        """Relay a contact form submission to the inbox.

        Raises:
            DeliveryError: when the send fails
        """
        payload = render_contact_message(
            sender=self._forms.CONTACT_FROM,
            inbox=str(self._forms.CONTACT_INBOX),
            reply_to=str(request.sender),
            name=request.name,
            subject=request.subject,
            message=request.message,
        )
        logger.info("contact_message_received", reply_to=str(request.sender))
        return self._notifications.send(payload, cancel_token=cancel_token)

    def send_registration_confirmation(
        self,
        request: RegistrationRequest,
        cancel_token: Optional[CancellationToken] = None,
    ) -> DispatchOutcome:
        """Send the registration confirmation at most once per email address."""
        inputs = {
            "name": request.name,
            "course": request.course,
            "course_name": course_display_name(request.course),
        }
        logger.info(
            "registration_confirmation_requested",
            course=inputs["course_name"],
        )
        return self._confirmations.dispatch(
            str(request.email), inputs, cancel_token=cancel_token
        )

    def health(self) -> FormsHealthResponse:
        """Provider configuration and store connectivity."""
        result = self._notifications.store_health()
        if not result.is_success:
            logger.warning(
                "delivery_store_unhealthy",
                error=result.message,
                error_code=result.error_code,
            )
        return FormsHealthResponse(
            status="ok" if result.is_success else "error",
            resend_configured=self._notifications.provider_configured,
            store_connected=result.is_success,
            error=None if result.is_success else result.message,
        )
