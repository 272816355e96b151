"""Notification service for dependency injection.

Provides a class-based interface to the notification core (record store,
retrying sender, dispatcher) for easier DI and testing.
"""

from typing import TYPE_CHECKING, Mapping, Optional

from infrastructure.clients.aws import DynamoDBClient, SessionProvider
from infrastructure.logging import get_module_logger
from infrastructure.notifications.dispatcher import Dispatcher, Renderer
from infrastructure.notifications.dynamodb_store import DynamoDBDeliveryRecordStore
from infrastructure.notifications.models import DispatchOutcome, EmailPayload, SendResult
from infrastructure.notifications.sender import (
    CancellationToken,
    EmailClient,
    RetryingSender,
    RetryPolicy,
)
from infrastructure.notifications.store import (
    DeliveryRecordStore,
    InMemoryDeliveryRecordStore,
)
from infrastructure.operations import OperationResult
from integrations.resend import ResendClient

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


def build_delivery_store(settings: "Settings") -> DeliveryRecordStore:
    """Create the delivery record store selected by DELIVERY_STORE_BACKEND."""
    if settings.delivery.backend == "dynamodb":
        session_provider = SessionProvider(
            region=settings.aws.AWS_REGION,
            service_role_map=settings.aws.SERVICE_ROLE_MAP,
            endpoint_url=settings.aws.DYNAMODB_ENDPOINT_URL,
        )
        return DynamoDBDeliveryRecordStore(
            DynamoDBClient(session_provider), settings.delivery.table_name
        )
    return InMemoryDeliveryRecordStore()


class NotificationService:
    """Class-based notification service.

    Thin facade owning the email client, the delivery record store and the
    retrying sender, all built from settings unless injected.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.get("/status")
        def status(notification_service: NotificationServiceDep):
            return {"configured": notification_service.provider_configured}

        # Direct instantiation
        service = NotificationService(settings)
        outcome = service.dispatch("user@example.com", inputs, renderer)
    """

    def __init__(
        self,
        settings: "Settings",
        email_client: Optional[EmailClient] = None,
        store: Optional[DeliveryRecordStore] = None,
        sender: Optional[RetryingSender] = None,
    ):
        self._settings = settings
        self.email_client = email_client or ResendClient(
            api_key=settings.resend.RESEND_API_KEY,
            api_url=settings.resend.RESEND_API_URL,
            verify_ssl=settings.resend.RESEND_VERIFY_SSL,
        )
        self.store = store or build_delivery_store(settings)
        self.sender = sender or RetryingSender(
            client=self.email_client,
            policy=RetryPolicy.from_settings(settings.email_retry),
        )

        logger.info(
            "notification_service_initialized",
            store_backend=settings.delivery.backend,
            provider_configured=self.provider_configured,
        )

    @property
    def provider_configured(self) -> bool:
        return self._settings.resend.is_configured

    def send(
        self, payload: EmailPayload, cancel_token: Optional[CancellationToken] = None
    ) -> SendResult:
        """Send once-off email (no delivery record)."""
        return self.sender.send(payload, cancel_token=cancel_token)

    def dispatcher(self, renderer: Renderer) -> Dispatcher:
        """Create a dispatcher for one kind of notification."""
        return Dispatcher(
            store=self.store,
            sender=self.sender,
            renderer=renderer,
            max_attempts=self._settings.delivery.max_attempts,
            claim_lease_seconds=self._settings.delivery.claim_lease_seconds,
        )

    def dispatch(
        self,
        recipient_key: str,
        template_inputs: Mapping[str, str],
        renderer: Renderer,
        cancel_token: Optional[CancellationToken] = None,
    ) -> DispatchOutcome:
        """Deliver a notification at most once per recipient."""
        return self.dispatcher(renderer).dispatch(
            recipient_key, template_inputs, cancel_token=cancel_token
        )

    def store_health(self) -> OperationResult:
        return self.store.health_check()
