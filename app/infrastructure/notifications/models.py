"""Notification delivery core models.

Records, payloads and outcomes exchanged between the delivery record store,
the retrying sender and the dispatcher.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from infrastructure.notifications.errors import DeliveryError


class ErrorKind(Enum):
    """Classification of a delivery failure.

    Attributes:
        VALIDATION: Missing or malformed input, rejected before any store access
        ALREADY_DELIVERED: Notification was delivered earlier (idempotent success)
        RATE_LIMITED: Attempt ceiling for the recipient reached
        NETWORK_TRANSIENT: Network failure, retried internally then escalated
        PROVIDER_FATAL: Provider rejected the payload, never retried
        STORE_ERROR: Delivery record store failure
        IN_FLIGHT: Another request currently holds the recipient
        CANCELLED: Send aborted by cancellation or the request deadline
    """

    VALIDATION = "validation"
    ALREADY_DELIVERED = "already_delivered"
    RATE_LIMITED = "rate_limited"
    NETWORK_TRANSIENT = "network_transient"
    PROVIDER_FATAL = "provider_fatal"
    STORE_ERROR = "store_error"
    IN_FLIGHT = "in_flight"
    CANCELLED = "cancelled"


class DispatchState(Enum):
    """Dispatcher states.

    CHECK leads to one of the SKIP_* states or to SEND; SEND ends in
    RECORD_SUCCESS or RECORD_FAILURE. A store failure while checking leaves
    the outcome in CHECK.
    """

    CHECK = "check"
    SKIP_ALREADY_SENT = "skip_already_sent"
    SKIP_RATE_LIMITED = "skip_rate_limited"
    SKIP_IN_FLIGHT = "skip_in_flight"
    SEND = "send"
    RECORD_SUCCESS = "record_success"
    RECORD_FAILURE = "record_failure"


def normalize_recipient_key(email: str) -> str:
    """Normalize an email address into a delivery record key."""
    return email.strip().lower()


@dataclass
class DeliveryRecord:
    """Delivery state for one recipient.

    Attributes:
        recipient_key: Normalized email address (unique)
        delivered: True once a send was acknowledged by the provider
        attempts: Provider send attempts made so far (never decreases)
        last_attempt_at: Time of the most recent attempt
        last_error: Message of the most recent failure
        delivered_at: Time the notification was delivered
        created_at: Time the record was created
        metadata: Free-form string attributes (submitter name, course)
        claim_owner: Request currently holding the recipient, if any
        claim_expires_at: When the current claim lapses
    """

    recipient_key: str
    delivered: bool = False
    attempts: int = 0
    last_attempt_at: Optional[datetime] = None
    last_error: Optional[str] = None
    delivered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    claim_owner: Optional[str] = None
    claim_expires_at: Optional[datetime] = None

    def remaining_attempts(self, max_attempts: int) -> int:
        """Attempts left before the ceiling is reached."""
        return max(max_attempts - self.attempts, 0)

    def is_claimed(self, now: datetime) -> bool:
        """True if a claim is held and has not lapsed."""
        return (
            self.claim_owner is not None
            and self.claim_expires_at is not None
            and self.claim_expires_at > now
        )


@dataclass
class EmailPayload:
    """Provider-neutral email to send.

    Attributes:
        sender: From header, e.g. ``"EdCatalyst <noreply@edcatalyst.in>"``
        to: Recipient addresses
        subject: Subject line
        html: HTML body
        reply_to: Optional Reply-To address
    """

    sender: str
    to: List[str]
    subject: str
    html: str
    reply_to: Optional[str] = None

    def to_provider_payload(self) -> Dict[str, Any]:
        """Build the Resend ``POST /emails`` request body."""
        body: Dict[str, Any] = {
            "from": self.sender,
            "to": list(self.to),
            "subject": self.subject,
            "html": self.html,
        }
        if self.reply_to:
            body["reply_to"] = self.reply_to
        return body


@dataclass
class SendResult:
    """Provider acknowledgment of a successful send.

    Attributes:
        provider_id: Message id assigned by the provider
        data: Raw provider response body
        attempts: Attempts used, successful one included
    """

    provider_id: Optional[str]
    data: Dict[str, Any]
    attempts: int


@dataclass
class DispatchOutcome:
    """Final result of one dispatch.

    Attributes:
        state: Terminal dispatcher state
        recipient_key: Normalized recipient key
        message: Human-readable summary
        data: Provider acknowledgment payload on success
        error: Classified error on failure
        attempts: Provider attempts made by this dispatch
        record: Delivery record as last seen or written
        store_error: Message of a store failure that followed a successful send
    """

    state: DispatchState
    recipient_key: str
    message: str
    data: Optional[Dict[str, Any]] = None
    error: Optional["DeliveryError"] = None
    attempts: int = 0
    record: Optional[DeliveryRecord] = None
    store_error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state in (DispatchState.SKIP_ALREADY_SENT, DispatchState.RECORD_SUCCESS)

    @property
    def already_sent(self) -> bool:
        return self.state == DispatchState.SKIP_ALREADY_SENT

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        if self.already_sent:
            return ErrorKind.ALREADY_DELIVERED
        return self.error.kind if self.error is not None else None
