"""Idempotent notification delivery.

Sends transactional email at most once per recipient with:
- Delivery records (in-memory or DynamoDB) tracking attempts and delivery
- Bounded retries with exponential backoff for network failures
- Conditional claims so concurrent requests cannot double-send

Usage:
    from infrastructure.notifications import Dispatcher, RetryingSender, EmailPayload

    outcome = dispatcher.dispatch("user@example.com", {"name": "Asha"})
    if outcome.success:
        logger.info("notification_ok", already_sent=outcome.already_sent)
"""

# Models
from infrastructure.notifications.models import (
    DeliveryRecord,
    DispatchOutcome,
    DispatchState,
    EmailPayload,
    ErrorKind,
    SendResult,
    normalize_recipient_key,
)

# Errors
from infrastructure.notifications.errors import (
    DeliveryCancelledError,
    DeliveryError,
    DeliveryStoreError,
)

# Stores
from infrastructure.notifications.store import (
    DeliveryRecordStore,
    InMemoryDeliveryRecordStore,
)
from infrastructure.notifications.dynamodb_store import DynamoDBDeliveryRecordStore

# Sending
from infrastructure.notifications.classifier import (
    FailureCategory,
    classify_send_failure,
)
from infrastructure.notifications.sender import (
    CancellationToken,
    RetryingSender,
    RetryPolicy,
)
from infrastructure.notifications.dispatcher import Dispatcher
from infrastructure.notifications.service import NotificationService

__all__ = [
    # Models
    "DeliveryRecord",
    "DispatchOutcome",
    "DispatchState",
    "EmailPayload",
    "ErrorKind",
    "SendResult",
    "normalize_recipient_key",
    # Errors
    "DeliveryError",
    "DeliveryStoreError",
    "DeliveryCancelledError",
    # Stores
    "DeliveryRecordStore",
    "InMemoryDeliveryRecordStore",
    "DynamoDBDeliveryRecordStore",
    # Sending
    "FailureCategory",
    "classify_send_failure",
    "CancellationToken",
    "RetryingSender",
    "RetryPolicy",
    "Dispatcher",
    "NotificationService",
]
