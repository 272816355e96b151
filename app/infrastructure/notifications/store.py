"""Delivery record storage.

Storage interface and in-memory implementation for delivery records. The
protocol-based design allows for multiple backends (in-memory, DynamoDB).
"""

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import DeliveryStoreError
from infrastructure.notifications.models import DeliveryRecord
from infrastructure.operations import OperationResult

logger = get_module_logger()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DeliveryRecordStore(Protocol):
    """Storage interface for delivery records.

    Implementations must make ``claim`` and ``mark_delivered`` atomic so two
    requests for the same recipient cannot both send. Updates after a send
    only apply while the caller still holds the claim. Every method raises
    DeliveryStoreError when the backend fails.

    Methods:
        find: Look up a record by recipient key
        create_or_attempt: Create the record if absent and return the stored one
        claim: Take a time-limited exclusive claim on an undelivered record
            that still has attempts left
        mark_attempt_failed: Count failed attempts and release the claim
        mark_delivered: Mark the record delivered and release the claim
        health_check: Report backend reachability
    """

    def find(self, recipient_key: str) -> Optional[DeliveryRecord]:
        """Return the record for recipient_key, or None if there is none."""
        ...

    def create_or_attempt(
        self, recipient_key: str, metadata: Optional[Dict[str, str]] = None
    ) -> DeliveryRecord:
        """Create a record if absent (conditional create) and return the stored record.

        An existing record is returned unchanged; metadata is only written
        on creation.
        """
        ...

    def claim(
        self, record: DeliveryRecord, owner: str, lease_seconds: int, max_attempts: int
    ) -> Optional[DeliveryRecord]:
        """Claim a record for sending.

        Succeeds only if the record is undelivered, has fewer than
        ``max_attempts`` attempts, and is unclaimed or its previous claim
        has lapsed.

        Returns:
            The claimed record as stored, or None if the record is held,
            delivered or out of attempts
        """
        ...

    def mark_attempt_failed(
        self, record: DeliveryRecord, owner: str, error_message: str, attempts: int = 1
    ) -> DeliveryRecord:
        """Add attempts, set last_attempt_at and last_error, release the claim.

        Conditional on ``owner`` still holding the claim.
        """
        ...

    def mark_delivered(
        self, record: DeliveryRecord, owner: str, attempts: int = 1
    ) -> DeliveryRecord:
        """Set delivered, add attempts, set timestamps, release the claim.

        Conditional on the record not being delivered yet and ``owner``
        still holding the claim.
        """
        ...

    def health_check(self) -> OperationResult:
        """Report whether the backend is reachable."""
        ...


class InMemoryDeliveryRecordStore:
    """In-memory implementation of DeliveryRecordStore.

    Thread-safe; suitable for single-instance deployments, development and
    tests. Records handed out are copies, so callers never mutate stored state.

    Args:
        clock: Callable returning the current UTC time
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._records: Dict[str, DeliveryRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def find(self, recipient_key: str) -> Optional[DeliveryRecord]:
        with self._lock:
            record = self._records.get(recipient_key)
            return _snapshot(record) if record else None

    def create_or_attempt(
        self, recipient_key: str, metadata: Optional[Dict[str, str]] = None
    ) -> DeliveryRecord:
        with self._lock:
            record = self._records.get(recipient_key)
            if record is None:
                record = DeliveryRecord(
                    recipient_key=recipient_key,
                    created_at=self._clock(),
                    metadata=dict(metadata or {}),
                )
                self._records[recipient_key] = record
                logger.debug("delivery_record_created", recipient_key=recipient_key)
            return _snapshot(record)

    def claim(
        self, record: DeliveryRecord, owner: str, lease_seconds: int, max_attempts: int
    ) -> Optional[DeliveryRecord]:
        with self._lock:
            stored = self._get_existing(record.recipient_key)
            now = self._clock()
            if (
                stored.delivered
                or stored.attempts >= max_attempts
                or (stored.is_claimed(now) and stored.claim_owner != owner)
            ):
                logger.debug(
                    "delivery_claim_rejected",
                    recipient_key=record.recipient_key,
                    delivered=stored.delivered,
                    attempts=stored.attempts,
                    claim_owner=stored.claim_owner,
                )
                return None
            stored.claim_owner = owner
            stored.claim_expires_at = now + timedelta(seconds=lease_seconds)
            return _snapshot(stored)

    def mark_attempt_failed(
        self, record: DeliveryRecord, owner: str, error_message: str, attempts: int = 1
    ) -> DeliveryRecord:
        with self._lock:
            stored = self._get_held(record.recipient_key, owner)
            stored.attempts += attempts
            stored.last_attempt_at = self._clock()
            stored.last_error = error_message
            stored.claim_owner = None
            stored.claim_expires_at = None
            return _snapshot(stored)

    def mark_delivered(
        self, record: DeliveryRecord, owner: str, attempts: int = 1
    ) -> DeliveryRecord:
        with self._lock:
            stored = self._get_held(record.recipient_key, owner)
            if stored.delivered:
                raise DeliveryStoreError(
                    f"Delivery record {record.recipient_key} is already delivered",
                    error_code="ConditionalCheckFailed",
                )
            now = self._clock()
            stored.delivered = True
            stored.attempts += attempts
            stored.last_attempt_at = now
            stored.delivered_at = now
            stored.claim_owner = None
            stored.claim_expires_at = None
            return _snapshot(stored)

    def health_check(self) -> OperationResult:
        return OperationResult.success(message="in-memory store")

    def _get_existing(self, recipient_key: str) -> DeliveryRecord:
        record = self._records.get(recipient_key)
        if record is None:
            raise DeliveryStoreError(
                f"Delivery record {recipient_key} does not exist",
                error_code="NotFound",
            )
        return record

    def _get_held(self, recipient_key: str, owner: str) -> DeliveryRecord:
        record = self._get_existing(recipient_key)
        if record.claim_owner != owner:
            logger.warning(
                "delivery_claim_lost",
                recipient_key=recipient_key,
                owner=owner,
                claim_owner=record.claim_owner,
            )
            raise DeliveryStoreError(
                f"Delivery record {recipient_key} is not claimed by {owner}",
                error_code="ConditionalCheckFailed",
            )
        return record


def _snapshot(record: DeliveryRecord) -> DeliveryRecord:
    return replace(record, metadata=dict(record.metadata))
