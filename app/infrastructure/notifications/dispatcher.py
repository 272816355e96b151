"""Idempotent notification dispatcher.

Sends a notification at most once per recipient:
- Skips recipients whose notification was already delivered
- Rejects recipients that reached the attempt ceiling
- Rejects recipients another request is currently sending to
- Records every attempt and the final delivery in the record store

States:
    CHECK → SKIP_ALREADY_SENT | SKIP_RATE_LIMITED | SKIP_IN_FLIGHT | SEND
    SEND → RECORD_SUCCESS | RECORD_FAILURE

Usage Example:
    from infrastructure.notifications import Dispatcher

    dispatcher = Dispatcher(
        store=store,
        sender=sender,
        renderer=render_registration_confirmation,
        max_attempts=3,
    )

    outcome = dispatcher.dispatch("user@example.com", {"name": "Asha", "course": "web"})
    if outcome.already_sent:
        logger.info("confirmation_already_sent")
"""

import uuid
from typing import Callable, Mapping, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import DeliveryError, DeliveryStoreError
from infrastructure.notifications.models import (
    DeliveryRecord,
    DispatchOutcome,
    DispatchState,
    EmailPayload,
    ErrorKind,
    normalize_recipient_key,
)
from infrastructure.notifications.sender import CancellationToken, RetryingSender
from infrastructure.notifications.store import DeliveryRecordStore

logger = get_module_logger()

# Builds the email for a recipient key from the template inputs
Renderer = Callable[[str, Mapping[str, str]], EmailPayload]


class Dispatcher:
    """Lookup-check-send-update orchestration over a delivery record store.

    Attributes:
        store: DeliveryRecordStore holding one record per recipient
        sender: RetryingSender performing the provider call
        renderer: Pure function building the email for a recipient
        max_attempts: Attempt ceiling per recipient
        claim_lease_seconds: Lifetime of the claim taken before sending
    """

    def __init__(
        self,
        store: DeliveryRecordStore,
        sender: RetryingSender,
        renderer: Renderer,
        max_attempts: int = 3,
        claim_lease_seconds: int = 120,
        owner_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self.store = store
        self.sender = sender
        self.renderer = renderer
        self.max_attempts = max_attempts
        self.claim_lease_seconds = claim_lease_seconds
        self._owner_factory = owner_factory

    def dispatch(
        self,
        recipient_key: str,
        template_inputs: Mapping[str, str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> DispatchOutcome:
        """Deliver the notification for ``recipient_key`` at most once.

        Args:
            recipient_key: Recipient email; normalized before use
            template_inputs: Values for the renderer, also stored as record metadata
            cancel_token: Optional token forwarded to the sender

        Returns:
            DispatchOutcome describing the terminal state

        Raises:
            DeliveryError: VALIDATION if the key is empty
        """
        key = normalize_recipient_key(recipient_key or "")
        if not key:
            raise DeliveryError("Recipient is required", ErrorKind.VALIDATION)

        log = logger.bind(recipient_key=key)

        # CHECK
        try:
            record = self.store.find(key)
            skipped = self._check(key, record)
            if skipped is not None:
                log.info("dispatch_skipped", state=skipped.state.value)
                return skipped

            record = self.store.create_or_attempt(key, dict(template_inputs))
            skipped = self._check(key, record)
            if skipped is not None:
                log.info("dispatch_skipped", state=skipped.state.value)
                return skipped

            payload = self.renderer(key, template_inputs)

            owner = self._owner_factory()
            claimed = self.store.claim(
                record, owner, self.claim_lease_seconds, self.max_attempts
            )
            if claimed is None:
                # Delivered or exhausted since the check, otherwise held elsewhere
                skipped = self._check(key, self.store.find(key)) or DispatchOutcome(
                    state=DispatchState.SKIP_IN_FLIGHT,
                    recipient_key=key,
                    message="Delivery already in progress",
                    error=DeliveryError(
                        "Delivery already in progress", ErrorKind.IN_FLIGHT
                    ),
                    record=record,
                )
                log.info("dispatch_skipped", state=skipped.state.value)
                return skipped
            record = claimed
        except DeliveryStoreError as e:
            log.error("dispatch_store_check_failed", error=e.message, detail=e.detail)
            return DispatchOutcome(
                state=DispatchState.CHECK,
                recipient_key=key,
                message="Delivery record store unavailable",
                error=e,
            )

        # SEND
        budget = record.remaining_attempts(self.max_attempts)
        log.info("dispatch_sending", attempt_budget=budget, attempts_so_far=record.attempts)
        try:
            result = self.sender.send(payload, max_attempts=budget, cancel_token=cancel_token)
        except DeliveryError as e:
            return self._record_failure(record, owner, e)

        # RECORD_SUCCESS
        outcome = DispatchOutcome(
            state=DispatchState.RECORD_SUCCESS,
            recipient_key=key,
            message="Notification delivered",
            data=result.data,
            attempts=result.attempts,
            record=record,
        )
        try:
            outcome.record = self.store.mark_delivered(
                record, owner, attempts=result.attempts
            )
        except DeliveryStoreError as e:
            # The provider accepted the email; a bookkeeping failure does not undo that
            log.error(
                "dispatch_record_success_failed",
                error=e.message,
                detail=e.detail,
                provider_id=result.provider_id,
            )
            outcome.store_error = e.message

        log.info("dispatch_delivered", attempts=result.attempts, provider_id=result.provider_id)
        return outcome

    def _check(self, key: str, record: Optional[DeliveryRecord]) -> Optional[DispatchOutcome]:
        if record is None:
            return None

        if record.delivered:
            return DispatchOutcome(
                state=DispatchState.SKIP_ALREADY_SENT,
                recipient_key=key,
                message="Notification already delivered",
                record=record,
            )

        if record.attempts >= self.max_attempts:
            return DispatchOutcome(
                state=DispatchState.SKIP_RATE_LIMITED,
                recipient_key=key,
                message="Maximum delivery attempts reached",
                error=DeliveryError(
                    f"Maximum delivery attempts ({self.max_attempts}) reached",
                    ErrorKind.RATE_LIMITED,
                    detail=record.last_error,
                ),
                record=record,
            )

        return None

    def _record_failure(
        self, record: DeliveryRecord, owner: str, error: DeliveryError
    ) -> DispatchOutcome:
        log = logger.bind(recipient_key=record.recipient_key)
        log.warning(
            "dispatch_failed",
            kind=error.kind.value,
            error=error.message,
            attempts=error.attempts,
        )
        outcome = DispatchOutcome(
            state=DispatchState.RECORD_FAILURE,
            recipient_key=record.recipient_key,
            message="Notification delivery failed",
            error=error,
            attempts=error.attempts,
            record=record,
        )
        try:
            outcome.record = self.store.mark_attempt_failed(
                record, owner, error.detail or error.message, attempts=error.attempts
            )
        except DeliveryStoreError as e:
            log.error("dispatch_record_failure_failed", error=e.message, detail=e.detail)
            outcome.store_error = e.message
        return outcome
