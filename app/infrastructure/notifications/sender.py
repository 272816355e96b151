"""Retrying email sender.

Wraps a single provider call with bounded retries. Network failures are
retried with exponential backoff, TLS failures with a linear backoff, and
everything else aborts on the first attempt.

Usage Example:
    from infrastructure.notifications import RetryingSender, RetryPolicy

    sender = RetryingSender(client=resend_client, policy=RetryPolicy())
    result = sender.send(payload)
    logger.info("email_sent", provider_id=result.provider_id, attempts=result.attempts)
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

from infrastructure.configuration import EmailRetrySettings
from infrastructure.logging import get_module_logger
from infrastructure.notifications.classifier import (
    FailureCategory,
    classify_send_failure,
)
from infrastructure.notifications.errors import DeliveryCancelledError, DeliveryError
from infrastructure.notifications.models import EmailPayload, ErrorKind, SendResult
from infrastructure.operations import OperationResult, classify_http_error

logger = get_module_logger()


class EmailClient(Protocol):
    """Provider client used by the sender (see integrations.resend.ResendClient)."""

    def send_email(self, payload: Dict[str, Any], timeout: float) -> OperationResult:
        ...


@dataclass(frozen=True)
class RetryPolicy:
    """Retry timing for one send. Durations are in seconds.

    Attributes:
        max_attempts: Attempts per send, first one included
        base_delay: Base of the exponential backoff
        max_delay: Cap of the exponential backoff
        tls_delay: Step of the linear backoff used after TLS failures
        send_timeout: Timeout of a single provider call
        deadline: Overall budget for one send, waits included (None = unbounded)
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    tls_delay: float = 2.0
    send_timeout: float = 10.0
    deadline: Optional[float] = 60.0

    @classmethod
    def from_settings(cls, settings: EmailRetrySettings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.max_attempts,
            base_delay=settings.base_delay_ms / 1000,
            max_delay=settings.max_delay_ms / 1000,
            tls_delay=settings.tls_delay_ms / 1000,
            send_timeout=settings.send_timeout_seconds,
            deadline=settings.deadline_seconds,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay before attempt ``attempt`` (2 or more) after a network failure."""
        if attempt < 2:
            return 0.0
        return min(self.base_delay * 2 ** (attempt - 1), self.max_delay)

    def tls_delay_after(self, failed_attempt: int) -> float:
        """Delay after TLS failure number ``failed_attempt``."""
        return self.tls_delay * failed_attempt


class CancellationToken:
    """Cooperative cancellation for in-flight sends.

    Backed by ``threading.Event`` so a pending backoff wait returns as soon
    as ``cancel()`` is called. An optional deadline bounds the whole send.

    Args:
        deadline_seconds: Seconds from now after which no new wait may start
        clock: Monotonic clock (seconds)
    """

    def __init__(
        self,
        deadline_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._event = threading.Event()
        self._clock = clock
        self._deadline = (
            clock() + deadline_seconds if deadline_seconds is not None else None
        )

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(self._deadline - self._clock(), 0.0)

    def wait(self, seconds: float) -> bool:
        """Wait up to ``seconds``; True if cancelled meanwhile."""
        return self._event.wait(seconds)


def _wait_on_token(token: CancellationToken, seconds: float) -> bool:
    return token.wait(seconds)


class RetryingSender:
    """Send emails with bounded retries and classified failures.

    Attributes:
        client: Provider client returning OperationResult
        policy: RetryPolicy controlling attempts and delays
        waiter: Callable ``(token, seconds) -> cancelled`` used for backoff
            waits; replaceable in tests

    Example:
        sender = RetryingSender(client=ResendClient(api_key="re_..."))
        try:
            result = sender.send(payload)
        except DeliveryError as e:
            logger.error("email_failed", kind=e.kind.value, error=e.message)
    """

    def __init__(
        self,
        client: EmailClient,
        policy: Optional[RetryPolicy] = None,
        waiter: Callable[[CancellationToken, float], bool] = _wait_on_token,
    ) -> None:
        self.client = client
        self.policy = policy or RetryPolicy()
        self.waiter = waiter

    def send(
        self,
        payload: EmailPayload,
        max_attempts: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> SendResult:
        """Send ``payload``, retrying network failures.

        Args:
            payload: Email to send
            max_attempts: Lower the attempt limit for this call
            cancel_token: Token to abort waits; one bounded by the policy
                deadline is created when omitted

        Returns:
            SendResult with the provider acknowledgment and attempts used

        Raises:
            DeliveryError: PROVIDER_FATAL on the first non-network failure,
                NETWORK_TRANSIENT once attempts are exhausted
            DeliveryCancelledError: cancelled, or the next wait would
                overrun the deadline
        """
        limit = self.policy.max_attempts
        if max_attempts is not None:
            limit = min(limit, max_attempts)
        if limit < 1:
            raise ValueError("max_attempts must be at least 1")

        token = cancel_token or CancellationToken(self.policy.deadline)
        delay = 0.0

        for attempt in range(1, limit + 1):
            if attempt > 1:
                self._wait(token, delay, attempts_made=attempt - 1)
            if token.is_cancelled:
                raise DeliveryCancelledError("Email send cancelled", attempts=attempt - 1)

            result = self._call(payload, token)
            if result.is_success:
                data = result.data or {}
                logger.info(
                    "email_sent",
                    provider_id=data.get("id"),
                    attempt=attempt,
                    to=payload.to,
                )
                return SendResult(provider_id=data.get("id"), data=data, attempts=attempt)

            category = classify_send_failure(result)
            logger.warning(
                "email_send_attempt_failed",
                attempt=attempt,
                max_attempts=limit,
                category=category.value,
                error=result.message,
                error_code=result.error_code,
            )

            if not category.retryable:
                raise DeliveryError(
                    result.message,
                    ErrorKind.PROVIDER_FATAL,
                    detail=result.message,
                    error_code=result.error_code,
                    attempts=attempt,
                )

            if attempt == limit:
                logger.error(
                    "email_send_retries_exhausted",
                    attempts=attempt,
                    error=result.message,
                )
                raise DeliveryError(
                    f"Email send failed after {attempt} attempts: {result.message}",
                    ErrorKind.NETWORK_TRANSIENT,
                    detail=result.message,
                    error_code=result.error_code,
                    attempts=attempt,
                )

            if category is FailureCategory.TLS:
                delay = self.policy.tls_delay_after(attempt)
            else:
                delay = self.policy.delay_for(attempt + 1)

        # Unreachable: the last iteration returns or raises
        raise DeliveryError("Email send failed", ErrorKind.NETWORK_TRANSIENT, attempts=limit)

    def _call(self, payload: EmailPayload, token: CancellationToken) -> OperationResult:
        timeout = self.policy.send_timeout
        remaining = token.remaining()
        if remaining is not None and remaining > 0:
            timeout = min(timeout, remaining)
        try:
            return self.client.send_email(payload.to_provider_payload(), timeout=timeout)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("email_client_raised", error=str(e))
            return classify_http_error(e)

    def _wait(self, token: CancellationToken, delay: float, attempts_made: int) -> None:
        remaining = token.remaining()
        if remaining is not None and delay >= remaining:
            logger.warning(
                "email_send_deadline_exceeded",
                delay=delay,
                remaining=remaining,
                attempts=attempts_made,
            )
            raise DeliveryCancelledError(
                "Email send deadline exceeded", attempts=attempts_made
            )

        logger.info("email_send_backoff", delay=delay, next_attempt=attempts_made + 1)
        if self.waiter(token, delay):
            raise DeliveryCancelledError("Email send cancelled", attempts=attempts_made)
