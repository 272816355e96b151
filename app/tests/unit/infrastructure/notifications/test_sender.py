"""Unit tests for RetryingSender, RetryPolicy and CancellationToken."""

import pytest
import requests

from infrastructure.configuration import EmailRetrySettings
from infrastructure.notifications import (
    CancellationToken,
    DeliveryCancelledError,
    DeliveryError,
    ErrorKind,
    RetryingSender,
    RetryPolicy,
)
from infrastructure.operations import OperationResult, OperationStatus

pytestmark = pytest.mark.unit


def _timeout():
    return OperationResult.transient_error("Request timed out", error_code="TIMEOUT")


def _tls_failure():
    return OperationResult.transient_error("TLS handshake failed", error_code="TLS_ERROR")


def _validation_error():
    return OperationResult.error(
        OperationStatus.PERMANENT_ERROR,
        "validation_error: Invalid `to` field",
        error_code="validation_error",
        data={"name": "validation_error", "message": "Invalid `to` field"},
    )


class TestRetryPolicy:
    def test_exponential_delays_are_capped(self, retry_policy_factory):
        """Test that delays double from 2s and stop at the 10s cap."""
        policy = retry_policy_factory()

        delays = [policy.delay_for(attempt) for attempt in range(2, 7)]

        assert delays == [2.0, 4.0, 8.0, 10.0, 10.0]
        assert delays == sorted(delays)

    def test_first_attempt_has_no_delay(self, retry_policy_factory):
        """Test that the first attempt is never delayed."""
        assert retry_policy_factory().delay_for(1) == 0.0

    def test_tls_delay_is_linear(self, retry_policy_factory):
        """Test that TLS backoff grows linearly with the failed attempt number."""
        policy = retry_policy_factory(tls_delay=2.0)
        assert [policy.tls_delay_after(n) for n in (1, 2, 3)] == [2.0, 4.0, 6.0]

    def test_from_settings_converts_milliseconds(self):
        """Test that millisecond settings become second-based policy values."""
        settings = EmailRetrySettings(
            EMAIL_RETRY_MAX_ATTEMPTS=5,
            EMAIL_RETRY_BASE_DELAY_MS=500,
            EMAIL_RETRY_MAX_DELAY_MS=4000,
            EMAIL_RETRY_TLS_DELAY_MS=1500,
            EMAIL_SEND_TIMEOUT_SECONDS=7,
            EMAIL_REQUEST_DEADLINE_SECONDS=30,
        )

        policy = RetryPolicy.from_settings(settings)

        assert policy.max_attempts == 5
        assert policy.base_delay == 0.5
        assert policy.max_delay == 4.0
        assert policy.tls_delay == 1.5
        assert policy.send_timeout == 7
        assert policy.deadline == 30


class TestCancellationToken:
    def test_no_deadline(self):
        """Test that a token without deadline reports no remaining budget."""
        token = CancellationToken()
        assert token.remaining() is None
        assert not token.is_cancelled

    def test_remaining_uses_clock(self):
        """Test that remaining time is measured against the injected clock."""
        now = [100.0]
        token = CancellationToken(deadline_seconds=5, clock=lambda: now[0])

        now[0] = 103.0
        assert token.remaining() == pytest.approx(2.0)

        now[0] = 110.0
        assert token.remaining() == 0.0

    def test_wait_returns_immediately_when_cancelled(self):
        """Test that a cancelled token interrupts waits."""
        token = CancellationToken()
        token.cancel()
        assert token.wait(30) is True


class TestRetryingSenderSend:
    def test_success_on_first_attempt(self, sender_factory, email_client_factory, email_payload, recording_waiter):
        """Test that a successful send returns the provider id after one attempt."""
        client = email_client_factory(OperationResult.success(data={"id": "msg-1"}))
        sender = sender_factory(client)

        result = sender.send(email_payload)

        assert result.provider_id == "msg-1"
        assert result.attempts == 1
        assert recording_waiter.delays == []
        assert client.calls[0]["payload"]["from"] == "EdCatalyst <noreply@edcatalyst.in>"
        assert client.calls[0]["payload"]["to"] == ["a@x.com"]

    def test_retries_network_failures_then_succeeds(
        self, sender_factory, email_client_factory, email_payload, recording_waiter
    ):
        """Test that two timeouts followed by success take three attempts with 2s and 4s waits."""
        client = email_client_factory(
            _timeout(), _timeout(), OperationResult.success(data={"id": "msg-3"})
        )
        sender = sender_factory(client)

        result = sender.send(email_payload)

        assert result.attempts == 3
        assert result.provider_id == "msg-3"
        assert client.call_count == 3
        assert recording_waiter.delays == [2.0, 4.0]

    def test_provider_rejection_is_not_retried(
        self, sender_factory, email_client_factory, email_payload, recording_waiter
    ):
        """Test that a provider validation error fails after exactly one attempt."""
        client = email_client_factory(_validation_error())
        sender = sender_factory(client)

        with pytest.raises(DeliveryError) as exc_info:
            sender.send(email_payload)

        assert exc_info.value.kind is ErrorKind.PROVIDER_FATAL
        assert exc_info.value.attempts == 1
        assert exc_info.value.error_code == "validation_error"
        assert client.call_count == 1
        assert recording_waiter.delays == []

    def test_retries_exhausted(self, sender_factory, email_client_factory, email_payload, recording_waiter):
        """Test that persistent network failures surface as NETWORK_TRANSIENT after three attempts."""
        client = email_client_factory(_timeout(), _timeout(), _timeout())
        sender = sender_factory(client)

        with pytest.raises(DeliveryError) as exc_info:
            sender.send(email_payload)

        error = exc_info.value
        assert error.kind is ErrorKind.NETWORK_TRANSIENT
        assert error.attempts == 3
        assert error.message.startswith("Email send failed after 3 attempts")
        assert not error.retryable
        assert recording_waiter.delays == [2.0, 4.0]

    def test_tls_failures_use_linear_backoff(
        self, sender_factory, email_client_factory, email_payload, recording_waiter
    ):
        """Test that TLS failures wait tls_delay times the failed attempt number."""
        client = email_client_factory(
            _tls_failure(), _tls_failure(), OperationResult.success(data={"id": "msg-3"})
        )
        sender = sender_factory(client, tls_delay=3.0)

        result = sender.send(email_payload)

        assert result.attempts == 3
        assert recording_waiter.delays == [3.0, 6.0]

    def test_max_attempts_override_lowers_limit(
        self, sender_factory, email_client_factory, email_payload, recording_waiter
    ):
        """Test that a per-call max_attempts caps the attempts below the policy."""
        client = email_client_factory(_timeout(), _timeout())
        sender = sender_factory(client)

        with pytest.raises(DeliveryError) as exc_info:
            sender.send(email_payload, max_attempts=1)

        assert exc_info.value.attempts == 1
        assert client.call_count == 1
        assert recording_waiter.delays == []

    def test_max_attempts_override_cannot_raise_limit(self, sender_factory, email_client_factory, email_payload):
        """Test that a per-call max_attempts above the policy is ignored."""
        client = email_client_factory(_timeout(), _timeout(), _timeout(), _timeout())
        sender = sender_factory(client, max_attempts=2)

        with pytest.raises(DeliveryError):
            sender.send(email_payload, max_attempts=5)

        assert client.call_count == 2

    def test_zero_attempt_budget_is_rejected(self, sender_factory, email_client_factory, email_payload):
        """Test that an attempt budget below one is a programming error."""
        sender = sender_factory(email_client_factory())

        with pytest.raises(ValueError):
            sender.send(email_payload, max_attempts=0)

    def test_client_exceptions_are_classified(
        self, sender_factory, email_client_factory, email_payload, recording_waiter
    ):
        """Test that exceptions raised by the client are classified and retried."""
        client = email_client_factory(
            requests.exceptions.ConnectionError("connection refused"),
            OperationResult.success(data={"id": "msg-2"}),
        )
        sender = sender_factory(client)

        result = sender.send(email_payload)

        assert result.attempts == 2
        assert recording_waiter.delays == [2.0]

    def test_call_timeout_is_bounded_by_deadline(self, sender_factory, email_client_factory, email_payload):
        """Test that a single call never gets more time than the remaining deadline."""
        client = email_client_factory()
        sender = sender_factory(client, send_timeout=10.0)
        token = CancellationToken(deadline_seconds=4, clock=lambda: 50.0)

        sender.send(email_payload, cancel_token=token)

        assert client.calls[0]["timeout"] == pytest.approx(4.0)


class TestRetryingSenderCancellation:
    def test_wait_overrunning_deadline_aborts(
        self, sender_factory, email_client_factory, email_payload, recording_waiter
    ):
        """Test that a backoff wait longer than the remaining deadline aborts the send."""
        client = email_client_factory(_timeout(), _timeout(), _timeout())
        sender = sender_factory(client)
        token = CancellationToken(deadline_seconds=3, clock=lambda: 0.0)

        with pytest.raises(DeliveryCancelledError) as exc_info:
            sender.send(email_payload, cancel_token=token)

        # 2s fits in the 3s budget, 4s does not
        assert recording_waiter.delays == [2.0]
        assert exc_info.value.attempts == 2
        assert exc_info.value.kind is ErrorKind.CANCELLED
        assert client.call_count == 2

    def test_cancel_during_backoff(self, email_client_factory, email_payload, waiter_factory):
        """Test that cancelling during a backoff wait stops further attempts."""
        waiter = waiter_factory(cancel_after=1)
        client = email_client_factory(_timeout(), _timeout())
        sender = RetryingSender(client=client, waiter=waiter)

        with pytest.raises(DeliveryCancelledError) as exc_info:
            sender.send(email_payload, cancel_token=CancellationToken())

        assert exc_info.value.attempts == 1
        assert client.call_count == 1

    def test_already_cancelled_token(self, sender_factory, email_client_factory, email_payload):
        """Test that a cancelled token prevents any provider call."""
        client = email_client_factory()
        sender = sender_factory(client)
        token = CancellationToken()
        token.cancel()

        with pytest.raises(DeliveryCancelledError) as exc_info:
            sender.send(email_payload, cancel_token=token)

        assert exc_info.value.attempts == 0
        assert client.call_count == 0
