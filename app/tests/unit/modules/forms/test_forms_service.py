"""Unit tests for FormsService and the response mapping."""

import json
from unittest.mock import MagicMock

import pytest

from infrastructure.configuration.features import FormsSettings
from infrastructure.notifications import (
    DeliveryError,
    DispatchOutcome,
    DispatchState,
    ErrorKind,
    NotificationService,
    RetryingSender,
)
from infrastructure.operations import OperationResult
from modules.forms import FormsService
from modules.forms.responses import confirmation_response, contact_failure
from modules.forms.schemas import ContactMessageRequest, RegistrationRequest

pytestmark = pytest.mark.unit


@pytest.fixture
def forms_service_factory(settings_factory, email_client_factory, recording_waiter):
    """Factory for a FormsService over a fake email client and in-memory store."""

    def _factory(*results, **settings_overrides):
        settings = settings_factory(**settings_overrides)
        client = email_client_factory(*results)
        sender = RetryingSender(client=client, waiter=recording_waiter)
        notifications = NotificationService(settings, email_client=client, sender=sender)
        return FormsService(settings, notifications), client

    return _factory


def _contact_request():
    return ContactMessageRequest.model_validate(
        {"from": "visitor@example.com", "name": "Asha", "subject": "Hi", "message": "Hello"}
    )


def _registration(email="Asha@Example.com"):
    return RegistrationRequest(name="Asha", email=email, course="cloud")


class TestSendContactMessage:
    def test_relays_to_inbox(self, forms_service_factory):
        """Test that contact messages go to the configured inbox."""
        service, client = forms_service_factory(
            forms=FormsSettings(CONTACT_INBOX="inbox@edcatalyst.in")
        )

        result = service.send_contact_message(_contact_request())

        payload = client.calls[0]["payload"]
        assert payload["to"] == ["inbox@edcatalyst.in"]
        assert payload["reply_to"] == "visitor@example.com"
        assert result.attempts == 1

    def test_contact_messages_are_not_deduplicated(self, forms_service_factory):
        """Test that repeated contact messages are each sent."""
        service, client = forms_service_factory()

        service.send_contact_message(_contact_request())
        service.send_contact_message(_contact_request())

        assert client.call_count == 2

    def test_failure_raises_delivery_error(self, forms_service_factory):
        service, _ = forms_service_factory(
            OperationResult.permanent_error("RESEND_API_KEY is not configured", error_code="missing_api_key")
        )

        with pytest.raises(DeliveryError) as exc_info:
            service.send_contact_message(_contact_request())

        assert exc_info.value.kind is ErrorKind.PROVIDER_FATAL


class TestSendRegistrationConfirmation:
    def test_sends_once_per_address(self, forms_service_factory):
        """Test that a confirmation is sent once and repeats report alreadySent."""
        service, client = forms_service_factory()

        first = service.send_registration_confirmation(_registration())
        second = service.send_registration_confirmation(_registration("asha@example.com"))

        assert first.state is DispatchState.RECORD_SUCCESS
        assert second.state is DispatchState.SKIP_ALREADY_SENT
        assert client.call_count == 1
        payload = client.calls[0]["payload"]
        assert payload["to"] == ["asha@example.com"]
        assert "Cloud Computing &amp; DevOps" in payload["html"]

    def test_record_metadata(self, forms_service_factory):
        """Test that the submitted name and course are stored on the record."""
        service, _ = forms_service_factory()

        outcome = service.send_registration_confirmation(_registration())

        assert outcome.record.metadata == {
            "name": "Asha",
            "course": "cloud",
            "course_name": "Cloud Computing & DevOps",
        }

    def test_health(self, forms_service_factory):
        service, _ = forms_service_factory()

        health = service.health()

        assert health.status == "ok"
        assert health.resend_configured is True
        assert health.store_connected is True

    def test_health_reports_store_failure(self, settings_factory, email_client_factory):
        """Test that an unreachable store is reported in the health payload."""
        store = MagicMock()
        store.health_check.return_value = OperationResult.transient_error("Could not connect")
        settings = settings_factory()
        notifications = NotificationService(settings, email_client=email_client_factory(), store=store)

        health = FormsService(settings, notifications).health()

        assert health.status == "error"
        assert health.store_connected is False
        assert health.error == "Could not connect"


class TestConfirmationResponse:
    @pytest.mark.parametrize(
        "state,error,status_code",
        [
            (DispatchState.RECORD_SUCCESS, None, 200),
            (DispatchState.SKIP_ALREADY_SENT, None, 200),
            (DispatchState.SKIP_RATE_LIMITED, DeliveryError("ceiling", ErrorKind.RATE_LIMITED), 429),
            (DispatchState.SKIP_IN_FLIGHT, DeliveryError("busy", ErrorKind.IN_FLIGHT), 409),
            (DispatchState.RECORD_FAILURE, DeliveryError("boom", ErrorKind.NETWORK_TRANSIENT), 500),
            (DispatchState.CHECK, DeliveryError("down", ErrorKind.STORE_ERROR), 500),
        ],
    )
    def test_status_codes(self, state, error, status_code):
        """Test that every dispatcher outcome maps to its HTTP status."""
        outcome = DispatchOutcome(state=state, recipient_key="a@x.com", message="m", error=error)
        assert confirmation_response(outcome).status_code == status_code

    def test_already_sent_body(self):
        outcome = DispatchOutcome(
            state=DispatchState.SKIP_ALREADY_SENT, recipient_key="a@x.com", message="m"
        )

        body = json.loads(confirmation_response(outcome).body)

        assert body == {
            "success": True,
            "message": "Confirmation email was already sent to this user",
            "alreadySent": True,
        }

    def test_contact_failure_body(self):
        error = DeliveryError("failed", ErrorKind.PROVIDER_FATAL, detail="validation_error: bad")

        response = contact_failure(error)

        assert response.status_code == 500
        assert json.loads(response.body) == {
            "error": "Failed to send email",
            "message": "There was an error sending your message. Please try again later.",
            "details": "validation_error: bad",
        }
