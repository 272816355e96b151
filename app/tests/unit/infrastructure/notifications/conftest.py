"""Fixtures for notification core tests."""

from datetime import datetime, timezone

import pytest

from infrastructure.notifications import (
    Dispatcher,
    EmailPayload,
    InMemoryDeliveryRecordStore,
    RetryingSender,
    RetryPolicy,
)


@pytest.fixture
def retry_policy_factory():
    """Factory for RetryPolicy instances with the production defaults."""

    def _factory(**kwargs) -> RetryPolicy:
        return RetryPolicy(**kwargs)

    return _factory


@pytest.fixture
def sender_factory(recording_waiter):
    """Factory for RetryingSender wired to the recording waiter."""

    def _factory(client, **policy_kwargs) -> RetryingSender:
        return RetryingSender(
            client=client,
            policy=RetryPolicy(**policy_kwargs),
            waiter=recording_waiter,
        )

    return _factory


@pytest.fixture
def memory_store():
    return InMemoryDeliveryRecordStore()


@pytest.fixture
def email_payload():
    return EmailPayload(
        sender="EdCatalyst <noreply@edcatalyst.in>",
        to=["a@x.com"],
        subject="Hello",
        html="<p>Hello</p>",
    )


def render_test_email(recipient, inputs):
    """Renderer used by dispatcher tests."""
    return EmailPayload(
        sender="EdCatalyst <noreply@edcatalyst.in>",
        to=[recipient],
        subject="Confirmation",
        html=f"<p>Dear {inputs.get('name', '')}</p>",
    )


@pytest.fixture
def dispatcher_factory(memory_store, sender_factory):
    """Factory for a Dispatcher over the in-memory store."""

    def _factory(client, store=None, max_attempts=3, **policy_kwargs) -> Dispatcher:
        return Dispatcher(
            store=store or memory_store,
            sender=sender_factory(client, **policy_kwargs),
            renderer=render_test_email,
            max_attempts=max_attempts,
        )

    return _factory


@pytest.fixture
def fixed_now():
    return datetime(2025, 6, 1, 10, 0, 0, tzinfo=timezone.utc)
