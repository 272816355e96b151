"""
Root-level conftest.py for integration tests.

Integration tests drive the real FastAPI app through TestClient. Only the
system boundary is replaced: the Resend client is a scripted fake and the
delivery record store is in memory.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter
from infrastructure.notifications import NotificationService, RetryingSender
from infrastructure.services import get_forms_service, get_settings
from modules.forms import FormsService


@pytest.fixture
def app():
    """The application with rate limits reset and overrides cleared after use."""
    from server import server  # pylint: disable=import-outside-toplevel

    get_limiter().reset()
    yield server.handler
    server.handler.dependency_overrides.clear()
    get_limiter().reset()


@pytest.fixture
def forms_app(app, settings_factory, email_client_factory, recording_waiter):
    """Factory wiring the app to a FormsService over a scripted email client.

    Returns (TestClient, FakeEmailClient, NotificationService).
    """

    def _factory(*results, **settings_overrides):
        settings = settings_factory(**settings_overrides)
        client = email_client_factory(*results)
        sender = RetryingSender(client=client, waiter=recording_waiter)
        notifications = NotificationService(settings, email_client=client, sender=sender)
        forms = FormsService(settings, notifications)

        app.dependency_overrides[get_forms_service] = lambda: forms
        app.dependency_overrides[get_settings] = lambda: settings
        return TestClient(app), client, notifications

    return _factory
