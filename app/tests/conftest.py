"""
Root-level conftest.py for the form relay tests.

Provides:
- Settings factory building isolated Settings without reading the environment
- Fake email client returning scripted OperationResults
- Recording backoff waiter so retry tests never sleep
- Cache reset of the application-scoped providers
"""

from typing import Any, Dict, List, Optional, Union

import pytest

from infrastructure.configuration import DeliverySettings, EmailRetrySettings, Settings
from infrastructure.configuration.features import FormsSettings
from infrastructure.configuration.infrastructure import ServerSettings
from infrastructure.configuration.integrations import AwsSettings, ResendSettings
from infrastructure.operations import OperationResult
from infrastructure.services import providers


class FakeEmailClient:
    """Email client double returning queued results.

    Each call pops the next scripted item; an exception item is raised
    instead of returned. Once the script is exhausted every call succeeds.
    """

    def __init__(self, results: Optional[List[Union[OperationResult, Exception]]] = None):
        self.results = list(results or [])
        self.calls: List[Dict[str, Any]] = []

    def send_email(self, payload: Dict[str, Any], timeout: float) -> OperationResult:
        self.calls.append({"payload": payload, "timeout": timeout})
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return OperationResult.success(data={"id": f"msg-{len(self.calls)}"})

    @property
    def call_count(self) -> int:
        return len(self.calls)


class RecordingWaiter:
    """Backoff waiter that records requested delays instead of sleeping."""

    def __init__(self, cancel_after: Optional[int] = None):
        self.delays: List[float] = []
        self._cancel_after = cancel_after

    def __call__(self, token, seconds: float) -> bool:
        self.delays.append(seconds)
        if self._cancel_after is not None and len(self.delays) >= self._cancel_after:
            token.cancel()
        return token.is_cancelled


@pytest.fixture
def settings_factory():
    """Factory for Settings instances isolated from the process environment.

    Keyword arguments replace whole sections, e.g.
    ``settings_factory(delivery=DeliverySettings(DELIVERY_MAX_ATTEMPTS=2))``.
    """

    def _factory(**overrides) -> Settings:
        sections = {
            "resend": ResendSettings(RESEND_API_KEY="re_test_key"),
            "aws": AwsSettings(AWS_REGION="ca-central-1"),
            "forms": FormsSettings(),
            "server": ServerSettings(),
            "email_retry": EmailRetrySettings(),
            "delivery": DeliverySettings(DELIVERY_STORE_BACKEND="memory"),
        }
        sections.update(overrides)
        return Settings(ENVIRONMENT="test", GIT_SHA="abc1234", **sections)

    return _factory


@pytest.fixture
def email_client_factory():
    """Factory for FakeEmailClient instances."""

    def _factory(*results) -> FakeEmailClient:
        return FakeEmailClient(list(results))

    return _factory


@pytest.fixture
def recording_waiter():
    return RecordingWaiter()


@pytest.fixture(autouse=True)
def clear_provider_caches():
    """Drop cached settings and services so tests never share state."""
    providers.get_settings.cache_clear()
    providers.get_notification_service.cache_clear()
    providers.get_forms_service.cache_clear()
    yield
    providers.get_settings.cache_clear()
    providers.get_notification_service.cache_clear()
    providers.get_forms_service.cache_clear()


@pytest.fixture
def waiter_factory():
    """Factory for RecordingWaiter instances that cancel after N waits."""

    def _factory(cancel_after: Optional[int] = None) -> RecordingWaiter:
        return RecordingWaiter(cancel_after=cancel_after)

    return _factory
