"""Integration tests for the server module."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from infrastructure.services import get_forms_service, get_settings

pytestmark = pytest.mark.integration


def test_server_has_cors_middleware_configured(app):
    """Test that CORS and request context middleware are installed."""
    middleware_classes = [m.cls.__name__ for m in app.user_middleware]

    assert "CORSMiddleware" in middleware_classes
    assert "RequestContextMiddleware" in middleware_classes


def test_server_routes(app):
    """Test that the form and system routes are registered."""
    route_paths = {str(route.path) for route in app.routes}

    assert {"/", "/version", "/health", "/api/health", "/api/send-email", "/api/send-confirmation"} <= route_paths


def test_system_endpoints(app):
    client = TestClient(app)

    assert client.get("/health").json() == {"status": "ok"}
    assert "version" in client.get("/version").json()
    assert "EdCatalyst Form Relay" in client.get("/").text


def test_unmapped_route_returns_404(app):
    assert TestClient(app).get("/some/unmapped/path").status_code == 404


def test_correlation_id_header(app):
    """Test that the correlation id is echoed back or generated."""
    client = TestClient(app)

    echoed = client.get("/health", headers={"X-Correlation-ID": "req-123"})
    generated = client.get("/health")

    assert echoed.headers["X-Correlation-ID"] == "req-123"
    assert generated.headers["X-Correlation-ID"]


def test_system_rate_limit(app):
    """Test that /version is limited to 50 requests per minute."""
    client = TestClient(app)

    for _ in range(50):
        assert client.get("/version").status_code == 200

    response = client.get("/version")
    assert response.status_code == 429
    assert response.json()["error"] == "Rate limit exceeded"


def test_unhandled_exception_returns_500(app):
    """Test that unexpected errors produce the standard error body."""
    forms = MagicMock()
    forms.health.side_effect = RuntimeError("kaboom")
    app.dependency_overrides[get_forms_service] = lambda: forms

    response = TestClient(app, raise_server_exceptions=False).get("/api/health")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"


def test_lifespan_builds_services(app, monkeypatch):
    """Test that startup builds the notification service and checks the store."""
    monkeypatch.setenv("RESEND_API_KEY", "")
    monkeypatch.setenv("DELIVERY_STORE_BACKEND", "memory")
    get_settings.cache_clear()

    with TestClient(app) as client:
        assert client.app.state.settings.resend.is_configured is False
        assert client.get("/health").status_code == 200


def test_main_runs_uvicorn(monkeypatch):
    """Test that main() serves the app on the configured port."""
    import main  # pylint: disable=import-outside-toplevel

    mock_run = MagicMock()
    monkeypatch.setattr("main.uvicorn.run", mock_run)

    main.main()

    args, kwargs = mock_run.call_args
    assert args == ("main:server_app",)
    assert kwargs["port"] == main.server.settings.server.PORT
    assert kwargs["log_config"] is None
