"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from modules.forms import FormsService


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process.

    Infrastructure packages should use this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/version")
        def get_version(settings: SettingsDep):
            return {"version": settings.GIT_SHA}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_notification_service() -> NotificationService:
    """
    Get application-scoped notification service singleton.

    Owns the Resend client, the delivery record store and the retrying
    sender. The in-memory store only deduplicates within one process, so a
    single cached instance is required.

    Returns:
        NotificationService: Cached service configured from settings.
    """
    return NotificationService(settings=get_settings())


@lru_cache
def get_forms_service() -> FormsService:
    """
    Get application-scoped forms service singleton.

    Usage:
        @router.post("/api/send-confirmation")
        def send_confirmation(body: RegistrationRequest, forms: FormsServiceDep):
            return forms.send_registration_confirmation(body)
    """
    return FormsService(
        settings=get_settings(), notifications=get_notification_service()
    )
