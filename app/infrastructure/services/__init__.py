"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    NotificationServiceDep,
    FormsServiceDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_notification_service,
    get_forms_service,
)

__all__ = [
    "SettingsDep",
    "NotificationServiceDep",
    "FormsServiceDep",
    "get_settings",
    "get_notification_service",
    "get_forms_service",
]
