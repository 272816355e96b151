"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from infrastructure.services.providers import (
    get_settings,
    get_notification_service,
    get_forms_service,
)
from modules.forms import FormsService

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Notification service dependency (sender, record store, dispatcher factory)
NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]

# Forms feature service dependency
FormsServiceDep = Annotated[FormsService, Depends(get_forms_service)]

__all__ = [
    "SettingsDep",
    "NotificationServiceDep",
    "FormsServiceDep",
]
