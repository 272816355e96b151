"""Infrastructure configuration module - public API.

Centralized configuration for the form relay service using Pydantic
BaseSettings with domain-based organization. There is no module-level
settings instance: obtain one through ``infrastructure.services.get_settings``
(cached per process) or build one explicitly in tests.

Exports:
    Settings: Main settings class
    EmailRetrySettings: Send retry settings class (for testing)
    DeliverySettings: Delivery record store settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    api_key = settings.resend.RESEND_API_KEY
    table = settings.delivery.table_name
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.infrastructure import (
    DeliverySettings,
    EmailRetrySettings,
)

__all__ = ["Settings", "EmailRetrySettings", "DeliverySettings"]
