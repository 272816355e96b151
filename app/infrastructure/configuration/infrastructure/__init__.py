"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.delivery import DeliverySettings
from infrastructure.configuration.infrastructure.retry import EmailRetrySettings
from infrastructure.configuration.infrastructure.server import ServerSettings

__all__ = [
    "DeliverySettings",
    "EmailRetrySettings",
    "ServerSettings",
]
