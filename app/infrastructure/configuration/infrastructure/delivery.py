"""Delivery record store settings."""

from typing import Literal

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class DeliverySettings(InfrastructureSettings):
    """Delivery record store configuration.

    The store remembers, per recipient, whether a confirmation email was
    delivered and how many send attempts were made.

    Environment Variables:
        DELIVERY_STORE_BACKEND: 'memory' or 'dynamodb' (default: memory)
        DELIVERY_TABLE_NAME: DynamoDB table name (default: internship_registrations)
        DELIVERY_MAX_ATTEMPTS: Attempt ceiling per recipient (default: 3)
        DELIVERY_CLAIM_LEASE_SECONDS: How long a request holds a recipient (default: 120s);
            must exceed EMAIL_REQUEST_DEADLINE_SECONDS + EMAIL_SEND_TIMEOUT_SECONDS

    Backends:
        - memory: process-local store (development, testing, single instance)
        - dynamodb: shared store for multi-instance deployments

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.delivery.backend == "dynamodb":
            table = settings.delivery.table_name
        ```
    """

    backend: Literal["memory", "dynamodb"] = Field(
        default="memory",
        alias="DELIVERY_STORE_BACKEND",
        description="Delivery record store backend: 'memory' or 'dynamodb'",
    )
    table_name: str = Field(
        default="internship_registrations",
        alias="DELIVERY_TABLE_NAME",
        description="DynamoDB table holding delivery records",
    )
    max_attempts: int = Field(
        default=3,
        alias="DELIVERY_MAX_ATTEMPTS",
        description="Send attempts allowed per recipient before requests are rejected",
        ge=1,
    )
    claim_lease_seconds: int = Field(
        default=120,
        alias="DELIVERY_CLAIM_LEASE_SECONDS",
        description="Duration a request holds exclusive claim on a recipient",
        ge=1,
    )
