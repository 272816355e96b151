"""Form relay configuration settings - main aggregator."""

from pydantic import model_validator
from pydantic_settings import BaseSettings

from infrastructure.configuration.base import SHARED_SETTINGS_CONFIG

# Integration settings
from infrastructure.configuration.integrations import (
    AwsSettings,
    ResendSettings,
)

# Feature settings
from infrastructure.configuration.features import FormsSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    DeliverySettings,
    EmailRetrySettings,
    ServerSettings,
)


class Settings(BaseSettings):
    """Form relay configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: External services (Resend, AWS)
    - **Features**: Form endpoints (sender identities, inbox)
    - **Infrastructure**: Send retries, delivery record store, server

    Environment Variables:
        ENVIRONMENT: Deployment environment name (default: development)
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        api_key = settings.resend.RESEND_API_KEY
        max_attempts = settings.delivery.max_attempts

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    resend: ResendSettings
    aws: AwsSettings

    # Feature settings
    forms: FormsSettings

    # Infrastructure settings
    server: ServerSettings
    email_retry: EmailRetrySettings
    delivery: DeliverySettings

    @property
    def is_production(self) -> bool:
        """True when ENVIRONMENT is 'production'."""
        return self.ENVIRONMENT.lower() == "production"

    @model_validator(mode="after")
    def validate_claim_lease(self) -> "Settings":
        """Require the claim lease to outlast the longest possible send.

        A send ends at most one call timeout after its deadline; a lease
        that lapses sooner lets a second request claim and send again.
        """
        retry = self.email_retry
        if retry.deadline_seconds is None:
            raise ValueError(
                "EMAIL_REQUEST_DEADLINE_SECONDS is required to bound the claim lease"
            )
        longest_send = retry.deadline_seconds + retry.send_timeout_seconds
        if self.delivery.claim_lease_seconds <= longest_send:
            raise ValueError(
                "DELIVERY_CLAIM_LEASE_SECONDS must be greater than "
                "EMAIL_REQUEST_DEADLINE_SECONDS + EMAIL_SEND_TIMEOUT_SECONDS "
                f"({longest_send:g}s)"
            )
        return self

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "resend": ResendSettings,
            "aws": AwsSettings,
            # Features
            "forms": FormsSettings,
            # Infrastructure
            "server": ServerSettings,
            "email_retry": EmailRetrySettings,
            "delivery": DeliverySettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SHARED_SETTINGS_CONFIG
