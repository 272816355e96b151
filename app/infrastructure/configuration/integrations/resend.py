"""Resend email API integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class ResendSettings(IntegrationSettings):
    """Resend transactional email API configuration.

    Environment Variables:
        RESEND_API_KEY: API key used as the bearer token
        RESEND_API_URL: API base URL (default: https://api.resend.com)
        RESEND_VERIFY_SSL: Verify the provider's TLS certificate (default: True)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.resend.is_configured:
            api_url = settings.resend.RESEND_API_URL
        ```
    """

    RESEND_API_KEY: str | None = Field(default=None, alias="RESEND_API_KEY")
    RESEND_API_URL: str = Field(
        default="https://api.resend.com", alias="RESEND_API_URL"
    )
    RESEND_VERIFY_SSL: bool = Field(default=True, alias="RESEND_VERIFY_SSL")

    @property
    def is_configured(self) -> bool:
        """True when an API key is present."""
        return bool(self.RESEND_API_KEY)
