"""Shared base classes for settings modules."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Every settings group reads the same .env file with exact-case variable names
# and ignores variables that belong to other groups.
SHARED_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Base class for external integration settings (Resend, AWS)."""

    model_config = SHARED_SETTINGS_CONFIG


class FeatureSettings(BaseSettings):
    """Base class for feature module settings (forms)."""

    model_config = SHARED_SETTINGS_CONFIG


class InfrastructureSettings(BaseSettings):
    """Base class for infrastructure-level settings.

    Infrastructure settings control core system behavior: send retries,
    the delivery record store and the HTTP server.
    """

    model_config = SHARED_SETTINGS_CONFIG
