"""Server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and application runtime configuration.

    Environment Variables:
        PORT: Port uvicorn listens on (default: 3000)
        ALLOWED_ORIGINS: Comma separated CORS origins (default: *)
        FORMS_RATE_LIMIT: slowapi limit applied to form endpoints (default: 10/minute)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        origins = settings.server.allowed_origins
        ```
    """

    PORT: int = Field(default=3000, alias="PORT")
    ALLOWED_ORIGINS: str = Field(default="*", alias="ALLOWED_ORIGINS")
    FORMS_RATE_LIMIT: str = Field(default="10/minute", alias="FORMS_RATE_LIMIT")

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins parsed from the comma separated setting."""
        return [
            origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()
        ]
