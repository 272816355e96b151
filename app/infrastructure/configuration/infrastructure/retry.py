"""Email send retry settings."""

from pydantic import Field, model_validator

from infrastructure.configuration.base import InfrastructureSettings


class EmailRetrySettings(InfrastructureSettings):
    """Retry and timeout configuration for outbound email sends.

    Retries happen inside a single request: a failed send is re-attempted
    only when the failure is classified as a network failure.

    Environment Variables:
        EMAIL_RETRY_MAX_ATTEMPTS: Attempts per send, first one included (default: 3)
        EMAIL_RETRY_BASE_DELAY_MS: Base exponential backoff delay (default: 1000ms)
        EMAIL_RETRY_MAX_DELAY_MS: Backoff cap (default: 10000ms)
        EMAIL_RETRY_TLS_DELAY_MS: Linear backoff step after TLS failures (default: 2000ms)
        EMAIL_SEND_TIMEOUT_SECONDS: Timeout of one provider call (default: 10s)
        EMAIL_REQUEST_DEADLINE_SECONDS: Overall budget for one send, waits included (default: 60s)

    Exponential Backoff:
        Delay before attempt k (k >= 2): min(base_delay * 2^(k-1), max_delay)

        Example with defaults (base=1000ms, max=10000ms):
            Attempt 2: 2000ms
            Attempt 3: 4000ms
            Attempt 4: 8000ms
            Attempt 5: 10000ms (capped)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        max_attempts = settings.email_retry.max_attempts
        ```
    """

    max_attempts: int = Field(
        default=3,
        alias="EMAIL_RETRY_MAX_ATTEMPTS",
        description="Attempts per send, including the first one",
        ge=1,
    )
    base_delay_ms: int = Field(
        default=1000,
        alias="EMAIL_RETRY_BASE_DELAY_MS",
        description="Base delay for exponential backoff (milliseconds)",
        ge=0,
    )
    max_delay_ms: int = Field(
        default=10000,
        alias="EMAIL_RETRY_MAX_DELAY_MS",
        description="Maximum delay for exponential backoff (milliseconds)",
        ge=0,
    )
    tls_delay_ms: int = Field(
        default=2000,
        alias="EMAIL_RETRY_TLS_DELAY_MS",
        description="Linear backoff step after TLS/handshake failures (milliseconds)",
        ge=0,
    )
    send_timeout_seconds: float = Field(
        default=10.0,
        alias="EMAIL_SEND_TIMEOUT_SECONDS",
        description="Timeout applied to a single provider call",
        gt=0,
    )
    deadline_seconds: float | None = Field(
        default=60.0,
        alias="EMAIL_REQUEST_DEADLINE_SECONDS",
        description="Overall time budget for one send, backoff waits included",
    )

    @model_validator(mode="after")
    def validate_delays(self) -> "EmailRetrySettings":
        """Reject a cap lower than the base delay."""
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("EMAIL_RETRY_MAX_DELAY_MS must be >= EMAIL_RETRY_BASE_DELAY_MS")
        return self
