"""Typed delivery errors."""

from typing import Optional

from infrastructure.notifications.models import ErrorKind


class DeliveryError(Exception):
    """A classified delivery failure.

    Attributes:
        kind: ErrorKind of the failure
        message: Human-readable message
        detail: Underlying error detail (last provider or transport message)
        error_code: Machine error code from the failing call, if any
        attempts: Provider attempts made before the failure surfaced
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.detail = detail
        self.error_code = error_code
        self.attempts = attempts

    @property
    def retryable(self) -> bool:
        """Delivery errors that reach callers are final; retries happen inside the sender."""
        return False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"message={self.message!r}, attempts={self.attempts})"
        )


class DeliveryStoreError(DeliveryError):
    """Delivery record store read or write failed."""

    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(
            message, ErrorKind.STORE_ERROR, detail=detail, error_code=error_code
        )


class DeliveryCancelledError(DeliveryError):
    """Send aborted by cancellation or because the deadline would be overrun."""

    def __init__(self, message: str, attempts: int = 0, detail: Optional[str] = None):
        super().__init__(
            message, ErrorKind.CANCELLED, detail=detail, attempts=attempts
        )
