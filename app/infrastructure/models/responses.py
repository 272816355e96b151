"""Standard API response wrappers for consistent response formatting.

Every form endpoint answers with one of two shapes:
    success: {"success": true, "message": ..., "data": ..., "alreadySent": ...}
    failure: {"error": ..., "message": ..., "details": ...}
"""

from typing import Any, Generic, TypeVar

from pydantic import Field

from infrastructure.models.base import InfrastructureModel

T = TypeVar("T")


class APIResponse(InfrastructureModel, Generic[T]):
    """Generic API response wrapper.

    Attributes:
        success: Whether the operation succeeded
        message: Human-readable message
        data: Response payload (provider acknowledgment for sends)
        already_sent: Set when an idempotent request found earlier delivery

    Example:
        >>> response = APIResponse(
        ...     success=True,
        ...     message="Email sent successfully",
        ...     data={"id": "4ef9a417"},
        ... )
        >>> response.to_content()
        {'success': True, 'message': 'Email sent successfully', 'data': {'id': '4ef9a417'}}
    """

    success: bool = Field(default=True, description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable message")
    data: T | None = Field(default=None, description="Response payload")
    already_sent: bool | None = Field(
        default=None,
        alias="alreadySent",
        description="True when the notification had been delivered earlier",
    )

    def to_content(self) -> dict[str, Any]:
        """JSON-ready dict using wire names, without unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ErrorResponse(InfrastructureModel):
    """Standard error response wrapper.

    Attributes:
        error: Short error title
        message: Human-readable explanation for the end user
        details: Underlying error detail (message or validation errors)

    Example:
        >>> error = ErrorResponse(
        ...     error="Missing required fields",
        ...     message="Please provide all required fields",
        ...     details=[{"field": "email", "message": "field required"}],
        ... )
    """

    error: str = Field(..., description="Short error title")
    message: str = Field(..., description="Human-readable explanation")
    details: Any | None = Field(default=None, description="Underlying error detail")

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
