from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class ContactMessageRequest(BaseModel):
    """Schema for a contact form submission."""

    model_config = ConfigDict(populate_by_name=True)

    sender: Annotated[
        EmailStr,
        Field(
            ...,
            alias="from",
            description="Submitter email address",
            json_schema_extra={"example": "visitor@example.com"},
        ),
    ]
    name: Annotated[
        str,
        Field(..., min_length=1, max_length=200, json_schema_extra={"example": "Asha"}),
    ]
    subject: Annotated[
        str,
        Field(
            ...,
            min_length=1,
            max_length=300,
            json_schema_extra={"example": "Course enquiry"},
        ),
    ]
    message: Annotated[
        str,
        Field(..., min_length=1, max_length=10000),
    ]

    @field_validator("name", "subject", "message", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace so blank fields fail min_length."""
        return _strip(v)


class RegistrationRequest(BaseModel):
    """Schema for an internship registration confirmation request."""

    name: Annotated[
        str,
        Field(..., min_length=1, max_length=200, json_schema_extra={"example": "Asha"}),
    ]
    email: Annotated[
        EmailStr,
        Field(
            ...,
            description="Registrant email; the confirmation is sent here",
            json_schema_extra={"example": "asha@example.com"},
        ),
    ]
    course: Annotated[
        str,
        Field(
            ...,
            min_length=1,
            max_length=200,
            description="Course code (web, cyber, data, cloud) or course name",
            json_schema_extra={"example": "web"},
        ),
    ]

    @field_validator("name", "course", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _strip(v)


class FormsHealthResponse(BaseModel):
    """Schema for the forms health check response."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    resend_configured: bool = Field(alias="resendConfigured")
    store_connected: bool = Field(alias="storeConnected")
    error: Optional[str] = None
