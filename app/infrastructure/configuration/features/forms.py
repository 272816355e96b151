"""Forms feature settings."""

from pydantic import EmailStr, Field

from infrastructure.configuration.base import FeatureSettings


class FormsSettings(FeatureSettings):
    """Configuration for the contact and registration forms.

    Environment Variables:
        CONTACT_FROM: Sender identity of relayed contact messages
        CONTACT_INBOX: Address that receives contact messages
        CONFIRMATION_FROM: Sender identity of registration confirmations
        CONFIRMATION_REPLY_TO: Reply-To address of registration confirmations
        EXAM_DATE: Scholarship examination date quoted in confirmations (optional)

    Contact messages are addressed to CONTACT_INBOX with the submitter as
    Reply-To. Confirmations are always addressed to the submitter.

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        inbox = settings.forms.CONTACT_INBOX
        ```
    """

    CONTACT_FROM: str = Field(
        default="EdCatalyst Contact Form <contact@edcatalyst.in>",
        alias="CONTACT_FROM",
    )
    CONTACT_INBOX: EmailStr = Field(
        default="edcatalyst.in@gmail.com", alias="CONTACT_INBOX"
    )
    CONFIRMATION_FROM: str = Field(
        default="EdCatalyst <noreply@edcatalyst.in>",
        alias="CONFIRMATION_FROM",
    )
    CONFIRMATION_REPLY_TO: EmailStr = Field(
        default="edcatalyst.in@gmail.com", alias="CONFIRMATION_REPLY_TO"
    )
    EXAM_DATE: str | None = Field(
        default=None,
        alias="EXAM_DATE",
        description="Date of the online scholarship examination, shown in confirmations",
    )
