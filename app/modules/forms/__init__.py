"""Contact and registration forms feature."""

from modules.forms.service import FormsService

__all__ = ["FormsService"]
