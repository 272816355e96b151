"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.aws import AwsSettings
from infrastructure.configuration.integrations.resend import ResendSettings

__all__ = [
    "AwsSettings",
    "ResendSettings",
]
