"""Resend module for sending transactional email through the Resend API."""

from .client import ResendClient

__all__ = ["ResendClient"]
