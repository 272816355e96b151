"""Resend email API client.

Thin wrapper over the Resend REST API (``POST /emails``). Transport failures
are classified into OperationResult via ``classify_http_error``; error
payloads returned by the provider come back as PERMANENT_ERROR results that
carry the payload as ``data``.
"""

from typing import Any, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import (
    OperationResult,
    OperationStatus,
    classify_http_error,
)

logger = get_module_logger()


class ResendClient:
    """Client for the Resend transactional email API.

    Args:
        api_key: Resend API key (sent as a bearer token)
        api_url: Base URL of the API
        verify_ssl: Verify the provider's TLS certificate
        session: Optional pre-built requests session (tests)
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://api.resend.com",
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url.rstrip("/")
        self._verify_ssl = verify_ssl
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def send_email(self, payload: dict[str, Any], timeout: float) -> OperationResult:
        """Send one email.

        Args:
            payload: Resend request body (from, to, subject, html, reply_to)
            timeout: Timeout in seconds for this call

        Returns:
            OperationResult: SUCCESS with the provider response ({"id": ...}),
            TRANSIENT_ERROR for transport failures, PERMANENT_ERROR for
            provider error payloads or a missing API key.
        """
        if not self._api_key:
            return OperationResult.permanent_error(
                "RESEND_API_KEY is not configured", error_code="missing_api_key"
            )

        try:
            response = self._session.post(
                f"{self._api_url}/emails",
                json=payload,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                timeout=timeout,
                verify=self._verify_ssl,
            )
        except requests.RequestException as exc:
            return classify_http_error(exc)

        body = _parse_body(response)

        if response.ok:
            return OperationResult.success(data=body, message="email accepted")

        error_name = body.get("name") or f"http_{response.status_code}"
        error_message = body.get("message") or response.reason or "unknown error"
        logger.warning(
            "resend_error_response",
            status_code=response.status_code,
            error_name=error_name,
            error_message=error_message,
        )
        return OperationResult.error(
            OperationStatus.PERMANENT_ERROR,
            f"{error_name}: {error_message}",
            error_code=error_name,
            data=body,
        )


def _parse_body(response: requests.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"message": response.text}
    return body if isinstance(body, dict) else {"data": body}
