"""Thin client for sending email through the Resend HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from stylist.errors import EmailDeliveryError
from utils.logging_utils import get_tagged_logger, mask_email

logger = get_tagged_logger(__name__, tag="email_client")

RESEND_API_URL = "https://api.resend.com"


@dataclass
class EmailReceipt:
    """Provider-assigned id for an accepted message."""
    id: str


class EmailClient(Protocol):
    """Anything that can deliver one HTML email."""

    def send(self, to: str, subject: str, html: str, *, sender: Optional[str] = None) -> EmailReceipt:
        ...


class ResendEmailClient:
    """Minimal client for the Resend `/emails` endpoint.

    Sends are single attempts: a retried POST could deliver the same morning
    email twice.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        default_sender: str,
        base_url: str = RESEND_API_URL,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.default_sender = default_sender
        self.url = f"{base_url.rstrip('/')}/emails"
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, to: str, subject: str, html: str, *, sender: Optional[str] = None) -> EmailReceipt:
        """Send one message and return its receipt; raise EmailDeliveryError on failure."""
        if not self.api_key:
            raise EmailDeliveryError("Email API key is not configured")

        payload = {
            "from": sender or self.default_sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            r = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.error("Email POST failed: %s", exc, extra={"to": mask_email(to)})
            raise EmailDeliveryError(f"Email service unreachable: {exc}") from exc

        if not 200 <= r.status_code < 300:
            error_text = (r.text or "")[:200]
            raise EmailDeliveryError(
                f"Email service error: {r.status_code} - {error_text}",
                status_code=r.status_code,
            )

        try:
            data = r.json()
        except ValueError as exc:
            raise EmailDeliveryError(f"Email service returned non-JSON response: {r.text[:200]}") from exc

        email_id = data.get("id") if isinstance(data, dict) else None
        if not email_id:
            raise EmailDeliveryError("Email service response did not include a message id")

        logger.info("Email sent", extra={"to": mask_email(to), "email_id": email_id})
        return EmailReceipt(id=str(email_id))
