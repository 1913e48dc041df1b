"""Thin Postmark client for transactional email delivery.

Uses Postmark's REST API directly via httpx, no SDK needed.
Auth-related emails (invites, password reset) remain with Supabase.
"""

import logging

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

POSTMARK_API_URL = "https://api.postmarkapp.com/email"
POSTMARK_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class PostmarkService:
    """Send transactional emails via Postmark's REST API."""

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    def _build_payload(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        reply_to: str | None,
        tag: str | None,
    ) -> dict[str, str]:
        payload = {
            "From": settings.postmark_from_email,
            "To": to,
            "Subject": subject,
            "HtmlBody": html_body,
            "TextBody": text_body,
            "MessageStream": "outbound",
        }
        if reply_to:
            payload["ReplyTo"] = reply_to
        if tag:
            payload["Tag"] = tag
        return payload

    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        reply_to: str | None = None,
        tag: str | None = None,
    ) -> bool:
        """
        Send a single transactional email.

        Returns True on success, False on failure (logs the error, never raises).
        """
        if not settings.postmark_enabled:
            logger.warning("[postmark] Skipped (POSTMARK_API_KEY not configured)")
            return False

        headers = {
            **POSTMARK_HEADERS,
            "X-Postmark-Server-Token": settings.postmark_api_key,
        }
        payload = self._build_payload(to, subject, html_body, text_body, reply_to, tag)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(POSTMARK_API_URL, json=payload, headers=headers)
            response.raise_for_status()
            logger.info(f"[postmark] Sent to {to}: {subject}")
            return True

        except httpx.HTTPStatusError as e:
            logger.error(
                f"[postmark] HTTP {e.response.status_code} sending to {to}: {e.response.text}"
            )
            return False
        except httpx.RequestError as e:
            logger.error(f"[postmark] Request failed sending to {to}: {e}")
            return False


postmark_service = PostmarkService()
