"""Transactional e-mail delivery through the Brevo HTTP API."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from council.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EmailMessage:
    to_email: str
    to_name: str
    subject: str
    html_content: str

    def to_payload(self, *, sender_email: str, sender_name: str) -> dict:
        return {
            "sender": {"email": sender_email, "name": sender_name},
            "to": [{"email": self.to_email, "name": self.to_name}],
            "subject": self.subject,
            "htmlContent": self.html_content,
        }


class BrevoMailer:
    """Synchronous wrapper around Brevo's transactional e-mail endpoint.

    Delivery is best-effort: failures are logged and reported as ``False``
    rather than raised, so callers never leak delivery state to clients.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str,
        sender_email: str,
        sender_name: str,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._sender_email = sender_email
        self._sender_name = sender_name
        self._timeout = timeout
        self._client = client or httpx.Client()
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: Settings, *, client: httpx.Client | None = None) -> "BrevoMailer":
        return cls(
            api_key=settings.brevo_api_key,
            base_url=settings.brevo_api_url,
            sender_email=settings.mail_sender_email,
            sender_name=settings.mail_sender_name,
            timeout=settings.mail_timeout_seconds,
            client=client,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def send(self, message: EmailMessage) -> bool:
        if not self._api_key:
            logger.warning("mail delivery skipped: no API key configured", extra={"subject": message.subject})
            return False
        try:
            response = self._client.post(
                f"{self._base_url}/smtp/email",
                json=message.to_payload(sender_email=self._sender_email, sender_name=self._sender_name),
                headers={"api-key": self._api_key, "accept": "application/json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("mail delivery failed", extra={"subject": message.subject, "error": str(exc)})
            return False
        return True

    def send_magic_link(self, *, to_email: str, to_name: str, link: str) -> bool:
        html = (
            f"<p>Bonjour {to_name},</p>"
            f'<p><a href="{link}">Se connecter</a></p>'
            "<p>Ce lien expire dans quelques minutes.</p>"
        )
        return self.send(
            EmailMessage(
                to_email=to_email,
                to_name=to_name,
                subject="Votre lien de connexion",
                html_content=html,
            )
        )


__all__ = ["BrevoMailer", "EmailMessage"]
