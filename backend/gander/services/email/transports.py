"""Delivery transports: simulation, SMTP and the Mailtrap HTTP APIs.

Every transport exposes ``async send(recipient, content, message_id, headers)``
and reports delivery problems as a failed EmailResult instead of raising.
"""

import asyncio
import logging
import random
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

import httpx

from gander.config import settings
from gander.services.email.config import (
    MAILTRAP_SANDBOX_API,
    MAILTRAP_SEND_API,
    SIMULATION,
    SMTP,
    EmailProviderConfig,
)
from gander.services.email.messages import EmailContent, EmailRecipient, EmailResult

logger = logging.getLogger(__name__)


class SimulatedTransport:
    """Logs the message and reports success after a short delay.

    A configurable share of sends fails with a connection timeout so the
    dispatcher's failure path gets exercised in demos.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        failure_rate: float | None = None,
        min_delay_ms: int | None = None,
        max_delay_ms: int | None = None,
    ):
        self._rng = rng or random.Random()
        self.failure_rate = (
            settings.email_simulation_failure_rate if failure_rate is None else failure_rate
        )
        self.min_delay_ms = (
            settings.email_simulation_min_delay_ms if min_delay_ms is None else min_delay_ms
        )
        self.max_delay_ms = (
            settings.email_simulation_max_delay_ms if max_delay_ms is None else max_delay_ms
        )

    async def send(
        self,
        recipient: EmailRecipient,
        content: EmailContent,
        message_id: str,
        headers: dict[str, str] | None = None,
    ) -> EmailResult:
        if self.max_delay_ms > 0:
            delay_ms = self._rng.uniform(self.min_delay_ms, max(self.min_delay_ms, self.max_delay_ms))
            await asyncio.sleep(delay_ms / 1000)

        if self._rng.random() < self.failure_rate:
            logger.warning(f"Simulated delivery failure to {recipient.email}")
            return EmailResult(success=False, error="SMTP connection timeout")

        logger.info(
            f"[simulated email] to={recipient.name} <{recipient.email}> ({recipient.role}) "
            f"subject={content.subject!r} id={message_id}"
        )
        logger.debug(content.text)
        return EmailResult(success=True, message_id=message_id)


class SMTPTransport:
    """STARTTLS + login SMTP delivery (Gmail, SendGrid, Mailtrap SMTP)."""

    def __init__(self, config: EmailProviderConfig):
        self.config = config

    def build_message(
        self,
        recipient: EmailRecipient,
        content: EmailContent,
        message_id: str,
        headers: dict[str, str] | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = content.subject
        msg["From"] = formataddr((self.config.from_name, self.config.from_email))
        msg["To"] = formataddr((recipient.name, recipient.email))
        msg["Message-ID"] = f"<{message_id}@gander.maintenance>"
        for key, value in (headers or {}).items():
            msg[key] = value

        msg.attach(MIMEText(content.text, "plain", "utf-8"))
        msg.attach(MIMEText(content.html, "html", "utf-8"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.config.host, self.config.port, timeout=30) as server:
            server.starttls()
            server.login(self.config.username, self.config.password)
            server.send_message(msg)

    async def send(
        self,
        recipient: EmailRecipient,
        content: EmailContent,
        message_id: str,
        headers: dict[str, str] | None = None,
    ) -> EmailResult:
        msg = self.build_message(recipient, content, message_id, headers)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send to {recipient.email} via {self.config.host} failed: {e}")
            return EmailResult(success=False, error=str(e))

        logger.info(f"Email sent to {recipient.email} via {self.config.provider} ({message_id})")
        return EmailResult(success=True, message_id=message_id)


class MailtrapTransport:
    """Mailtrap send or sandbox HTTP API."""

    def __init__(self, config: EmailProviderConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=15.0)
        return self._client

    def _auth_headers(self) -> dict[str, str]:
        if self.config.mode == MAILTRAP_SANDBOX_API:
            return {"Api-Token": self.config.api_token or ""}
        return {"Authorization": f"Bearer {self.config.api_token}"}

    def build_payload(
        self,
        recipient: EmailRecipient,
        content: EmailContent,
        message_id: str,
        headers: dict[str, str] | None = None,
    ) -> dict:
        return {
            "from": {"email": self.config.from_email, "name": self.config.from_name},
            "to": [{"email": recipient.email, "name": recipient.name}],
            "subject": content.subject,
            "text": content.text,
            "html": content.html,
            "headers": {"X-Message-ID": message_id, **(headers or {})},
        }

    async def send(
        self,
        recipient: EmailRecipient,
        content: EmailContent,
        message_id: str,
        headers: dict[str, str] | None = None,
    ) -> EmailResult:
        payload = self.build_payload(recipient, content, message_id, headers)
        try:
            client = await self._get_client()
            resp = await client.post(
                self.config.api_url,
                json=payload,
                headers={"Content-Type": "application/json", **self._auth_headers()},
            )
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Mailtrap API error {e.response.status_code} for {recipient.email}: "
                f"{e.response.text[:200]}"
            )
            return EmailResult(success=False, error=f"Mailtrap API error {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Mailtrap request for {recipient.email} failed: {e}")
            return EmailResult(success=False, error=str(e))

        ids = body.get("message_ids") or []
        return EmailResult(success=True, message_id=ids[0] if ids else message_id)

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


def build_transport(config: EmailProviderConfig):
    if config.mode == SMTP:
        return SMTPTransport(config)
    if config.mode in (MAILTRAP_SEND_API, MAILTRAP_SANDBOX_API):
        return MailtrapTransport(config)
    if config.mode != SIMULATION:
        logger.warning(f"Unknown email mode '{config.mode}', using simulation")
    return SimulatedTransport()
