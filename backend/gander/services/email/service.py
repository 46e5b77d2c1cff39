"""Maintenance notification dispatcher."""

import logging
import secrets
import string
import time

from gander.config import settings
from gander.services.email.config import EmailProviderConfig, resolve_email_config
from gander.services.email.messages import (
    DispatchSummary,
    EmailRecipient,
    EmailResult,
    MaintenanceEmailData,
)
from gander.services.email.rendering import render_maintenance_email
from gander.services.email.transports import build_transport

logger = logging.getLogger(__name__)

INSPECTION_TYPES = {"C_CHECK", "ANNUAL", "100_HOUR"}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_message_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"msg-{int(time.time() * 1000)}-{suffix}"


def default_recipients(maintenance_type: str) -> list[EmailRecipient]:
    """Mechanic, supervisor and parts manager; inspector for inspections; pilot last."""
    recipients = [
        EmailRecipient("John Smith", "john.smith@ganderaviation.com", "MECHANIC"),
        EmailRecipient("Tom Anderson", "tom.anderson@ganderaviation.com", "SUPERVISOR"),
        EmailRecipient("Sarah Johnson", "sarah.johnson@ganderaviation.com", "PARTS_MANAGER"),
    ]
    if maintenance_type in INSPECTION_TYPES:
        recipients.append(
            EmailRecipient("David Chen", "david.chen@ganderaviation.com", "INSPECTOR")
        )
    recipients.append(
        EmailRecipient("Captain Mike Wilson", "mike.wilson@ganderaviation.com", "PILOT")
    )
    return recipients


class MaintenanceEmailService:
    def __init__(
        self,
        transport=None,
        dashboard_url: str | None = None,
        config: EmailProviderConfig | None = None,
    ):
        self.config = config or resolve_email_config()
        self.transport = transport or build_transport(self.config)
        self.dashboard_url = dashboard_url or settings.dashboard_base_url

    @property
    def provider(self) -> str:
        return self.config.provider

    async def send_maintenance_notification_emails(
        self,
        data: MaintenanceEmailData,
        recipients: list[EmailRecipient],
    ) -> DispatchSummary:
        """Render and send one email per recipient, in order.

        Failures are collected per recipient and never abort the batch;
        nothing is retried.
        """
        logger.info(
            f"Sending maintenance notifications via {self.provider}: "
            f"{len(recipients)} recipients, {data.tail_number} {data.maintenance_type}"
        )
        results: list[EmailResult] = []
        failures: list[str] = []
        sent = 0

        for recipient in recipients:
            try:
                content = render_maintenance_email(data, recipient, self.dashboard_url)
                result = await self.transport.send(
                    recipient,
                    content,
                    new_message_id(),
                    headers={
                        "X-Aircraft": data.tail_number,
                        "X-Maintenance-Type": data.maintenance_type,
                    },
                )
            except Exception as e:
                msg = f"Exception sending to {recipient.name}: {e}"
                logger.error(msg)
                failures.append(msg)
                results.append(EmailResult(success=False, error=str(e)))
                continue

            results.append(result)
            if result.success:
                sent += 1
                logger.info(f"Email sent to {recipient.name} ({recipient.role})")
            else:
                msg = f"Failed to send to {recipient.name}: {result.error}"
                logger.warning(msg)
                failures.append(msg)

        logger.info(f"Email summary: {sent} sent, {len(failures)} failed")
        return DispatchSummary(
            success=not failures,
            sent_emails=sent,
            failures=failures,
            results=results,
        )

    async def close(self):
        close = getattr(self.transport, "close", None)
        if close:
            await close()


maintenance_email_service = MaintenanceEmailService()
