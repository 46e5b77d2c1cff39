"""Templated maintenance notifications over a pluggable transport."""

from gander.services.email.config import EmailProviderConfig, resolve_email_config
from gander.services.email.messages import (
    DispatchSummary,
    EmailContent,
    EmailRecipient,
    EmailResult,
    MaintenanceEmailData,
)
from gander.services.email.service import (
    MaintenanceEmailService,
    default_recipients,
    maintenance_email_service,
    new_message_id,
)

__all__ = [
    "DispatchSummary",
    "EmailContent",
    "EmailProviderConfig",
    "EmailRecipient",
    "EmailResult",
    "MaintenanceEmailData",
    "MaintenanceEmailService",
    "default_recipients",
    "maintenance_email_service",
    "new_message_id",
    "resolve_email_config",
]
