"""Email provider resolution from settings.

EMAIL_PROVIDER picks the provider; missing credentials for the chosen
provider fall back to simulation with a warning.

Mailtrap modes, in order of preference:
    API token + inbox id  -> sandbox HTTP API
    API token             -> send HTTP API
    user + password       -> SMTP
"""

import logging
from dataclasses import dataclass

from gander.config import Settings, settings

logger = logging.getLogger(__name__)

PROVIDERS = ("simulation", "gmail", "sendgrid", "mailtrap")

# Transport modes
SIMULATION = "simulation"
SMTP = "smtp"
MAILTRAP_SEND_API = "mailtrap_send_api"
MAILTRAP_SANDBOX_API = "mailtrap_sandbox_api"

SMTP_PORT = 587
GMAIL_SMTP_HOST = "smtp.gmail.com"
SENDGRID_SMTP_HOST = "smtp.sendgrid.net"
MAILTRAP_SMTP_HOST = "sandbox.smtp.mailtrap.io"
MAILTRAP_SEND_URL = "https://send.api.mailtrap.io/api/send"
MAILTRAP_SANDBOX_URL = "https://sandbox.api.mailtrap.io/api/send/{inbox_id}"


@dataclass(frozen=True)
class EmailProviderConfig:
    provider: str
    mode: str
    from_email: str
    from_name: str
    host: str | None = None
    port: int = SMTP_PORT
    username: str | None = None
    password: str | None = None
    api_token: str | None = None
    inbox_id: str | None = None

    @property
    def api_url(self) -> str | None:
        if self.mode == MAILTRAP_SANDBOX_API:
            return MAILTRAP_SANDBOX_URL.format(inbox_id=self.inbox_id)
        if self.mode == MAILTRAP_SEND_API:
            return MAILTRAP_SEND_URL
        return None


def _simulation(s: Settings) -> EmailProviderConfig:
    return EmailProviderConfig(
        provider="simulation",
        mode=SIMULATION,
        from_email=s.email_from,
        from_name=s.email_from_name,
    )


def resolve_email_config(s: Settings | None = None) -> EmailProviderConfig:
    """Provider config for the current settings; never raises."""
    s = s or settings
    provider = (s.email_provider or "simulation").strip().lower()
    common = {"from_email": s.email_from, "from_name": s.email_from_name}

    if provider == "mailtrap":
        if s.mailtrap_api_token and s.mailtrap_inbox_id:
            logger.info("Email provider: Mailtrap sandbox API")
            return EmailProviderConfig(
                provider="mailtrap",
                mode=MAILTRAP_SANDBOX_API,
                api_token=s.mailtrap_api_token,
                inbox_id=s.mailtrap_inbox_id,
                **common,
            )
        if s.mailtrap_api_token:
            logger.info("Email provider: Mailtrap send API")
            return EmailProviderConfig(
                provider="mailtrap",
                mode=MAILTRAP_SEND_API,
                api_token=s.mailtrap_api_token,
                **common,
            )
        if s.mailtrap_user and s.mailtrap_pass:
            logger.info("Email provider: Mailtrap SMTP")
            return EmailProviderConfig(
                provider="mailtrap",
                mode=SMTP,
                host=MAILTRAP_SMTP_HOST,
                username=s.mailtrap_user,
                password=s.mailtrap_pass,
                **common,
            )
        logger.warning("Mailtrap credentials not found, falling back to simulation mode")
        return _simulation(s)

    if provider == "gmail":
        if not s.gmail_user or not s.gmail_app_password:
            logger.warning("Gmail credentials not found, falling back to simulation mode")
            return _simulation(s)
        return EmailProviderConfig(
            provider="gmail",
            mode=SMTP,
            host=GMAIL_SMTP_HOST,
            username=s.gmail_user,
            password=s.gmail_app_password,
            **common,
        )

    if provider == "sendgrid":
        if not s.sendgrid_api_key:
            logger.warning("SendGrid API key not found, falling back to simulation mode")
            return _simulation(s)
        return EmailProviderConfig(
            provider="sendgrid",
            mode=SMTP,
            host=SENDGRID_SMTP_HOST,
            username="apikey",
            password=s.sendgrid_api_key,
            **common,
        )

    if provider != "simulation":
        logger.warning(f"Unknown EMAIL_PROVIDER '{provider}', using simulation mode")
    return _simulation(s)
