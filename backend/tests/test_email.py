import json
import random
import re
from datetime import datetime, timezone

import httpx
import pytest

from conftest import RecordingTransport
from gander.config import Settings
from gander.services.email import (
    EmailRecipient,
    MaintenanceEmailData,
    MaintenanceEmailService,
    default_recipients,
    new_message_id,
    resolve_email_config,
)
from gander.services.email.config import (
    MAILTRAP_SANDBOX_API,
    MAILTRAP_SEND_API,
    SIMULATION,
    SMTP,
    EmailProviderConfig,
)
from gander.services.email.rendering import render_maintenance_email
from gander.services.email.transports import (
    MailtrapTransport,
    SimulatedTransport,
    SMTPTransport,
)

MECHANIC = EmailRecipient("John Smith", "john.smith@ganderaviation.com", "MECHANIC")


@pytest.fixture
def email_data():
    now = datetime(2025, 10, 15, 12, 0, tzinfo=timezone.utc)
    return MaintenanceEmailData(
        recommendation_id="rec-1",
        workflow_id="workflow-rec-1",
        tail_number="N123AB",
        make="Gulfstream",
        model="G550",
        total_time=2450,
        maintenance_type="100_HOUR",
        scheduled_date=now,
        estimated_duration=8,
        estimated_cost=4000,
        location="Hangar A - Bay 1",
        mechanic="John Smith",
        supervisor="Tom Anderson",
        approved_by="ops.manager",
        approved_at=now,
        equipment=["Engine Tools"],
        parts=["Oil Filter"],
        regulations=["FAR Part 43 - Maintenance Requirements"],
        required_documentation=["Maintenance Log Entry"],
        approval_notes="Fuel <low> & check",
    )


def _settings(**overrides) -> Settings:
    base = {
        "email_provider": "simulation",
        "gmail_user": "",
        "gmail_app_password": "",
        "sendgrid_api_key": "",
        "mailtrap_user": "",
        "mailtrap_pass": "",
        "mailtrap_api_token": "",
        "mailtrap_inbox_id": "",
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)


class TestProviderResolution:
    def test_simulation_default(self):
        assert resolve_email_config(_settings()).mode == SIMULATION

    def test_gmail(self):
        cfg = resolve_email_config(
            _settings(email_provider="gmail", gmail_user="ops@gmail.com", gmail_app_password="pw")
        )
        assert (cfg.mode, cfg.host, cfg.port, cfg.username) == (SMTP, "smtp.gmail.com", 587, "ops@gmail.com")

    def test_gmail_without_credentials_falls_back(self):
        assert resolve_email_config(_settings(email_provider="gmail")).mode == SIMULATION

    def test_sendgrid_uses_apikey_user(self):
        cfg = resolve_email_config(_settings(email_provider="sendgrid", sendgrid_api_key="SG.x"))
        assert (cfg.host, cfg.username, cfg.password) == ("smtp.sendgrid.net", "apikey", "SG.x")

    def test_mailtrap_token_and_inbox_uses_sandbox(self):
        cfg = resolve_email_config(
            _settings(email_provider="mailtrap", mailtrap_api_token="tok", mailtrap_inbox_id="42",
                      mailtrap_user="u", mailtrap_pass="p")
        )
        assert cfg.mode == MAILTRAP_SANDBOX_API
        assert cfg.api_url == "https://sandbox.api.mailtrap.io/api/send/42"

    def test_mailtrap_token_only_uses_send_api(self):
        cfg = resolve_email_config(_settings(email_provider="mailtrap", mailtrap_api_token="tok"))
        assert cfg.mode == MAILTRAP_SEND_API
        assert cfg.api_url == "https://send.api.mailtrap.io/api/send"

    def test_mailtrap_smtp(self):
        cfg = resolve_email_config(_settings(email_provider="mailtrap", mailtrap_user="u", mailtrap_pass="p"))
        assert (cfg.mode, cfg.host) == (SMTP, "sandbox.smtp.mailtrap.io")

    def test_mailtrap_without_credentials_falls_back(self):
        assert resolve_email_config(_settings(email_provider="mailtrap")).mode == SIMULATION

    def test_unknown_provider(self):
        assert resolve_email_config(_settings(email_provider="carrier-pigeon")).mode == SIMULATION


class TestRecipients:
    def test_inspection_types_include_inspector(self):
        roles = [r.role for r in default_recipients("ANNUAL")]
        assert roles == ["MECHANIC", "SUPERVISOR", "PARTS_MANAGER", "INSPECTOR", "PILOT"]

    def test_other_types_skip_inspector(self):
        roles = [r.role for r in default_recipients("A_CHECK")]
        assert roles == ["MECHANIC", "SUPERVISOR", "PARTS_MANAGER", "PILOT"]


class TestRendering:
    def test_subject_and_role_section(self, email_data):
        content = render_maintenance_email(email_data, MECHANIC, "http://dash.local/")

        assert content.subject == "SCHEDULED MAINTENANCE: N123AB - 100_HOUR"
        assert "Mechanic Responsibilities" in content.html
        assert "http://dash.local/schedule" in content.html
        assert "$4,000" in content.html
        assert "MECHANIC RESPONSIBILITIES" in content.text

    def test_html_escapes_but_text_does_not(self, email_data):
        content = render_maintenance_email(email_data, MECHANIC, "http://dash.local")
        assert "Fuel &lt;low&gt; &amp; check" in content.html
        assert "Fuel <low> & check" in content.text

    def test_generic_role_section(self, email_data):
        parts = EmailRecipient("Sarah Johnson", "sarah@example.com", "PARTS_MANAGER")
        content = render_maintenance_email(email_data, parts, "http://dash.local")
        assert "Your Role in This Maintenance" in content.html


class TestDispatcher:
    async def test_all_sent(self, email_data):
        transport = RecordingTransport()
        service = MaintenanceEmailService(transport=transport, dashboard_url="http://dash.local")
        recipients = default_recipients("100_HOUR")

        summary = await service.send_maintenance_notification_emails(email_data, recipients)

        assert summary.success is True
        assert summary.sent_emails == len(recipients)
        assert summary.failures == []
        # sequential, in recipient order, one fresh id per send
        assert [s[0].email for s in transport.sent] == [r.email for r in recipients]
        assert len({s[2] for s in transport.sent}) == len(recipients)
        assert transport.sent[0][3] == {"X-Aircraft": "N123AB", "X-Maintenance-Type": "100_HOUR"}

    async def test_failures_collected_per_recipient(self, email_data):
        recipients = default_recipients("A_CHECK")
        transport = RecordingTransport(
            fail_for={recipients[1].email},
            raise_for={recipients[2].email},
        )
        service = MaintenanceEmailService(transport=transport, dashboard_url="http://dash.local")

        summary = await service.send_maintenance_notification_emails(email_data, recipients)

        assert summary.success is False
        assert summary.sent_emails == 2
        assert summary.failures == [
            "Failed to send to Tom Anderson: mailbox unavailable",
            "Exception sending to Sarah Johnson: connection reset",
        ]
        assert summary.sent_emails + len(summary.failures) == len(recipients)
        assert len(summary.results) == len(recipients)


def test_message_id_format():
    assert re.fullmatch(r"msg-\d{13}-[a-z0-9]{9}", new_message_id())
    assert new_message_id() != new_message_id()


class TestSimulatedTransport:
    async def test_success(self, email_data):
        transport = SimulatedTransport(rng=random.Random(1), failure_rate=0, min_delay_ms=0, max_delay_ms=0)
        content = render_maintenance_email(email_data, MECHANIC, "http://dash.local")
        result = await transport.send(MECHANIC, content, "msg-1")
        assert result.success and result.message_id == "msg-1"

    async def test_forced_failure(self, email_data):
        transport = SimulatedTransport(rng=random.Random(1), failure_rate=1.0, min_delay_ms=0, max_delay_ms=0)
        content = render_maintenance_email(email_data, MECHANIC, "http://dash.local")
        result = await transport.send(MECHANIC, content, "msg-1")
        assert result.success is False
        assert result.error == "SMTP connection timeout"


def test_smtp_message_is_multipart_alternative(email_data):
    cfg = EmailProviderConfig(
        provider="gmail", mode=SMTP, from_email="ops@gmail.com", from_name="Gander Ops",
        host="smtp.gmail.com", username="ops@gmail.com", password="pw",
    )
    content = render_maintenance_email(email_data, MECHANIC, "http://dash.local")
    msg = SMTPTransport(cfg).build_message(MECHANIC, content, "msg-9", {"X-Aircraft": "N123AB"})

    assert msg.get_content_type() == "multipart/alternative"
    assert [p.get_content_type() for p in msg.get_payload()] == ["text/plain", "text/html"]
    assert msg["To"] == "John Smith <john.smith@ganderaviation.com>"
    assert msg["X-Aircraft"] == "N123AB"


class TestMailtrapTransport:
    def _config(self, mode, inbox_id=None):
        return EmailProviderConfig(
            provider="mailtrap", mode=mode, from_email="noreply@ganderaviation.com",
            from_name="Gander", api_token="tok", inbox_id=inbox_id,
        )

    async def test_sandbox_request(self, email_data):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["headers"] = request.headers
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "message_ids": ["mt-123"]})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = MailtrapTransport(self._config(MAILTRAP_SANDBOX_API, "42"), client=client)
        content = render_maintenance_email(email_data, MECHANIC, "http://dash.local")

        result = await transport.send(MECHANIC, content, "msg-1", {"X-Aircraft": "N123AB"})
        await transport.close()

        assert result.success and result.message_id == "mt-123"
        assert captured["url"] == "https://sandbox.api.mailtrap.io/api/send/42"
        assert captured["headers"]["Api-Token"] == "tok"
        body = captured["body"]
        assert body["to"] == [{"email": MECHANIC.email, "name": MECHANIC.name}]
        assert body["headers"] == {"X-Message-ID": "msg-1", "X-Aircraft": "N123AB"}
        assert body["subject"] == content.subject

    async def test_send_api_uses_bearer(self, email_data):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"success": True})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = MailtrapTransport(self._config(MAILTRAP_SEND_API), client=client)
        content = render_maintenance_email(email_data, MECHANIC, "http://dash.local")

        result = await transport.send(MECHANIC, content, "msg-2")

        assert seen["auth"] == "Bearer tok"
        assert result.message_id == "msg-2"

    async def test_http_error_is_a_failed_result(self, email_data):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"errors": ["Unauthorized"]}))
        )
        transport = MailtrapTransport(self._config(MAILTRAP_SEND_API), client=client)
        content = render_maintenance_email(email_data, MECHANIC, "http://dash.local")

        result = await transport.send(MECHANIC, content, "msg-3")

        assert result.success is False
        assert "401" in result.error
