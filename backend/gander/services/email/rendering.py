"""Jinja2 rendering for maintenance notification emails."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from gander.services.email.messages import EmailContent, EmailRecipient, MaintenanceEmailData

TEMPLATES_DIR = Path(__file__).parent / "templates"

ROLE_SECTIONS: dict[str, dict] = {
    "MECHANIC": {
        "title": "Mechanic Responsibilities",
        "items": [
            "Review maintenance manual procedures",
            "Perform visual and operational inspections",
            "Complete all required maintenance tasks",
            "Document findings and corrective actions",
            "Coordinate with inspector for sign-offs",
            "Ensure all tools and equipment are serviceable",
        ],
        "alert_label": "Safety First",
        "alert": "Follow all safety protocols and use proper PPE during maintenance activities.",
    },
    "INSPECTOR": {
        "title": "Inspector Responsibilities",
        "items": [
            "Conduct independent inspection of completed work",
            "Verify compliance with maintenance manual requirements",
            "Review all maintenance documentation",
            "Perform operational checks as required",
            "Sign off on maintenance record entries",
            "Ensure return to service requirements are met",
        ],
        "alert_label": "Inspection Authority",
        "alert": "You have the authority to reject any work that does not meet standards.",
    },
    "SUPERVISOR": {
        "title": "Supervisor Responsibilities",
        "items": [
            "Coordinate team assignments and resources",
            "Monitor maintenance progress and timeline",
            "Ensure regulatory compliance throughout process",
            "Approve any deviations from standard procedures",
            "Coordinate with operations for scheduling",
            "Final review of all maintenance documentation",
        ],
        "alert_label": "Management Oversight",
        "alert": "You are responsible for overall maintenance operation coordination.",
    },
    "PILOT": {
        "title": "Pilot Information",
        "items": [
            "Aircraft will be out of service during maintenance",
            "Review any operational limitations after maintenance",
            "Participate in any required test flights",
            "Review maintenance log entries",
            "Coordinate with dispatch for schedule adjustments",
        ],
        "alert_label": "Flight Operations",
        "alert": "Aircraft is grounded until maintenance completion and return to service.",
    },
}

GENERIC_ROLE_SECTION = {
    "title": "Your Role in This Maintenance",
    "items": [],
    "summary": (
        "You have been assigned to support this maintenance activity. Please review the "
        "details above and coordinate with the maintenance team as needed."
    ),
}

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["money"] = lambda value: f"${value:,.0f}"
_env.filters["thousands"] = lambda value: f"{value:,.0f}"
_env.filters["when"] = lambda value: value.strftime("%Y-%m-%d %H:%M UTC") if value else "TBD"


def role_section(role: str) -> dict:
    return ROLE_SECTIONS.get(role, GENERIC_ROLE_SECTION)


def subject_for(data: MaintenanceEmailData) -> str:
    return f"SCHEDULED MAINTENANCE: {data.tail_number} - {data.maintenance_type}"


def render_maintenance_email(
    data: MaintenanceEmailData,
    recipient: EmailRecipient,
    dashboard_url: str,
) -> EmailContent:
    """Subject, HTML body and plain-text body for one recipient."""
    context = {
        "data": data,
        "recipient": recipient,
        "role_section": role_section(recipient.role),
        "dashboard_url": f"{dashboard_url.rstrip('/')}/schedule",
    }
    return EmailContent(
        subject=subject_for(data),
        html=_env.get_template("maintenance_notification.html").render(**context),
        text=_env.get_template("maintenance_notification.txt").render(**context).strip(),
    )
