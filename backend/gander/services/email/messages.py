"""Email data structures shared by templates, transports and the dispatcher."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class EmailRecipient:
    name: str
    email: str
    role: str

    def to_dict(self) -> dict:
        return {"name": self.name, "email": self.email, "role": self.role}


@dataclass
class MaintenanceEmailData:
    """Everything a maintenance notification renders."""

    recommendation_id: str
    workflow_id: str
    tail_number: str
    make: str
    model: str
    total_time: float
    maintenance_type: str
    scheduled_date: datetime
    estimated_duration: float
    estimated_cost: float
    location: str
    mechanic: str
    supervisor: str
    approved_by: str
    approved_at: datetime
    inspector: str | None = None
    equipment: list[str] = field(default_factory=list)
    parts: list[str] = field(default_factory=list)
    regulations: list[str] = field(default_factory=list)
    required_documentation: list[str] = field(default_factory=list)
    approval_notes: str | None = None


@dataclass
class EmailContent:
    subject: str
    html: str
    text: str


@dataclass
class EmailResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass
class DispatchSummary:
    success: bool
    sent_emails: int
    failures: list[str] = field(default_factory=list)
    results: list[EmailResult] = field(default_factory=list)
