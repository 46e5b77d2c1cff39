"""Maintenance recommendation models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

MAINTENANCE_TYPES = (
    "A_CHECK",
    "B_CHECK",
    "C_CHECK",
    "100_HOUR",
    "ANNUAL",
    "PROGRESSIVE",
    "AD_COMPLIANCE",
)

URGENCY_LEVELS = ("LOW", "MEDIUM", "HIGH", "CRITICAL")

PENDING = "PENDING"
APPROVED = "APPROVED"
REJECTED = "REJECTED"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class TimeWindow:
    earliest: datetime
    latest: datetime
    optimal: datetime

    def to_dict(self) -> dict:
        return {
            "earliest": _iso(self.earliest),
            "latest": _iso(self.latest),
            "optimal": _iso(self.optimal),
        }


@dataclass
class Recommendation:
    """A proposed maintenance action awaiting an operator decision.

    Leaves PENDING at most once, via the approval gate.
    """

    id: str
    aircraft_id: str
    tail_number: str
    maintenance_type: str
    ai_confidence: float            # 0-1
    estimated_cost: float           # USD
    estimated_downtime: float       # hours
    urgency: str
    time_window: TimeWindow
    reasoning: list[str] = field(default_factory=list)
    risk_factors: list[str] = field(default_factory=list)
    compliance_requirements: list[str] = field(default_factory=list)
    required_personnel: list[str] = field(default_factory=list)
    status: str = PENDING
    approved_by: str | None = None
    approved_at: datetime | None = None
    approval_notes: str | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    workflow_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "aircraftId": self.aircraft_id,
            "tailNumber": self.tail_number,
            "maintenanceType": self.maintenance_type,
            "aiConfidence": self.ai_confidence,
            "estimatedCost": self.estimated_cost,
            "estimatedDowntime": self.estimated_downtime,
            "urgency": self.urgency,
            "reasoning": list(self.reasoning),
            "riskFactors": list(self.risk_factors),
            "complianceRequirements": list(self.compliance_requirements),
            "requiredPersonnel": list(self.required_personnel),
            "timeWindow": self.time_window.to_dict(),
            "status": self.status,
            "approvedBy": self.approved_by,
            "approvedAt": _iso(self.approved_at),
            "approvalNotes": self.approval_notes,
            "rejectedBy": self.rejected_by,
            "rejectedAt": _iso(self.rejected_at),
            "rejectionReason": self.rejection_reason,
            "workflowId": self.workflow_id,
            "createdAt": _iso(self.created_at),
        }
