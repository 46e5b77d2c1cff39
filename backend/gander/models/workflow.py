"""Workflow records built when a recommendation is approved."""

from dataclasses import dataclass, field
from datetime import datetime

WORKFLOW_STATUSES = (
    "INITIATED",
    "IN_PROGRESS",
    "AWAITING_PARTS",
    "INSPECTION",
    "COMPLETED",
    "DELAYED",
)

# Statuses counted in the active-workflows histogram
HISTOGRAM_STATUSES = ("INITIATED", "IN_PROGRESS", "AWAITING_PARTS", "INSPECTION", "DELAYED")


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class AuditTrailEntry:
    id: str
    timestamp: datetime
    action: str
    actor: str
    actor_type: str                 # USER | SYSTEM | AI
    details: str
    data_changes: dict | None = None
    compliance_relevant: bool = False

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "timestamp": _iso(self.timestamp),
            "action": self.action,
            "actor": self.actor,
            "actorType": self.actor_type,
            "details": self.details,
            "complianceRelevant": self.compliance_relevant,
        }
        if self.data_changes:
            d["dataChanges"] = self.data_changes
        return d


@dataclass
class NotificationRecord:
    id: str
    type: str                       # EMAIL | SMS
    recipient: str
    subject: str
    content: str
    sent_at: datetime
    status: str = "SENT"
    retry_count: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "recipient": self.recipient,
            "subject": self.subject,
            "content": self.content,
            "sentAt": _iso(self.sent_at),
            "status": self.status,
            "retryCount": self.retry_count,
        }


@dataclass
class TaskAssignment:
    id: str
    recommendation_id: str
    assignee_type: str
    assignee_name: str
    assignee_email: str
    task_description: str
    scheduled_start: datetime
    estimated_duration: float
    location: str
    required_tools: list[str]
    sign_off_required: bool
    assignee_phone: str | None = None
    special_instructions: str | None = None
    required_parts: list[str] | None = None
    status: str = "ASSIGNED"
    notifications_sent: list[NotificationRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "recommendationId": self.recommendation_id,
            "assigneeType": self.assignee_type,
            "assigneeName": self.assignee_name,
            "assigneeEmail": self.assignee_email,
            "assigneePhone": self.assignee_phone,
            "taskDescription": self.task_description,
            "scheduledStart": _iso(self.scheduled_start),
            "estimatedDuration": self.estimated_duration,
            "location": self.location,
            "specialInstructions": self.special_instructions,
            "requiredTools": self.required_tools,
            "requiredParts": self.required_parts,
            "status": self.status,
            "notificationsSent": [n.to_dict() for n in self.notifications_sent],
            "signOffRequired": self.sign_off_required,
        }


@dataclass
class CalendarEvent:
    id: str
    title: str
    description: str
    start: datetime
    end: datetime
    location: str
    attendees: list[str]
    resources: list[str]
    event_id: str
    calendar_system: str = "INTERNAL"
    reminders_sent: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start": _iso(self.start),
            "end": _iso(self.end),
            "location": self.location,
            "attendees": self.attendees,
            "resources": self.resources,
            "calendarSystem": self.calendar_system,
            "eventId": self.event_id,
            "remindersSent": self.reminders_sent,
        }


@dataclass
class ResourceBooking:
    id: str
    resource_type: str              # HANGAR | TOOLS | GSE | LIFT
    resource_name: str
    booked_from: datetime
    booked_until: datetime
    booked_by: str
    recommendation_id: str
    status: str = "RESERVED"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "resourceType": self.resource_type,
            "resourceName": self.resource_name,
            "bookedFrom": _iso(self.booked_from),
            "bookedUntil": _iso(self.booked_until),
            "bookedBy": self.booked_by,
            "recommendationId": self.recommendation_id,
            "status": self.status,
        }


@dataclass
class WorkOrder:
    id: str
    recommendation_id: str
    work_order_number: str
    title: str
    description: str
    aircraft_id: str
    maintenance_type: str
    tasks: list[dict]
    assigned_mechanic: str
    scheduled_start: datetime
    estimated_completion: datetime
    compliance_references: list[str]
    assigned_inspector: str | None = None
    status: str = "CREATED"
    audit_trail: list[AuditTrailEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "recommendationId": self.recommendation_id,
            "workOrderNumber": self.work_order_number,
            "title": self.title,
            "description": self.description,
            "aircraftId": self.aircraft_id,
            "maintenanceType": self.maintenance_type,
            "tasks": self.tasks,
            "assignedMechanic": self.assigned_mechanic,
            "assignedInspector": self.assigned_inspector,
            "scheduledStart": _iso(self.scheduled_start),
            "estimatedCompletion": _iso(self.estimated_completion),
            "status": self.status,
            "complianceReferences": self.compliance_references,
            "auditTrail": [e.to_dict() for e in self.audit_trail],
        }


@dataclass
class ComplianceLog:
    id: str
    recommendation_id: str
    regulation_type: str            # FAR_135 | FAR_91 | FAR_43 | AD | SB
    regulation: str
    description: str
    compliance_action: str
    logged_at: datetime
    logged_by: str
    documentation_links: list[str] = field(default_factory=list)
    audit_ready: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "recommendationId": self.recommendation_id,
            "regulationType": self.regulation_type,
            "regulation": self.regulation,
            "description": self.description,
            "complianceAction": self.compliance_action,
            "loggedAt": _iso(self.logged_at),
            "loggedBy": self.logged_by,
            "documentationLinks": self.documentation_links,
            "auditReady": self.audit_ready,
        }


@dataclass
class WorkflowBundle:
    """Everything materialized for one approval."""

    workflow_id: str
    assignments: list[TaskAssignment]
    calendar_event: CalendarEvent
    resource_bookings: list[ResourceBooking]
    work_order: WorkOrder
    compliance_logs: list[ComplianceLog]
    actions_completed: int
    estimated_completion: datetime

    def to_dict(self) -> dict:
        return {
            "workflowId": self.workflow_id,
            "assignments": [a.to_dict() for a in self.assignments],
            "calendarEvent": self.calendar_event.to_dict(),
            "resourceBookings": [b.to_dict() for b in self.resource_bookings],
            "workOrder": self.work_order.to_dict(),
            "complianceLogs": [c.to_dict() for c in self.compliance_logs],
            "actionsCompleted": self.actions_completed,
            "estimatedCompletion": _iso(self.estimated_completion),
        }


@dataclass
class ActiveWorkflow:
    """Execution tracking for an approved recommendation."""

    id: str
    recommendation_id: str
    aircraft_id: str
    tail_number: str
    maintenance_type: str
    status: str
    tasks_completed: int
    total_tasks: int
    current_task: str
    next_milestone: str
    mechanic: str
    supervisor: str
    hangar: str
    equipment: list[str]
    parts: list[str]
    started: datetime
    estimated_completion: datetime
    last_sent: datetime
    next_reminder: datetime
    inspector: str | None = None
    actual_completion: datetime | None = None
    escalation_level: int = 0
    bundle: WorkflowBundle | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "recommendationId": self.recommendation_id,
            "aircraftId": self.aircraft_id,
            "tailNumber": self.tail_number,
            "maintenanceType": self.maintenance_type,
            "status": self.status,
            "progress": {
                "tasksCompleted": self.tasks_completed,
                "totalTasks": self.total_tasks,
                "currentTask": self.current_task,
                "nextMilestone": self.next_milestone,
                "estimatedCompletion": _iso(self.estimated_completion),
            },
            "assignments": {
                "mechanic": self.mechanic,
                "inspector": self.inspector,
                "supervisor": self.supervisor,
            },
            "resources": {
                "hangar": self.hangar,
                "equipment": self.equipment,
                "parts": self.parts,
            },
            "timeline": {
                "started": _iso(self.started),
                "estimatedCompletion": _iso(self.estimated_completion),
                "actualCompletion": _iso(self.actual_completion),
            },
            "notifications": {
                "lastSent": _iso(self.last_sent),
                "nextReminder": _iso(self.next_reminder),
                "escalationLevel": self.escalation_level,
            },
        }
