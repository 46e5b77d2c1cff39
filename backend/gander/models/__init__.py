from gander.models.maintenance import Recommendation, TimeWindow
from gander.models.workflow import (
    ActiveWorkflow,
    AuditTrailEntry,
    CalendarEvent,
    ComplianceLog,
    NotificationRecord,
    ResourceBooking,
    TaskAssignment,
    WorkflowBundle,
    WorkOrder,
)

__all__ = [
    "ActiveWorkflow",
    "AuditTrailEntry",
    "CalendarEvent",
    "ComplianceLog",
    "NotificationRecord",
    "Recommendation",
    "ResourceBooking",
    "TaskAssignment",
    "TimeWindow",
    "WorkflowBundle",
    "WorkOrder",
]
