"""Workflow service: materializes approved recommendations and tracks their progress.

On approval builds the WorkflowBundle (assignments + notification records,
calendar event, resource bookings, work order, compliance logs) and the
ActiveWorkflow that the dashboard tracks. Status updates and the periodic
reminder sweep mutate the ActiveWorkflow in place.
"""

import logging
import time
from datetime import datetime, timedelta, timezone

from gander.config import settings
from gander.data import maintenance_checklists
from gander.models.maintenance import Recommendation
from gander.models.workflow import (
    WORKFLOW_STATUSES,
    ActiveWorkflow,
    CalendarEvent,
    ComplianceLog,
    NotificationRecord,
    ResourceBooking,
    TaskAssignment,
    WorkflowBundle,
    WorkOrder,
)
from gander.services.audit_trail import AuditTrail, audit_trail
from gander.services.errors import ConflictError, NotFoundError
from gander.services.recommendation_store import RecommendationStore, recommendation_store

logger = logging.getLogger(__name__)

AUTOMATED_ACTIONS = 5
COMPLETION_HOURS = 48
WORKFLOW_SYSTEM = "Agentic Workflow System"
SCHEDULER = "Maintenance Scheduler"

MECHANIC_ROTATION = ("John Smith", "Mike Wilson", "Sarah Rodriguez")
HANGAR_ROTATION = ("A", "B", "C")
SUPERVISOR = "Tom Anderson"
INSPECTOR = "David Chen"

CURRENT_TASKS = {
    "INITIATED": "Setting up work area and gathering tools",
    "IN_PROGRESS": "Performing {maintenance_type} inspection procedures",
    "AWAITING_PARTS": "Waiting for parts delivery - Oil filter and spark plugs",
    "INSPECTION": "Final quality inspection and documentation",
    "COMPLETED": "Maintenance complete - aircraft returned to service",
    "DELAYED": "Resolving technical issue - Awaiting manufacturer guidance",
}

NEXT_MILESTONES = {
    "INITIATED": "Begin primary inspection procedures",
    "IN_PROGRESS": "Complete systems testing",
    "AWAITING_PARTS": "Resume work upon parts arrival",
    "INSPECTION": "Final sign-off and aircraft release",
    "COMPLETED": "Return to service documentation filed",
    "DELAYED": "Technical issue resolution",
}

REQUIRED_EQUIPMENT = {
    "A_CHECK": ["Basic Tool Kit", "Multimeter", "Torque Wrench"],
    "C_CHECK": ["Comprehensive Tool Kit", "Lift Equipment", "Borescope", "Pressure Test Kit"],
    "100_HOUR": ["Engine Tools", "Oil Analysis Kit", "Compression Tester"],
    "ANNUAL": ["Full Inspection Kit", "NDT Equipment", "Calibration Tools"],
    "PROGRESSIVE": ["Progressive Kit", "Documentation System"],
}

REQUIRED_PARTS = {
    "A_CHECK": ["Oil Filter", "Hydraulic Fluid"],
    "B_CHECK": ["Oil Filter", "Spark Plugs", "Hydraulic Fluid"],
    "C_CHECK": ["Oil Filter", "Spark Plugs", "Brake Pads", "Hydraulic Fluid"],
    "100_HOUR": ["Oil Filter", "Spark Plugs"],
    "ANNUAL": ["Oil Filter", "Spark Plugs", "Brake Pads"],
}


def current_task(status: str, maintenance_type: str) -> str:
    return CURRENT_TASKS.get(status, "Unknown task").format(maintenance_type=maintenance_type)


def next_milestone(status: str) -> str:
    return NEXT_MILESTONES.get(status, "Continue work")


def required_equipment(maintenance_type: str) -> list[str]:
    return list(REQUIRED_EQUIPMENT.get(maintenance_type, ["Standard Tool Kit"]))


class WorkflowService:
    """Builds and tracks maintenance workflows."""

    def __init__(self, store: RecommendationStore | None = None, audit: AuditTrail | None = None):
        self.store = store or recommendation_store
        self.audit = audit or audit_trail

    # ---- Materialization ----

    def materialize(
        self,
        recommendation: Recommendation,
        approved_by: str,
        now: datetime | None = None,
    ) -> tuple[ActiveWorkflow, WorkflowBundle]:
        """Create the workflow bundle and ActiveWorkflow for an approved recommendation.

        Raises ConflictError if a workflow already exists for the recommendation.
        """
        now = now or datetime.now(timezone.utc)
        workflow_id = f"workflow-{recommendation.id}"
        if self.store.get_workflow(workflow_id):
            raise ConflictError(f"Workflow {workflow_id} already exists")

        index = self.store.workflow_count
        hangar = f"Hangar {HANGAR_ROTATION[index % 3]} - Bay {(index % 4) + 1}"
        start = now + timedelta(hours=24)
        end = start + timedelta(hours=8)
        estimated_completion = now + timedelta(hours=COMPLETION_HOURS)

        assignments = self._task_assignments(recommendation, hangar, now)
        calendar_event = self._calendar_event(recommendation, hangar, assignments, start, end)
        bookings = self._resource_bookings(recommendation, hangar, start, end)
        work_order = self._work_order(recommendation, approved_by, start, end, now)
        compliance_logs = self._compliance_logs(recommendation, now)

        bundle = WorkflowBundle(
            workflow_id=workflow_id,
            assignments=assignments,
            calendar_event=calendar_event,
            resource_bookings=bookings,
            work_order=work_order,
            compliance_logs=compliance_logs,
            actions_completed=AUTOMATED_ACTIONS,
            estimated_completion=estimated_completion,
        )

        checklist_tasks = maintenance_checklists.get_tasks(recommendation.maintenance_type)
        workflow = ActiveWorkflow(
            id=workflow_id,
            recommendation_id=recommendation.id,
            aircraft_id=recommendation.aircraft_id,
            tail_number=recommendation.tail_number,
            maintenance_type=recommendation.maintenance_type,
            status="INITIATED",
            tasks_completed=0,
            total_tasks=len(checklist_tasks) or 1,
            current_task=current_task("INITIATED", recommendation.maintenance_type),
            next_milestone=next_milestone("INITIATED"),
            mechanic=MECHANIC_ROTATION[index % 3],
            supervisor=SUPERVISOR,
            hangar=hangar,
            equipment=required_equipment(recommendation.maintenance_type),
            parts=list(REQUIRED_PARTS.get(recommendation.maintenance_type, ["Oil Filter"])),
            started=now,
            estimated_completion=estimated_completion,
            last_sent=now,
            next_reminder=now + timedelta(hours=settings.reminder_interval_hours),
            bundle=bundle,
        )
        self.store.add_workflow(workflow)

        self.audit.log(
            "AUTOMATED_SEQUENCE_COMPLETED",
            "SYSTEM",
            f"Completed automated sequence for workflow {workflow_id}",
            {
                "workflowId": workflow_id,
                "recommendationId": recommendation.id,
                "actionsCompleted": AUTOMATED_ACTIONS,
                "workOrderId": work_order.id,
                "calendarEventId": calendar_event.id,
            },
            compliance_relevant=True,
        )
        logger.info(
            f"Workflow {workflow_id} materialized for {recommendation.tail_number} "
            f"{recommendation.maintenance_type} ({work_order.work_order_number})"
        )
        return workflow, bundle

    def _task_assignments(
        self, recommendation: Recommendation, hangar: str, now: datetime
    ) -> list[TaskAssignment]:
        rec_id = recommendation.id
        assignments = [
            TaskAssignment(
                id=f"assign-{rec_id}-1",
                recommendation_id=rec_id,
                assignee_type="MECHANIC",
                assignee_name="John Smith",
                assignee_email="john.smith@ganderaviation.com",
                assignee_phone="+1-555-0123",
                task_description=f"Lead {recommendation.maintenance_type} maintenance inspection",
                scheduled_start=now + timedelta(hours=24),
                estimated_duration=recommendation.estimated_downtime,
                location=hangar,
                special_instructions="Review AD compliance checklist before starting",
                required_tools=["Inspection Tools", "Torque Wrench", "Multimeter"],
                sign_off_required=True,
            ),
            TaskAssignment(
                id=f"assign-{rec_id}-2",
                recommendation_id=rec_id,
                assignee_type="PARTS_MANAGER",
                assignee_name="Sarah Johnson",
                assignee_email="sarah.johnson@ganderaviation.com",
                task_description="Prepare required parts and consumables",
                scheduled_start=now + timedelta(hours=2),
                estimated_duration=2,
                location="Parts Department",
                required_tools=["Parts Catalog"],
                required_parts=list(REQUIRED_PARTS.get(recommendation.maintenance_type, ["Oil Filter"])),
                sign_off_required=False,
            ),
        ]
        for assignment in assignments:
            assignment.notifications_sent = self._notification_records(assignment, now)
        return assignments

    def _notification_records(self, assignment: TaskAssignment, now: datetime) -> list[NotificationRecord]:
        records = [
            NotificationRecord(
                id=f"notif-{assignment.id}",
                type="EMAIL",
                recipient=assignment.assignee_email,
                subject=f"Maintenance Task Assignment - {assignment.task_description}",
                content=_assignment_content(assignment),
                sent_at=now,
            )
        ]
        if assignment.assignee_phone:
            records.append(
                NotificationRecord(
                    id=f"notif-sms-{assignment.id}",
                    type="SMS",
                    recipient=assignment.assignee_phone,
                    subject="Maintenance Task",
                    content=(
                        f"Task assigned: {assignment.task_description}. "
                        f"Start: {assignment.scheduled_start.date().isoformat()}"
                    ),
                    sent_at=now,
                )
            )
        return records

    def _calendar_event(
        self,
        recommendation: Recommendation,
        hangar: str,
        assignments: list[TaskAssignment],
        start: datetime,
        end: datetime,
    ) -> CalendarEvent:
        return CalendarEvent(
            id=f"cal-{recommendation.id}",
            title=f"Aircraft Maintenance - {recommendation.maintenance_type} - {recommendation.tail_number}",
            description="Scheduled maintenance inspection",
            start=start,
            end=end,
            location=hangar,
            attendees=[a.assignee_email for a in assignments],
            resources=[hangar.split(" - ")[0], "Maintenance Tools", "Ground Power Unit"],
            event_id=f"maint-{recommendation.id}",
        )

    def _resource_bookings(
        self, recommendation: Recommendation, hangar: str, start: datetime, end: datetime
    ) -> list[ResourceBooking]:
        return [
            ResourceBooking(
                id=f"book-{recommendation.id}-1",
                resource_type="HANGAR",
                resource_name=hangar,
                booked_from=start,
                booked_until=end,
                booked_by=SCHEDULER,
                recommendation_id=recommendation.id,
            ),
            ResourceBooking(
                id=f"book-{recommendation.id}-2",
                resource_type="GSE",
                resource_name="Ground Power Unit #3",
                booked_from=start,
                booked_until=end,
                booked_by=SCHEDULER,
                recommendation_id=recommendation.id,
            ),
        ]

    def _work_order(
        self,
        recommendation: Recommendation,
        approved_by: str,
        start: datetime,
        end: datetime,
        now: datetime,
    ) -> WorkOrder:
        maintenance_type = recommendation.maintenance_type
        checklist = maintenance_checklists.get_checklist(maintenance_type)
        references = (
            list(checklist["complianceRequirements"])
            if checklist
            else list(recommendation.compliance_requirements) or ["FAR 91.409", "FAR 43.13"]
        )
        work_order = WorkOrder(
            id=f"wo-{recommendation.id}",
            recommendation_id=recommendation.id,
            work_order_number=f"WO-{now.year}-{str(int(time.time() * 1000))[-6:]}",
            title=f"{maintenance_type} Inspection - Scheduled Maintenance",
            description=(
                checklist["description"]
                if checklist
                else f"{maintenance_type} maintenance per FAA requirements"
            ),
            aircraft_id=recommendation.aircraft_id,
            maintenance_type=maintenance_type,
            tasks=maintenance_checklists.get_tasks(maintenance_type),
            assigned_mechanic="John Smith",
            assigned_inspector=INSPECTOR,
            scheduled_start=start,
            estimated_completion=end,
            compliance_references=references,
        )
        work_order.audit_trail.append(
            self.audit.log(
                "WORK_ORDER_CREATED",
                approved_by,
                f"Work order created from approved recommendation {recommendation.id}",
                {"workOrderNumber": work_order.work_order_number},
                compliance_relevant=True,
            )
        )
        return work_order

    def _compliance_logs(self, recommendation: Recommendation, now: datetime) -> list[ComplianceLog]:
        return [
            ComplianceLog(
                id=f"comp-{recommendation.id}-1",
                recommendation_id=recommendation.id,
                regulation_type="FAR_135",
                regulation="FAR 135.411",
                description="Part 135 maintenance schedule compliance",
                compliance_action=(
                    f"Scheduled {recommendation.maintenance_type} inspection "
                    "per approved maintenance program"
                ),
                logged_at=now,
                logged_by=WORKFLOW_SYSTEM,
            ),
            ComplianceLog(
                id=f"comp-{recommendation.id}-2",
                recommendation_id=recommendation.id,
                regulation_type="FAR_43",
                regulation="FAR 43.13",
                description="Maintenance performance standards",
                compliance_action="Work order created with qualified personnel assignments",
                logged_at=now,
                logged_by=WORKFLOW_SYSTEM,
            ),
        ]

    # ---- Tracking ----

    def list_workflows(self, status: str | None = None, aircraft_id: str | None = None) -> list[ActiveWorkflow]:
        workflows = self.store.list_workflows()
        if status:
            workflows = [w for w in workflows if w.status == status]
        if aircraft_id:
            workflows = [w for w in workflows if w.aircraft_id == aircraft_id]
        return workflows

    def workflow_status(self, recommendation_id: str) -> dict:
        """Progress summary plus the materialized bundle."""
        workflow = self.store.workflow_for_recommendation(recommendation_id)
        if not workflow:
            raise NotFoundError(f"No workflow found for recommendation {recommendation_id}")

        return {
            "workflowId": workflow.id,
            "recommendationId": recommendation_id,
            "status": workflow.status,
            "completedActions": workflow.bundle.actions_completed if workflow.bundle else 0,
            "totalActions": AUTOMATED_ACTIONS,
            "nextAction": workflow.next_milestone,
            "workflow": workflow.to_dict(),
            "bundle": workflow.bundle.to_dict() if workflow.bundle else None,
        }

    def update_status(
        self,
        workflow_id: str,
        status: str,
        updated_by: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> tuple[str, ActiveWorkflow]:
        """Set a new status. Returns (old_status, workflow)."""
        if status not in WORKFLOW_STATUSES:
            raise ValueError(
                f"Invalid workflow status '{status}'. Use one of: {', '.join(WORKFLOW_STATUSES)}"
            )
        workflow = self.store.get_workflow(workflow_id)
        if not workflow:
            raise NotFoundError("Workflow not found")

        now = now or datetime.now(timezone.utc)
        old_status = workflow.status
        workflow.status = status
        workflow.current_task = current_task(status, workflow.maintenance_type)
        workflow.next_milestone = next_milestone(status)
        workflow.last_sent = now
        workflow.next_reminder = now + timedelta(hours=settings.reminder_interval_hours)

        if status == "INSPECTION":
            workflow.inspector = INSPECTOR
        elif status == "DELAYED":
            workflow.escalation_level = max(workflow.escalation_level, 1)
        elif status == "COMPLETED":
            workflow.actual_completion = now
            workflow.tasks_completed = workflow.total_tasks

        changes = {"status": {"before": old_status, "after": status}}
        if notes:
            changes["notes"] = notes
        self.audit.log(
            "WORKFLOW_STATUS_UPDATED",
            updated_by or "SYSTEM",
            f"Workflow {workflow_id} status updated from {old_status} to {status}",
            changes,
            compliance_relevant=True,
        )
        logger.info(f"Workflow {workflow_id}: {old_status} -> {status}")
        return old_status, workflow

    def sweep_reminders(self, now: datetime | None = None) -> int:
        """Record a reminder for every open workflow whose next reminder is due."""
        now = now or datetime.now(timezone.utc)
        sent = 0
        for workflow in self.store.list_workflows():
            if workflow.status == "COMPLETED" or workflow.next_reminder > now:
                continue
            self.audit.log(
                "REMINDER_SENT",
                "SYSTEM",
                f"Sent reminder for recommendation {workflow.recommendation_id}",
                {"workflowId": workflow.id, "nextMilestone": workflow.next_milestone},
            )
            workflow.last_sent = now
            workflow.next_reminder = now + timedelta(hours=settings.reminder_interval_hours)
            sent += 1
        if sent:
            logger.info(f"Reminder sweep: {sent} reminders recorded")
        return sent


def _assignment_content(assignment: TaskAssignment) -> str:
    lines = [
        f"Dear {assignment.assignee_name},",
        "",
        "You have been assigned a maintenance task:",
        "",
        f"Task: {assignment.task_description}",
        f"Scheduled Start: {assignment.scheduled_start.strftime('%Y-%m-%d %H:%M UTC')}",
        f"Duration: {assignment.estimated_duration} hours",
        f"Location: {assignment.location}",
        "",
        f"Required Tools: {', '.join(assignment.required_tools)}",
    ]
    if assignment.required_parts:
        lines.append(f"Required Parts: {', '.join(assignment.required_parts)}")
    if assignment.special_instructions:
        lines.append(f"Special Instructions: {assignment.special_instructions}")
    lines += ["", "Please confirm receipt of this assignment.", "", "Best regards,", "Gander Maintenance System"]
    return "\n".join(lines)


workflow_service = WorkflowService()
