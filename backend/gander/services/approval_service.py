"""Approval service: the operator's decision point for recommendations.

approve -> audit entry, workflow materialization, notification emails
reject  -> audit entry only

The PENDING check and the status change happen before the first await, so two
requests for the same recommendation on one event loop cannot both approve it.
"""

import logging
import time
from datetime import datetime, timezone

from gander.data import fleet
from gander.models.maintenance import (
    APPROVED,
    MAINTENANCE_TYPES,
    REJECTED,
    Recommendation,
    TimeWindow,
)
from gander.services.audit_trail import AuditTrail, audit_trail
from gander.services.email import (
    MaintenanceEmailData,
    MaintenanceEmailService,
    default_recipients,
    maintenance_email_service,
)
from gander.services.errors import ConflictError, NotFoundError
from gander.services.recommendation.config import recommendation_config
from gander.services.recommendation.generator import (
    RecommendationGenerator,
    build_fleet_inputs,
    recommendation_generator,
)
from gander.services.recommendation_store import RecommendationStore, recommendation_store
from gander.services.schedule_insights import optimization_insights
from gander.services.utilization_service import utilization_analysis
from gander.services.workflow_service import (
    AUTOMATED_ACTIONS,
    WorkflowService,
    workflow_service,
)

logger = logging.getLogger(__name__)

REGULATIONS = [
    "FAR Part 135 - Operating Requirements",
    "FAR Part 43 - Maintenance Requirements",
    "FAR Part 91.409 - Inspection Requirements",
]

REQUIRED_DOCUMENTATION = [
    "Maintenance Log Entry",
    "Work Order Completion",
    "Inspector Sign-off",
    "Return to Service Documentation",
]

WORKFLOW_ACTIONS = [
    "Task assignments created and notifications sent",
    "Calendar events scheduled and resources booked",
    "Work order generated with detailed checklists",
    "Compliance logs created for audit trail",
    "Pre-maintenance reminders scheduled",
    "Active workflow tracking initiated",
]


def parse_scheduled_date(value) -> datetime:
    """ISO-8601 date or datetime; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"Invalid scheduledDate '{value}', expected an ISO-8601 date")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ApprovalService:
    """Approval state machine for maintenance recommendations."""

    def __init__(
        self,
        store: RecommendationStore | None = None,
        workflows: WorkflowService | None = None,
        emails: MaintenanceEmailService | None = None,
        generator: RecommendationGenerator | None = None,
        audit: AuditTrail | None = None,
    ):
        self.store = store or recommendation_store
        self.workflows = workflows or workflow_service
        self.emails = emails or maintenance_email_service
        self.generator = generator or recommendation_generator
        self.audit = audit or audit_trail

    def _get(self, recommendation_id: str) -> Recommendation:
        recommendation = self.store.get(recommendation_id)
        if not recommendation:
            raise NotFoundError("Recommendation not found")
        return recommendation

    async def approve(
        self,
        recommendation_id: str,
        approved_by: str,
        approval_notes: str | None = None,
    ) -> dict:
        """Approve a PENDING recommendation and kick off its workflow.

        Raises NotFoundError for an unknown recommendation or aircraft and
        ConflictError when the recommendation was already decided or already
        has a workflow. Email problems never fail the approval.
        """
        recommendation = self._get(recommendation_id)
        aircraft = fleet.get_aircraft(recommendation.aircraft_id)
        if not aircraft:
            raise NotFoundError("Aircraft not found")
        if not recommendation.is_pending:
            raise ConflictError(
                f"Recommendation {recommendation_id} is already {recommendation.status}"
            )
        # A re-seeded recommendation can share its id with an earlier approval.
        if self.store.workflow_for_recommendation(recommendation.id):
            raise ConflictError(f"Workflow workflow-{recommendation.id} already exists")

        now = datetime.now(timezone.utc)
        recommendation.status = APPROVED
        recommendation.approved_by = approved_by
        recommendation.approved_at = now
        recommendation.approval_notes = approval_notes
        recommendation.workflow_id = f"workflow-{recommendation.id}"

        self.audit.log(
            "RECOMMENDATION_APPROVED",
            approved_by,
            f"Approved {recommendation.maintenance_type} recommendation for {recommendation.tail_number}",
            {"status": {"before": "PENDING", "after": APPROVED}, "notes": approval_notes},
            compliance_relevant=True,
        )

        workflow, bundle = self.workflows.materialize(recommendation, approved_by, now=now)
        workflow_result = {
            "success": True,
            "workflowId": workflow.id,
            "actionsCompleted": bundle.actions_completed,
            "estimatedCompletion": bundle.estimated_completion.isoformat(),
            "message": (
                f"Recommendation approved and {AUTOMATED_ACTIONS} automated actions completed "
                f"successfully."
            ),
            "bundle": bundle.to_dict(),
        }
        logger.info(f"Recommendation {recommendation_id} approved by {approved_by}")

        recipients = default_recipients(recommendation.maintenance_type)
        try:
            email_data = MaintenanceEmailData(
                recommendation_id=recommendation.id,
                workflow_id=workflow.id,
                tail_number=aircraft["tail_number"],
                make=aircraft["make"],
                model=aircraft["model"],
                total_time=aircraft["total_aircraft_time"],
                maintenance_type=recommendation.maintenance_type,
                scheduled_date=recommendation.time_window.optimal,
                estimated_duration=recommendation.estimated_downtime,
                estimated_cost=recommendation.estimated_cost,
                location=workflow.hangar,
                mechanic=workflow.mechanic,
                inspector=workflow.inspector,
                supervisor=workflow.supervisor,
                equipment=workflow.equipment,
                parts=workflow.parts,
                regulations=list(REGULATIONS),
                required_documentation=list(REQUIRED_DOCUMENTATION),
                approved_by=approved_by,
                approved_at=now,
                approval_notes=approval_notes,
            )
            summary = await self.emails.send_maintenance_notification_emails(email_data, recipients)
        except Exception as e:
            logger.error(f"Email notification error for {recommendation_id}: {e}")
            return {
                "success": True,
                "data": {
                    "recommendation": recommendation.to_dict(),
                    "workflow": workflow_result,
                    "activeWorkflow": workflow.to_dict(),
                    "emailNotifications": {
                        "sent": 0,
                        "recipients": [],
                        "failures": [f"Email service error: {e}"],
                        "success": False,
                    },
                    "automatedActions": WORKFLOW_ACTIONS
                    + ["Email notifications failed - manual notification required"],
                },
                "message": f"{workflow_result['message']} Warning: Email notifications failed.",
            }

        automated_actions = (
            WORKFLOW_ACTIONS
            + [f"Email notifications sent to {summary.sent_emails} personnel"]
            + [f"  - {r.name} ({r.role}) - {r.email}" for r in recipients]
        )
        if summary.failures:
            automated_actions.append(f"{len(summary.failures)} email failures")

        message = f"{workflow_result['message']} Email notifications sent to {summary.sent_emails} personnel"
        message += "." if summary.success else f" with {len(summary.failures)} failures."

        return {
            "success": True,
            "data": {
                "recommendation": recommendation.to_dict(),
                "workflow": workflow_result,
                "activeWorkflow": workflow.to_dict(),
                "emailNotifications": {
                    "sent": summary.sent_emails,
                    "recipients": [r.to_dict() for r in recipients],
                    "failures": summary.failures,
                    "success": summary.success,
                },
                "automatedActions": automated_actions,
            },
            "message": message,
        }

    def reject(
        self,
        recommendation_id: str,
        rejected_by: str,
        rejection_reason: str | None = None,
    ) -> Recommendation:
        recommendation = self._get(recommendation_id)
        if not recommendation.is_pending:
            raise ConflictError(
                f"Recommendation {recommendation_id} is already {recommendation.status}"
            )

        recommendation.status = REJECTED
        recommendation.rejected_by = rejected_by
        recommendation.rejected_at = datetime.now(timezone.utc)
        recommendation.rejection_reason = rejection_reason

        self.audit.log(
            "RECOMMENDATION_REJECTED",
            rejected_by,
            f"Rejected {recommendation.maintenance_type} recommendation for {recommendation.tail_number}",
            {"status": {"before": "PENDING", "after": REJECTED}, "reason": rejection_reason},
            compliance_relevant=True,
        )
        logger.info(f"Recommendation {recommendation_id} rejected by {rejected_by}")
        return recommendation

    def manual_schedule(
        self,
        aircraft_id: str,
        maintenance_type: str,
        scheduled_date,
        notes: str | None = None,
        scheduled_by: str = "OPERATOR",
    ) -> Recommendation:
        """Add an operator-authored PENDING recommendation."""
        aircraft = fleet.get_aircraft(aircraft_id)
        if not aircraft:
            raise NotFoundError("Aircraft not found")
        if maintenance_type not in MAINTENANCE_TYPES:
            raise ValueError(
                f"Invalid maintenanceType '{maintenance_type}'. "
                f"Use one of: {', '.join(MAINTENANCE_TYPES)}"
            )
        when = parse_scheduled_date(scheduled_date)

        cfg = recommendation_config
        recommendation = Recommendation(
            id=f"manual-{int(time.time() * 1000)}",
            aircraft_id=aircraft["id"],
            tail_number=aircraft["tail_number"],
            maintenance_type=maintenance_type,
            ai_confidence=1.0,
            estimated_cost=cfg.cost_for(maintenance_type),
            estimated_downtime=cfg.duration_for(maintenance_type),
            urgency="MEDIUM",
            time_window=TimeWindow(earliest=when, latest=when, optimal=when),
            reasoning=[r for r in ("Manually scheduled", notes) if r],
            compliance_requirements=cfg.compliance_for(maintenance_type),
            required_personnel=["A&P Mechanic"],
        )
        self.store.add(recommendation)
        self.audit.log(
            "MANUAL_SCHEDULE_CREATED",
            scheduled_by,
            f"Manually scheduled {maintenance_type} for {aircraft['tail_number']} on {when.date().isoformat()}",
            {"recommendationId": recommendation.id},
        )
        return recommendation

    async def optimize(self) -> dict:
        """Regenerate recommendations for the whole fleet, replacing the stored list."""
        inputs = build_fleet_inputs()
        result = await self.generator.generate(inputs)
        self.store.replace_all(result.recommendations)

        self.audit.log(
            "AI_RECOMMENDATION_GENERATED",
            "AI_SYSTEM",
            f"Generated {len(result.recommendations)} recommendations ({result.source})",
            {"count": len(result.recommendations), "source": result.source},
            actor_type="AI",
        )
        logger.info(f"Optimize: {len(result.recommendations)} recommendations from {result.source}")
        return {
            "recommendations": [r.to_dict() for r in result.recommendations],
            "aiPowered": result.ai_powered,
            "optimizationInsights": optimization_insights(
                result.recommendations, utilization_analysis()["data"]
            ),
            "utilizationSummary": [
                {
                    "tailNumber": inp.tail_number,
                    "utilization": inp.utilization.get("utilization_percentage", 0),
                    "maintenanceRisk": inp.utilization.get("maintenance_risk", "MEDIUM"),
                    "trend": inp.utilization.get("trend", "STABLE"),
                }
                for inp in inputs
            ],
        }


approval_service = ApprovalService()
