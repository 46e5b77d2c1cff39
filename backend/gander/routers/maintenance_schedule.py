"""Maintenance schedule router: recommendations, approvals, workflows, audit trail.

Both endpoints dispatch on an ``action``: a query parameter for GET, a body
field for POST.
"""

import logging
from collections import Counter
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, ValidationError

from gander.data import maintenance_checklists
from gander.models.workflow import HISTOGRAM_STATUSES
from gander.schemas.maintenance import (
    ActionRequest,
    ApproveRecommendationRequest,
    ManualScheduleRequest,
    RejectRecommendationRequest,
    UpdateWorkflowStatusRequest,
)
from gander.services.approval_service import approval_service
from gander.services.audit_trail import audit_trail
from gander.services.errors import ConflictError, NotFoundError
from gander.services.recommendation_store import (
    ACTIVE_RECOMMENDATION_STATUSES,
    recommendation_store,
)
from gander.services.schedule_insights import schedule_preview
from gander.services.utilization_service import utilization_analysis
from gander.services.workflow_service import workflow_service

logger = logging.getLogger(__name__)

router = APIRouter()

AUDIT_TRAIL_LIMIT = 50

GET_ACTIONS = (
    "ai-recommendations",
    "active-workflows",
    "optimize",
    "utilization-analysis",
    "workflow-status",
    "audit-trail",
    "task-checklist",
    "schedule-preview",
)

POST_ACTIONS = (
    "approve-recommendation",
    "reject-recommendation",
    "manual-schedule",
    "update-workflow-status",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ok(data, **extra) -> dict:
    return {"success": True, "data": data, **extra, "timestamp": _now()}


def _http_error(e: ValueError) -> HTTPException:
    """Map service errors onto HTTP status codes."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def _parse(model: type[BaseModel], body: dict):
    try:
        return model.model_validate(body)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise HTTPException(status_code=400, detail=f"Invalid or missing fields: {', '.join(missing)}")


# ---------- GET ----------


@router.get("/maintenance-schedule")
async def maintenance_schedule(
    action: str | None = Query(None),
    tail_number: str | None = Query(None, alias="tailNumber"),
    status: str | None = Query(None),
    aircraft_id: str | None = Query(None, alias="aircraftId"),
    recommendation_id: str | None = Query(None, alias="recommendationId"),
    maintenance_type: str | None = Query(None, alias="maintenanceType"),
    compliance_only: bool = Query(False, alias="complianceOnly"),
    days: int = Query(30),
):
    """Read-side actions of the maintenance scheduler."""
    if action == "ai-recommendations":
        recommendations = recommendation_store.list_recommendations(tail_number, status)
        return _ok({
            "recommendations": [r.to_dict() for r in recommendations],
            "totalCount": len(recommendations),
            "pendingApprovals": sum(1 for r in recommendations if r.is_pending),
            "activeWorkflows": sum(
                1 for r in recommendations if r.status in ACTIVE_RECOMMENDATION_STATUSES
            ),
        })

    if action == "active-workflows":
        all_workflows = workflow_service.list_workflows()
        active = [w for w in all_workflows if w.status != "COMPLETED"]
        filtered = workflow_service.list_workflows(status=status, aircraft_id=aircraft_id)
        counts = Counter(w.status for w in all_workflows)
        return _ok({
            "workflows": [w.to_dict() for w in filtered],
            "totalActive": len(active),
            "byStatus": {s: counts.get(s, 0) for s in HISTOGRAM_STATUSES},
            "nextMilestones": [
                {
                    "workflowId": w.id,
                    "tailNumber": w.tail_number,
                    "nextMilestone": w.next_milestone,
                    "estimatedCompletion": w.estimated_completion.isoformat(),
                }
                for w in active
            ],
        })

    if action == "optimize":
        return _ok(await approval_service.optimize())

    if action == "utilization-analysis":
        analysis = utilization_analysis(tail_number)
        return _ok(analysis["data"], summary=analysis["summary"])

    if action == "workflow-status":
        if not recommendation_id:
            raise HTTPException(status_code=400, detail="recommendationId parameter is required")
        try:
            return _ok(workflow_service.workflow_status(recommendation_id))
        except ValueError as e:
            raise _http_error(e)

    if action == "audit-trail":
        entries = audit_trail.entries(compliance_only=compliance_only)
        return _ok({
            "auditTrail": [e.to_dict() for e in audit_trail.latest(AUDIT_TRAIL_LIMIT, compliance_only)],
            "totalEntries": len(entries),
            "complianceEntries": sum(1 for e in entries if e.compliance_relevant),
        })

    if action == "schedule-preview":
        return _ok(schedule_preview(), period=f"{days} days")

    if action == "task-checklist":
        checklist = maintenance_checklists.get_checklist(maintenance_type or "")
        if not checklist:
            raise HTTPException(status_code=400, detail="Invalid or missing maintenanceType parameter")
        return _ok({
            "checklist": checklist,
            "tasksByCategory": maintenance_checklists.tasks_by_category(maintenance_type),
            "criticalSafetyTasks": maintenance_checklists.critical_safety_tasks(maintenance_type),
            "iaRequiredTasks": maintenance_checklists.ia_required_tasks(maintenance_type),
        })

    raise HTTPException(
        status_code=400,
        detail=f"Invalid action. Use: {', '.join(GET_ACTIONS)}",
    )


# ---------- POST ----------


@router.post("/maintenance-schedule")
async def update_maintenance_schedule(request: Request):
    """Write-side actions: approve, reject, manual scheduling, workflow status."""
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    action = _parse(ActionRequest, body).action

    try:
        if action == "approve-recommendation":
            req = _parse(ApproveRecommendationRequest, body)
            result = await approval_service.approve(
                req.recommendation_id, req.approved_by, req.approval_notes
            )
            return {**result, "timestamp": _now()}

        if action == "reject-recommendation":
            req = _parse(RejectRecommendationRequest, body)
            recommendation = approval_service.reject(
                req.recommendation_id, req.rejected_by, req.rejection_reason
            )
            return _ok(
                {"recommendation": recommendation.to_dict(), "rejectionReason": req.rejection_reason},
                message="Recommendation rejected successfully",
            )

        if action == "manual-schedule":
            req = _parse(ManualScheduleRequest, body)
            recommendation = approval_service.manual_schedule(
                req.aircraft_id, req.maintenance_type, req.scheduled_date, req.notes
            )
            return _ok(recommendation.to_dict(), message="Manual maintenance scheduled successfully")

        if action == "update-workflow-status":
            req = _parse(UpdateWorkflowStatusRequest, body)
            old_status, workflow = workflow_service.update_status(
                req.workflow_id, req.status, req.updated_by, req.notes
            )
            return _ok(
                {
                    "workflowId": workflow.id,
                    "oldStatus": old_status,
                    "newStatus": workflow.status,
                    "workflow": workflow.to_dict(),
                },
                message=f"Workflow status updated to {workflow.status}",
            )
    except ValueError as e:
        logger.info(f"{action} rejected: {e}")
        raise _http_error(e)

    raise HTTPException(
        status_code=400,
        detail=f"Invalid action. Use: {', '.join(POST_ACTIONS)}",
    )
