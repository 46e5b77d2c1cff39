from pydantic import BaseModel, Field


class _CamelBody(BaseModel):
    model_config = {"populate_by_name": True}


class ActionRequest(_CamelBody):
    action: str


class ApproveRecommendationRequest(_CamelBody):
    recommendation_id: str = Field(alias="recommendationId", min_length=1)
    approved_by: str = Field(alias="approvedBy", min_length=1)
    approval_notes: str | None = Field(default=None, alias="approvalNotes")


class RejectRecommendationRequest(_CamelBody):
    recommendation_id: str = Field(alias="recommendationId", min_length=1)
    rejected_by: str = Field(alias="rejectedBy", min_length=1)
    rejection_reason: str | None = Field(default=None, alias="rejectionReason")


class ManualScheduleRequest(_CamelBody):
    aircraft_id: str = Field(alias="aircraftId", min_length=1)
    maintenance_type: str = Field(alias="maintenanceType", min_length=1)
    scheduled_date: str = Field(alias="scheduledDate", min_length=1)
    notes: str | None = None


class UpdateWorkflowStatusRequest(_CamelBody):
    workflow_id: str = Field(alias="workflowId", min_length=1)
    status: str
    updated_by: str | None = Field(default=None, alias="updatedBy")
    notes: str | None = None
