"""In-memory store for recommendations and active workflows.

All state lives in the process and is discarded on restart. Mutations are
synchronous so a check-and-set never spans an await.
"""

import logging
from datetime import datetime, timedelta, timezone

from gander.data.fleet import FLEET
from gander.models.maintenance import APPROVED, Recommendation, TimeWindow
from gander.models.workflow import ActiveWorkflow
from gander.services.errors import ConflictError

logger = logging.getLogger(__name__)

ACTIVE_RECOMMENDATION_STATUSES = (APPROVED, "SCHEDULED", "IN_PROGRESS")


def baseline_recommendations(fleet: dict | None = None, now: datetime | None = None) -> list[Recommendation]:
    """Recurring 100-hour and annual inspections for every aircraft."""
    fleet = FLEET if fleet is None else fleet
    now = now or datetime.now(timezone.utc)
    day = timedelta(days=1)
    recommendations = []
    for aircraft in fleet.values():
        tail = aircraft["tail_number"]
        recommendations.append(
            Recommendation(
                id=f"baseline-{aircraft['id']}-100hour",
                aircraft_id=aircraft["id"],
                tail_number=tail,
                maintenance_type="100_HOUR",
                ai_confidence=0.8,
                estimated_cost=4000,
                estimated_downtime=8,
                urgency="MEDIUM",
                time_window=TimeWindow(earliest=now, latest=now + 14 * day, optimal=now + 7 * day),
                reasoning=["Recurring 100-hour maintenance interval due based on flight hours"],
                risk_factors=["Routine maintenance"],
                compliance_requirements=["FAR 91.409"],
                required_personnel=["Certified Mechanic", "Inspector"],
                created_at=now,
            )
        )
        recommendations.append(
            Recommendation(
                id=f"baseline-{aircraft['id']}-annual",
                aircraft_id=aircraft["id"],
                tail_number=tail,
                maintenance_type="ANNUAL",
                ai_confidence=0.95,
                estimated_cost=18000,
                estimated_downtime=36,
                urgency="HIGH",
                time_window=TimeWindow(
                    earliest=now + 21 * day,
                    latest=now + 45 * day,
                    optimal=now + 30 * day,
                ),
                reasoning=["Annual inspection required by FAR regulations"],
                risk_factors=["Critical maintenance"],
                compliance_requirements=["FAR 91.409", "FAR 43.9"],
                required_personnel=["Certified Mechanic", "Inspector", "Supervisor"],
                created_at=now,
            )
        )
    return recommendations


class RecommendationStore:
    """Recommendations in insertion order plus workflows keyed by id."""

    def __init__(self):
        self._recommendations: list[Recommendation] = []
        self._workflows: dict[str, ActiveWorkflow] = {}

    # ---- Recommendations ----

    def list_recommendations(
        self,
        tail_number: str | None = None,
        status: str | None = None,
    ) -> list[Recommendation]:
        """Filtered recommendations; seeds baseline inspections when the store is empty."""
        if not self._recommendations:
            logger.info("No recommendations stored, seeding baseline maintenance tasks")
            self._recommendations.extend(baseline_recommendations())

        items = list(self._recommendations)
        if tail_number:
            items = [r for r in items if r.tail_number == tail_number]
        if status:
            items = [r for r in items if r.status == status]
        return items

    def get(self, recommendation_id: str) -> Recommendation | None:
        return next((r for r in self._recommendations if r.id == recommendation_id), None)

    def add(self, recommendation: Recommendation):
        self._recommendations.append(recommendation)

    def replace_all(self, recommendations: list[Recommendation]):
        self._recommendations = list(recommendations)

    # ---- Workflows ----

    def get_workflow(self, workflow_id: str) -> ActiveWorkflow | None:
        return self._workflows.get(workflow_id)

    def workflow_for_recommendation(self, recommendation_id: str) -> ActiveWorkflow | None:
        return self._workflows.get(f"workflow-{recommendation_id}")

    def add_workflow(self, workflow: ActiveWorkflow):
        if workflow.id in self._workflows:
            raise ConflictError(f"Workflow {workflow.id} already exists")
        self._workflows[workflow.id] = workflow

    def list_workflows(self) -> list[ActiveWorkflow]:
        return list(self._workflows.values())

    @property
    def workflow_count(self) -> int:
        return len(self._workflows)

    def reset(self):
        self._recommendations = []
        self._workflows = {}


recommendation_store = RecommendationStore()
