import pytest
from fastapi.testclient import TestClient

from gander.main import app
from gander.services.audit_trail import audit_trail
from gander.services.recommendation_store import recommendation_store

URL = "/api/maintenance-schedule"


@pytest.fixture
def client():
    # No context manager: the lifespan (scheduler) stays off.
    return TestClient(app)


def _approve(client, rec_id, approved_by="ops.manager"):
    return client.post(URL, json={
        "action": "approve-recommendation",
        "recommendationId": rec_id,
        "approvedBy": approved_by,
    })


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "service": "gander-maintenance"}


class TestRecommendations:
    def test_baseline_seeded_when_empty(self, client):
        resp = client.get(URL, params={"action": "ai-recommendations"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        ids = {r["id"] for r in data["recommendations"]}
        assert "baseline-n123ab-100hour" in ids
        assert "baseline-n789xy-annual" in ids
        assert data["totalCount"] == 6
        assert data["pendingApprovals"] == 6
        assert data["activeWorkflows"] == 0
        assert "timestamp" in resp.json()

    def test_filter_by_tail(self, client):
        data = client.get(URL, params={"action": "ai-recommendations", "tailNumber": "N456CD"}).json()["data"]
        assert {r["tailNumber"] for r in data["recommendations"]} == {"N456CD"}

    def test_optimize_replaces_list(self, client):
        data = client.get(URL, params={"action": "optimize"}).json()["data"]
        assert data["aiPowered"] is False
        assert len(data["recommendations"]) == 7

        listed = client.get(URL, params={"action": "ai-recommendations"}).json()["data"]
        assert listed["totalCount"] == 7

    def test_optimize_reports_insights(self, client):
        data = client.get(URL, params={"action": "optimize"}).json()["data"]
        insights = data["optimizationInsights"]
        total_cost = sum(r["estimatedCost"] for r in data["recommendations"])

        assert insights["costSavings"] == int(total_cost * 0.15 + 0.5)
        assert insights["timeOptimization"] == 18
        assert 52 <= insights["riskReduction"] <= 94
        assert insights["breakdown"]["estimatedTotalCost"] == total_cost
        assert insights["summary"].startswith("Optimized 7 maintenance items")


class TestApprovalFlow:
    def test_approve_then_track_workflow(self, client):
        client.get(URL, params={"action": "ai-recommendations"})

        resp = _approve(client, "baseline-n123ab-100hour")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["recommendation"]["status"] == "APPROVED"
        assert body["data"]["emailNotifications"]["sent"] == 5
        assert body["data"]["emailNotifications"]["failures"] == []

        status = client.get(URL, params={
            "action": "workflow-status", "recommendationId": "baseline-n123ab-100hour",
        }).json()["data"]
        assert status["workflowId"] == "workflow-baseline-n123ab-100hour"
        assert status["status"] == "INITIATED"

        active = client.get(URL, params={"action": "active-workflows"}).json()["data"]
        assert active["totalActive"] == 1
        assert active["byStatus"]["INITIATED"] == 1
        assert active["nextMilestones"][0]["tailNumber"] == "N123AB"

        listed = client.get(URL, params={"action": "ai-recommendations"}).json()["data"]
        assert listed["activeWorkflows"] == 1
        assert listed["pendingApprovals"] == 5

    def test_second_approval_is_conflict(self, client):
        client.get(URL, params={"action": "ai-recommendations"})
        assert _approve(client, "baseline-n456cd-annual").status_code == 200
        resp = _approve(client, "baseline-n456cd-annual", approved_by="someone.else")
        assert resp.status_code == 409

    def test_approve_after_reseed_is_conflict(self, client):
        client.get(URL, params={"action": "ai-recommendations"})
        assert _approve(client, "baseline-n123ab-100hour").status_code == 200

        recommendation_store.replace_all([])
        reseeded = client.get(URL, params={"action": "ai-recommendations"}).json()["data"]
        again = next(r for r in reseeded["recommendations"] if r["id"] == "baseline-n123ab-100hour")
        assert again["status"] == "PENDING"

        resp = _approve(client, "baseline-n123ab-100hour", approved_by="ops2")
        assert resp.status_code == 409
        assert recommendation_store.get("baseline-n123ab-100hour").status == "PENDING"
        assert recommendation_store.workflow_count == 1

    def test_approve_unknown(self, client):
        resp = _approve(client, "rec-does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Recommendation not found"

    def test_approve_missing_fields(self, client):
        resp = client.post(URL, json={"action": "approve-recommendation", "recommendationId": "x"})
        assert resp.status_code == 400

    def test_reject(self, client):
        client.get(URL, params={"action": "ai-recommendations"})
        resp = client.post(URL, json={
            "action": "reject-recommendation",
            "recommendationId": "baseline-n789xy-100hour",
            "rejectedBy": "ops.manager",
            "rejectionReason": "Recently completed",
        })
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["recommendation"]["status"] == "REJECTED"
        assert data["rejectionReason"] == "Recently completed"

        again = _approve(client, "baseline-n789xy-100hour")
        assert again.status_code == 409

    def test_update_workflow_status(self, client):
        client.get(URL, params={"action": "ai-recommendations"})
        _approve(client, "baseline-n123ab-annual")

        resp = client.post(URL, json={
            "action": "update-workflow-status",
            "workflowId": "workflow-baseline-n123ab-annual",
            "status": "INSPECTION",
            "updatedBy": "lead",
        })
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert (data["oldStatus"], data["newStatus"]) == ("INITIATED", "INSPECTION")
        assert data["workflow"]["assignments"]["inspector"] == "David Chen"

    def test_update_workflow_status_errors(self, client):
        client.get(URL, params={"action": "ai-recommendations"})
        _approve(client, "baseline-n123ab-annual")

        bad_status = client.post(URL, json={
            "action": "update-workflow-status",
            "workflowId": "workflow-baseline-n123ab-annual",
            "status": "ON_HOLD",
        })
        missing = client.post(URL, json={
            "action": "update-workflow-status",
            "workflowId": "workflow-nope",
            "status": "IN_PROGRESS",
        })
        assert bad_status.status_code == 400
        assert missing.status_code == 404


class TestManualSchedule:
    def test_manual_schedule(self, client):
        resp = client.post(URL, json={
            "action": "manual-schedule",
            "aircraftId": "n456cd",
            "maintenanceType": "A_CHECK",
            "scheduledDate": "2025-11-20T08:00:00Z",
            "notes": "Owner request",
        })
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["aiConfidence"] == 1.0
        assert data["reasoning"] == ["Manually scheduled", "Owner request"]

    @pytest.mark.parametrize("body,status", [
        ({"aircraftId": "n000zz", "maintenanceType": "A_CHECK", "scheduledDate": "2025-11-20"}, 404),
        ({"aircraftId": "n456cd", "maintenanceType": "D_CHECK", "scheduledDate": "2025-11-20"}, 400),
        ({"aircraftId": "n456cd", "maintenanceType": "A_CHECK", "scheduledDate": "soon"}, 400),
        ({"aircraftId": "n456cd", "maintenanceType": "A_CHECK"}, 400),
    ])
    def test_manual_schedule_errors(self, client, body, status):
        resp = client.post(URL, json={"action": "manual-schedule", **body})
        assert resp.status_code == status


class TestReadActions:
    def test_workflow_status_requires_id(self, client):
        assert client.get(URL, params={"action": "workflow-status"}).status_code == 400

    def test_workflow_status_unknown(self, client):
        resp = client.get(URL, params={"action": "workflow-status", "recommendationId": "rec-x"})
        assert resp.status_code == 404

    def test_task_checklist(self, client):
        data = client.get(URL, params={"action": "task-checklist", "maintenanceType": "ANNUAL"}).json()["data"]
        assert data["checklist"]["checkType"] == "ANNUAL"
        assert set(data["tasksByCategory"]) >= {"VISUAL", "COMPLIANCE"}
        assert all(t["criticalSafety"] for t in data["criticalSafetyTasks"])
        assert all(t.get("requiresIA") for t in data["iaRequiredTasks"])

    def test_task_checklist_unknown_type(self, client):
        assert client.get(URL, params={"action": "task-checklist", "maintenanceType": "Z"}).status_code == 400
        assert client.get(URL, params={"action": "task-checklist"}).status_code == 400

    def test_utilization_analysis(self, client):
        body = client.get(URL, params={"action": "utilization-analysis"}).json()
        summary = body["summary"]
        assert summary["totalAircraft"] == 3
        assert summary["highUtilizationAircraft"] == 1
        assert summary["lowUtilizationAircraft"] == 2
        assert summary["maintenanceAlertsCount"] == 1

        single = client.get(URL, params={"action": "utilization-analysis", "tailNumber": "N789XY"}).json()
        assert [d["tailNumber"] for d in single["data"]] == ["N789XY"]

    def test_audit_trail(self, client):
        client.get(URL, params={"action": "ai-recommendations"})
        _approve(client, "baseline-n123ab-100hour")

        data = client.get(URL, params={"action": "audit-trail"}).json()["data"]
        assert data["totalEntries"] == len(data["auditTrail"])
        assert data["complianceEntries"] >= 3

        compliance = client.get(URL, params={"action": "audit-trail", "complianceOnly": "true"}).json()["data"]
        assert all(e["complianceRelevant"] for e in compliance["auditTrail"])


    def test_audit_trail_returns_latest_fifty(self, client):
        for i in range(60):
            audit_trail.log("NOTE", "ops", f"entry {i}")

        data = client.get(URL, params={"action": "audit-trail"}).json()["data"]

        assert data["totalEntries"] == 60
        assert len(data["auditTrail"]) == 50
        assert data["auditTrail"][0]["details"] == "entry 10"
        assert data["auditTrail"][-1]["details"] == "entry 59"

    def test_schedule_preview(self, client):
        body = client.get(URL, params={"action": "schedule-preview", "days": 14}).json()
        data = body["data"]

        assert body["period"] == "14 days"
        assert data["totalItems"] == 13
        assert data["totalCost"] == 571000
        assert data["criticalItems"] == 1
        overdue = next(item for item in data["schedule"] if item["id"] == "preview-int-100hr-2")
        assert overdue["tailNumber"] == "N456CD"
        assert overdue["impactOnOperations"] == "HIGH"
        assert overdue["reasoning"] == ["Due based on 100-hour interval"]


@pytest.mark.parametrize("action", ["", "nope"])
def test_unknown_get_action(client, action):
    assert client.get(URL, params={"action": action}).status_code == 400


def test_unknown_post_action(client):
    assert client.post(URL, json={"action": "approve-schedule"}).status_code == 400
    assert client.post(URL, json={}).status_code == 400
    assert client.post(URL, content=b"not json", headers={"Content-Type": "application/json"}).status_code == 400
