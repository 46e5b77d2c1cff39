import os

# Settings are read at import time; pin a quiet, deterministic environment first.
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["EMAIL_PROVIDER"] = "simulation"
os.environ["EMAIL_SIMULATION_FAILURE_RATE"] = "0"
os.environ["EMAIL_SIMULATION_MIN_DELAY_MS"] = "0"
os.environ["EMAIL_SIMULATION_MAX_DELAY_MS"] = "0"
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["RECOMMENDATION_CACHE_ENABLED"] = "false"

import json
from datetime import datetime, timezone

import pytest

from gander.models.maintenance import Recommendation, TimeWindow
from gander.services.audit_trail import audit_trail
from gander.services.email.messages import EmailResult
from gander.services.recommendation_store import recommendation_store


@pytest.fixture(autouse=True)
def clean_state():
    recommendation_store.reset()
    audit_trail.clear()
    yield
    recommendation_store.reset()
    audit_trail.clear()


class FakeLLM:
    """Stands in for LLMClient; returns a canned completion or raises."""

    def __init__(self, response: str | None = None, error: Exception | None = None, available: bool = True):
        self.response = response
        self.error = error
        self.available = available
        self.calls = 0

    async def complete(self, system: str, user: str, **kwargs) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return self.response


class FakeCache:
    """Dict-backed replacement for CacheService's recommendation helpers."""

    def __init__(self):
        self.data: dict[str, list[dict]] = {}

    def fleet_fingerprint(self, payload) -> str:
        return "fp-" + str(len(json.dumps(payload, sort_keys=True, default=str)))

    async def get_recommendations(self, fingerprint: str):
        return self.data.get(fingerprint)

    async def set_recommendations(self, fingerprint: str, data: list[dict]):
        self.data[fingerprint] = data


class RecordingTransport:
    """Transport that records every send; fails for the listed addresses."""

    def __init__(self, fail_for: set[str] | None = None, raise_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.raise_for = raise_for or set()
        self.sent = []

    async def send(self, recipient, content, message_id, headers=None):
        if recipient.email in self.raise_for:
            raise RuntimeError("connection reset")
        self.sent.append((recipient, content, message_id, headers))
        if recipient.email in self.fail_for:
            return EmailResult(success=False, error="mailbox unavailable")
        return EmailResult(success=True, message_id=message_id)


@pytest.fixture
def fake_cache():
    return FakeCache()


def make_recommendation(
    rec_id: str = "rec-test-1",
    aircraft_id: str = "n123ab",
    tail_number: str = "N123AB",
    maintenance_type: str = "A_CHECK",
    **overrides,
) -> Recommendation:
    now = datetime.now(timezone.utc)
    fields = dict(
        id=rec_id,
        aircraft_id=aircraft_id,
        tail_number=tail_number,
        maintenance_type=maintenance_type,
        ai_confidence=0.82,
        estimated_cost=8500,
        estimated_downtime=12,
        urgency="MEDIUM",
        time_window=TimeWindow(earliest=now, latest=now, optimal=now),
        reasoning=["Test reasoning"],
    )
    fields.update(overrides)
    return Recommendation(**fields)
