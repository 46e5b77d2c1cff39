"""In-process audit trail for recommendations and workflows."""

import logging
import secrets
import time
from datetime import datetime, timezone

from gander.models.workflow import AuditTrailEntry

logger = logging.getLogger(__name__)

SYSTEM_ACTORS = {"SYSTEM", "AI_SYSTEM"}


def new_audit_id() -> str:
    return f"audit-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9]}"


class AuditTrail:
    """Append-only list of audit entries."""

    def __init__(self):
        self._entries: list[AuditTrailEntry] = []

    def log(
        self,
        action: str,
        actor: str,
        details: str,
        data_changes: dict | None = None,
        compliance_relevant: bool = False,
        actor_type: str | None = None,
    ) -> AuditTrailEntry:
        if actor_type is None:
            actor_type = "SYSTEM" if actor in SYSTEM_ACTORS else "USER"
        entry = AuditTrailEntry(
            id=new_audit_id(),
            timestamp=datetime.now(timezone.utc),
            action=action,
            actor=actor,
            actor_type=actor_type,
            details=details,
            data_changes=data_changes or None,
            compliance_relevant=compliance_relevant,
        )
        self._entries.append(entry)
        logger.debug(f"Audit {action} by {actor}: {details}")
        return entry

    def entries(self, compliance_only: bool = False) -> list[AuditTrailEntry]:
        if compliance_only:
            return [e for e in self._entries if e.compliance_relevant]
        return list(self._entries)

    def latest(self, limit: int = 50, compliance_only: bool = False) -> list[AuditTrailEntry]:
        return self.entries(compliance_only)[-limit:]

    def clear(self):
        self._entries.clear()


audit_trail = AuditTrail()
