# services/audit.py
import logging
from typing import List, Optional

from db.models.audit_log import AuditLogEntry
from utils.persistence import snapshot

log = logging.getLogger(__name__)


def _payload(value):
    if value is None or isinstance(value, dict):
        return value
    return snapshot(value)


class AuditRecorder:
    """Appends immutable audit entries inside the caller's transaction.

    The entry is flushed with the state change it describes, so a failure to
    audit aborts the surrounding unit of work instead of losing the trail.
    """

    def __init__(self, session):
        self.session = session

    def record(
        self,
        actor_id: Optional[int],
        action: str,
        entity_type: str,
        entity_id: Optional[int] = None,
        before=None,
        after=None,
        metadata: Optional[dict] = None,
    ) -> AuditLogEntry:
        metadata = metadata or {}
        entry = AuditLogEntry(
            user_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            old_values=_payload(before),
            new_values=_payload(after),
            ip_address=metadata.get("ip_address"),
            user_agent=metadata.get("user_agent"),
        )
        self.session.add(entry)
        self.session.flush()
        log.debug("audit %s %s#%s by %s", action, entity_type, entity_id, actor_id)
        return entry

    def list(self, limit: Optional[int] = None) -> List[AuditLogEntry]:
        q = self.session.query(AuditLogEntry).order_by(
            AuditLogEntry.created_at.desc(), AuditLogEntry.id.desc()
        )
        if limit:
            q = q.limit(int(limit))
        return q.all()
