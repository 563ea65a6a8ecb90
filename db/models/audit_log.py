from datetime import datetime
from configs import db
from db.models.common import JSONPayload


class AuditLogEntry(db.Model):
    """Immutable; written only by services.audit.AuditRecorder."""

    __tablename__ = "audit_log"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))  # None = system
    action = db.Column(db.String(60), nullable=False, index=True)
    entity_type = db.Column(db.String(60), nullable=False)
    entity_id = db.Column(db.Integer)
    old_values = db.Column(JSONPayload)
    new_values = db.Column(JSONPayload)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User")
