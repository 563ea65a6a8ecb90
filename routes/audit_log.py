from flask import Blueprint, jsonify
from configs import db
from db.models.user import APPROVER_ROLES
from services.audit import AuditRecorder
from utils.auth import roles_required
from utils.http import int_arg
from utils.persistence import row_to_dict

audit_bp = Blueprint("audit_api", __name__, url_prefix="/api/audit-logs")


@audit_bp.route("")
@roles_required(*APPROVER_ROLES)
def audit_list():
    entries = AuditRecorder(db.session).list(limit=int_arg("limit"))
    return jsonify([row_to_dict(e) for e in entries])
