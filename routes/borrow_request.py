from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from configs import db
from db.models.user import APPROVER_ROLES, UserRole
from services.borrow_workflow import BorrowWorkflow, to_borrow_approval
from utils.auth import ensure_gate_role, roles_required
from utils.http import flag, int_arg, json_body, request_metadata
from utils.persistence import snapshot

borrow_bp = Blueprint("borrow_api", __name__, url_prefix="/api/borrow-requests")


def _workflow() -> BorrowWorkflow:
    return BorrowWorkflow(db.session)


def _gate(data):
    gate = to_borrow_approval(data.get("approval_type"))
    # both borrow gates are head-of-department decisions
    ensure_gate_role(gate.value, UserRole.HOD)
    return gate


@borrow_bp.route("", methods=["GET"])
@login_required
def borrow_list():
    wf = _workflow()
    requester_id = int_arg("requester_id")
    department_id = int_arg("department_id")
    if flag("pending"):
        rows = wf.list_pending()
    elif requester_id is not None:
        rows = wf.list_by_requester(requester_id)
    elif department_id is not None:
        rows = wf.list_by_department(department_id)
    else:
        rows = wf.list_all()
    return jsonify(rows)


@borrow_bp.route("/<int:request_id>")
@login_required
def borrow_detail(request_id: int):
    row = _workflow().get(request_id)
    if row is None:
        return jsonify({"error": "Borrow request not found"}), 404
    return jsonify(row)


@borrow_bp.route("", methods=["POST"])
@login_required
def borrow_add():
    data = json_body()
    req = _workflow().create(
        requester_id=current_user.id,
        requester_department_id=current_user.department_id,
        item_id=data.get("item_id"),
        owning_department_id=data.get("owning_department_id"),
        qty=data.get("quantity_requested"),
        justification=data.get("justification"),
        required_date=data.get("required_date"),
        metadata=request_metadata(),
    )
    return jsonify(snapshot(req)), 201


@borrow_bp.route("/<int:request_id>/approve", methods=["PATCH"])
@roles_required(*APPROVER_ROLES)
def borrow_approve(request_id: int):
    data = json_body()
    req = _workflow().approve(
        request_id,
        _gate(data),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(snapshot(req))


@borrow_bp.route("/<int:request_id>/reject", methods=["PATCH"])
@roles_required(*APPROVER_ROLES)
def borrow_reject(request_id: int):
    data = json_body()
    req = _workflow().reject(
        request_id,
        _gate(data),
        reason=data.get("reason"),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(snapshot(req))
