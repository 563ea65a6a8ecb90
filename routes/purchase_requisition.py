from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from configs import db
from db.models.user import APPROVER_ROLES, UserRole
from services.purchase_workflow import PurchaseApproval, PurchaseWorkflow, to_purchase_approval
from utils.auth import ensure_gate_role, roles_required
from utils.http import flag, int_arg, json_body, request_metadata
from utils.persistence import snapshot

pr_bp = Blueprint("pr_api", __name__, url_prefix="/api/purchase-requisitions")


def _workflow() -> PurchaseWorkflow:
    return PurchaseWorkflow(db.session)


GATE_ROLES = {
    PurchaseApproval.HOD: UserRole.HOD,
    PurchaseApproval.PROCUREMENT: UserRole.PROCUREMENT_MANAGER,
    PurchaseApproval.FINANCE: UserRole.FINANCE_OFFICER,
}


def _gate(data):
    gate = to_purchase_approval(data.get("approval_type"))
    ensure_gate_role(gate.value, GATE_ROLES[gate])
    return gate


@pr_bp.route("", methods=["GET"])
@login_required
def pr_list():
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


@pr_bp.route("/<int:pr_id>")
@login_required
def pr_detail(pr_id: int):
    row = _workflow().get(pr_id)
    if row is None:
        return jsonify({"error": "Purchase requisition not found"}), 404
    return jsonify(row)


@pr_bp.route("", methods=["POST"])
@login_required
def pr_add():
    data = json_body()
    pr = _workflow().create(
        requester_id=current_user.id,
        department_id=current_user.department_id,
        item_name=data.get("item_name"),
        description=data.get("description"),
        qty=data.get("quantity"),
        estimated_cost=data.get("estimated_cost"),
        justification=data.get("justification"),
        required_date=data.get("required_date"),
        metadata=request_metadata(),
    )
    return jsonify(snapshot(pr)), 201


@pr_bp.route("/<int:pr_id>/approve", methods=["PATCH"])
@roles_required(*APPROVER_ROLES)
def pr_approve(pr_id: int):
    data = json_body()
    pr = _workflow().approve(
        pr_id,
        _gate(data),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(snapshot(pr))


@pr_bp.route("/<int:pr_id>/reject", methods=["PATCH"])
@roles_required(*APPROVER_ROLES)
def pr_reject(pr_id: int):
    data = json_body()
    pr = _workflow().reject(
        pr_id,
        _gate(data),
        reason=data.get("reason"),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(snapshot(pr))
