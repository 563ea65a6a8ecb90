from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from dao import vendor as vendor_dao
from db.models.user import UserRole
from utils.auth import roles_required
from utils.http import flag, json_body, request_metadata
from utils.persistence import row_to_dict

vendor_bp = Blueprint("vendor_api", __name__, url_prefix="/api/vendors")


@vendor_bp.route("", methods=["GET"])
@login_required
def vendors_list():
    vendors = vendor_dao.list_vendors(active_only=flag("active"))
    return jsonify([row_to_dict(v) for v in vendors])


@vendor_bp.route("/<int:vendor_id>")
@login_required
def vendors_detail(vendor_id: int):
    v = vendor_dao.get_vendor(vendor_id)
    if not v:
        return jsonify({"error": "Vendor not found"}), 404
    return jsonify(row_to_dict(v))


@vendor_bp.route("", methods=["POST"])
@roles_required(UserRole.PROCUREMENT_MANAGER)
def vendors_add():
    data = json_body()
    v = vendor_dao.create_vendor(
        name=data.get("name"),
        email=data.get("email"),
        registration_number=data.get("registration_number"),
        phone=data.get("phone"),
        address=data.get("address"),
        contact_person=data.get("contact_person"),
        categories=data.get("categories"),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(row_to_dict(v)), 201


@vendor_bp.route("/<int:vendor_id>", methods=["PATCH"])
@roles_required(UserRole.PROCUREMENT_MANAGER)
def vendors_edit(vendor_id: int):
    v = vendor_dao.update_vendor(
        vendor_id,
        json_body(),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(row_to_dict(v))
