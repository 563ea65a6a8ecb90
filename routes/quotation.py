from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from dao import quotation as quotation_dao
from utils.http import int_arg, json_body, request_metadata
from utils.persistence import row_to_dict

quotation_bp = Blueprint("quotation_api", __name__, url_prefix="/api/quotations")


@quotation_bp.route("", methods=["GET"])
@login_required
def quotations_list():
    return jsonify(quotation_dao.list_quotations(int_arg("requisition_id")))


@quotation_bp.route("", methods=["POST"])
@login_required
def quotations_add():
    data = json_body()
    q = quotation_dao.create_quotation(
        requisition_id=data.get("requisition_id"),
        vendor_id=data.get("vendor_id"),
        unit_price=data.get("unit_price"),
        total_price=data.get("total_price"),
        delivery_timeline=data.get("delivery_timeline"),
        valid_until=data.get("valid_until"),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(row_to_dict(q)), 201
