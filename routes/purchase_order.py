from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from dao import purchase_order as po_dao
from utils.http import json_body, request_metadata
from utils.persistence import row_to_dict

purchase_order_bp = Blueprint("po_api", __name__, url_prefix="/api/purchase-orders")


@purchase_order_bp.route("", methods=["GET"])
@login_required
def po_list():
    return jsonify(po_dao.list_purchase_orders())


@purchase_order_bp.route("/<int:po_id>")
@login_required
def po_detail(po_id: int):
    row = po_dao.get_purchase_order(po_id)
    if row is None:
        return jsonify({"error": "Purchase order not found"}), 404
    return jsonify(row)


@purchase_order_bp.route("", methods=["POST"])
@login_required
def po_add():
    data = json_body()
    po = po_dao.create_purchase_order(
        requisition_id=data.get("requisition_id"),
        vendor_id=data.get("vendor_id"),
        total_amount=data.get("total_amount"),
        expected_delivery=data.get("expected_delivery"),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(row_to_dict(po)), 201
