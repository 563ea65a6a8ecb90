from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from dao import item as item_dao
from utils.http import json_body, request_metadata
from utils.persistence import row_to_dict

item_bp = Blueprint("item_api", __name__, url_prefix="/api/items")


@item_bp.route("", methods=["GET"])
@login_required
def items_list():
    search = request.args.get("search")
    items = item_dao.search_items(search) if search else item_dao.list_items()
    return jsonify([row_to_dict(i) for i in items])


@item_bp.route("", methods=["POST"])
@login_required
def items_add():
    data = json_body()
    it = item_dao.create_item(
        code=data.get("code"),
        name=data.get("name"),
        unit=data.get("unit"),
        min_reorder_level=data.get("min_reorder_level", 0),
        unit_price=data.get("unit_price"),
        description=data.get("description"),
        category_id=data.get("category_id"),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(row_to_dict(it)), 201


@item_bp.route("/<int:item_id>")
@login_required
def items_detail(item_id: int):
    it = item_dao.get_item(item_id)
    if it is None:
        return jsonify({"error": "Item not found"}), 404
    return jsonify(row_to_dict(it))
