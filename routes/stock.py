from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from dao import stock as stock_dao
from utils.http import int_arg, json_body, request_metadata
from utils.persistence import row_to_dict

stock_bp = Blueprint("stock_api", __name__, url_prefix="/api")


@stock_bp.route("/stock", methods=["GET"])
@login_required
def stock_list():
    department_id = int_arg("department_id")
    item_id = int_arg("item_id")
    if department_id is not None:
        rows = stock_dao.list_stock(department_id=department_id)
    elif item_id is not None:
        rows = stock_dao.list_stock(item_id=item_id)
    else:
        rows = stock_dao.list_stock()
    return jsonify(rows)


@stock_bp.route("/stock/low")
@login_required
def stock_low():
    return jsonify(stock_dao.list_low_stock())


@stock_bp.route("/stock", methods=["POST"])
@login_required
def stock_add():
    data = json_body()
    record = stock_dao.create_stock(
        item_id=data.get("item_id"),
        department_id=data.get("department_id"),
        quantity_available=data.get("quantity_available", 0),
        actor_id=current_user.id,
        metadata=request_metadata(),
    )
    return jsonify(row_to_dict(record)), 201


@stock_bp.route("/stock-movements")
@login_required
def stock_movements():
    return jsonify(stock_dao.list_movements(int_arg("stock_id")))
