from flask import Blueprint, jsonify
from flask_login import login_required
from dao import category as category_dao, department as department_dao
from utils.persistence import row_to_dict

department_bp = Blueprint("department_api", __name__, url_prefix="/api")


@department_bp.route("/departments")
@login_required
def departments_list():
    deps = department_dao.list_departments()
    return jsonify([row_to_dict(d) for d in deps])


@department_bp.route("/categories")
@login_required
def categories_list():
    cats = category_dao.list_categories()
    return jsonify([row_to_dict(c) for c in cats])
