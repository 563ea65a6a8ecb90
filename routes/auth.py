from flask import Blueprint, jsonify, session
from flask_login import login_user, logout_user, current_user, login_required
from werkzeug.security import check_password_hash
from dao import user as user_dao
from utils.http import json_body

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    user = user_dao.get_user_by_username(username)

    if not user or not check_password_hash(user.password_hash, password):
        return jsonify({"error": "Invalid username or password"}), 401

    if not user.is_active:
        return jsonify({"error": "Account is disabled"}), 403

    login_user(user, remember=True)
    return jsonify(user_dao.to_dict(user))


@auth_bp.route("/logout", methods=["GET", "POST"])
def logout():
    if current_user.is_authenticated:
        logout_user()
        session.pop("_flashes", None)
    return jsonify({"ok": True})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify(user_dao.to_dict(current_user))
