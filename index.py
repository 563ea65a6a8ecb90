# index.py
from flask import Blueprint, jsonify
from datetime import datetime

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def home():
    return jsonify({"service": "procurement", "time": datetime.utcnow().isoformat()})


@main_bp.route("/health")
def health():
    return jsonify({"status": "ok"})
