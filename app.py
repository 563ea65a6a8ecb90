import logging
import logging.config

from flask import Flask, jsonify
from sqlalchemy.orm.exc import StaleDataError
from werkzeug.exceptions import HTTPException

from configs import Config, db, login, logging_config
from db.models.user import User
from blueprint import blue_print
from admin.setup import init_admin
from services.errors import (
    InsufficientStockError,
    InvalidStateTransition,
    InvariantViolation,
    NotFoundError,
    ValidationError,
)

log = logging.getLogger(__name__)


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    app.json.sort_keys = False

    logging.config.dictConfig(logging_config(app.config["LOG_LEVEL"]))

    db.init_app(app)
    login.init_app(app)

    if app.config.get("ENABLE_ADMIN", True):
        init_admin(app)  # /manage
    blue_print(app)
    register_error_handlers(app)
    return app


@login.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login.unauthorized_handler
def unauthorized():
    return jsonify({"error": "Not authenticated"}), 401


def register_error_handlers(app: Flask) -> None:
    def _error(message, status):
        return jsonify({"error": message}), status

    @app.errorhandler(ValidationError)
    def validation_error(e):
        return _error(str(e), 400)

    @app.errorhandler(InsufficientStockError)
    def insufficient_stock(e):
        return _error(str(e), 400)

    @app.errorhandler(NotFoundError)
    def not_found(e):
        return _error(str(e), 404)

    @app.errorhandler(InvalidStateTransition)
    def invalid_transition(e):
        return _error(str(e), 409)

    @app.errorhandler(StaleDataError)
    def stale(e):
        log.warning("concurrent update lost: %s", e)
        return _error("The record was modified concurrently, retry", 409)

    @app.errorhandler(InvariantViolation)
    def invariant(e):
        log.critical("invariant violation reached the HTTP layer: %s", e)
        return _error("Internal inventory error", 500)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return _error(e.description, e.code)


if __name__ == "__main__":
    application = create_app()
    with application.app_context():
        db.create_all()
    application.run(debug=True, host="0.0.0.0", port=5000)
