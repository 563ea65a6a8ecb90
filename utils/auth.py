# utils/auth.py
import logging
from functools import wraps
from flask import abort, request
from flask_login import current_user
from services.errors import InvalidStateTransition

log = logging.getLogger(__name__)


def roles_required(*roles):
    """401 for anonymous callers, 403 unless the user holds one of ``roles``."""
    allowed = ", ".join(r.value for r in roles)

    def deco(fn):
        @wraps(fn)
        def guarded(*a, **kw):
            if not current_user.is_authenticated:
                abort(401)
            if not current_user.has_role(*roles):
                log.warning(
                    "user %s (%s) denied %s %s",
                    current_user.id,
                    current_user.role.value,
                    request.method,
                    request.path,
                )
                abort(403, description=f"Requires one of: {allowed}")
            return fn(*a, **kw)

        return guarded

    return deco


def ensure_gate_role(gate: str, role) -> None:
    """Each approval gate belongs to one role; other approvers may not close it."""
    if not current_user.has_role(role):
        log.warning(
            "user %s (%s) tried to act on the %s gate",
            current_user.id,
            current_user.role.value,
            gate,
        )
        raise InvalidStateTransition(
            f"The {gate} gate can only be decided by {role.value}"
        )
