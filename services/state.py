# services/state.py
"""Transition tables shared by the borrow and purchase workflows."""
import logging

from db.models.common import ApprovalStatus, RequestStatus
from services.errors import InvalidStateTransition

log = logging.getLogger(__name__)

# Overall status: only PENDING may move; every other state is terminal.
REQUEST_TRANSITIONS = {
    RequestStatus.PENDING: frozenset(
        {RequestStatus.APPROVED, RequestStatus.REJECTED}
    ),
    RequestStatus.APPROVED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
    RequestStatus.COMPLETED: frozenset(),
}

# A gate closes exactly once.
GATE_TRANSITIONS = {
    ApprovalStatus.PENDING: frozenset(
        {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}
    ),
    ApprovalStatus.APPROVED: frozenset(),
    ApprovalStatus.REJECTED: frozenset(),
}


def is_terminal(status: RequestStatus) -> bool:
    return not REQUEST_TRANSITIONS.get(status)


def ensure_open(status: RequestStatus, label: str) -> None:
    if is_terminal(status):
        log.warning("%s refused: already %s", label, status.value)
        raise InvalidStateTransition(f"{label} is already {status.value}")


def ensure_transition(table: dict, current, target, label: str) -> None:
    if target not in table.get(current, frozenset()):
        log.warning(
            "%s refused: %s -> %s not allowed", label, current.value, target.value
        )
        raise InvalidStateTransition(
            f"{label} cannot move from {current.value} to {target.value}"
        )
