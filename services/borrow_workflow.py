# services/borrow_workflow.py
import enum
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import aliased

from db.models.borrow_request import BorrowRequest
from db.models.common import ApprovalStatus, RequestStatus
from db.models.department import Department
from db.models.item import Item
from db.models.user import User
from services.audit import AuditRecorder
from services.errors import NotFoundError, ValidationError
from services.state import (
    GATE_TRANSITIONS,
    REQUEST_TRANSITIONS,
    ensure_open,
    ensure_transition,
)
from services.stock_ledger import StockLedger
from services.validators import as_datetime, identifier, positive_int, required_text
from utils.persistence import snapshot, unit_of_work

log = logging.getLogger(__name__)

ENTITY = "BorrowRequest"


class BorrowApproval(enum.Enum):
    REQUESTER_HOD = "requester_hod"
    OWNER_HOD = "owner_hod"

    @property
    def field(self) -> str:
        return f"{self.value}_approval"

    @property
    def other(self) -> "BorrowApproval":
        if self is BorrowApproval.REQUESTER_HOD:
            return BorrowApproval.OWNER_HOD
        return BorrowApproval.REQUESTER_HOD


def to_borrow_approval(value) -> BorrowApproval:
    if isinstance(value, BorrowApproval):
        return value
    try:
        return BorrowApproval(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown borrow approval type: {value!r}") from None


class BorrowWorkflow:
    """Two-gate approval of inter-department borrowing.

    A request is created PENDING and reserves stock at the owning department.
    When both HOD gates are APPROVED (in either order) the request becomes
    APPROVED and the quantity moves to the requester's department. A
    rejection at either gate is final and releases the reservation.
    """

    def __init__(self, session, ledger: StockLedger = None, audit: AuditRecorder = None):
        self.session = session
        self.ledger = ledger or StockLedger(session)
        self.audit = audit or AuditRecorder(session)

    # ---------- commands ----------
    def create(
        self,
        requester_id: int,
        requester_department_id: int,
        item_id: int,
        owning_department_id: int,
        qty,
        justification: str,
        required_date,
        metadata: Optional[dict] = None,
    ) -> BorrowRequest:
        requester_id = identifier(requester_id, "requester_id")
        requester_department_id = identifier(
            requester_department_id, "requester_department_id"
        )
        item_id = identifier(item_id, "item_id")
        owning_department_id = identifier(owning_department_id, "owning_department_id")
        qty = positive_int(qty, "quantity_requested")
        justification = required_text(justification, "justification")
        required_date = as_datetime(required_date, "required_date")
        if owning_department_id == requester_department_id:
            raise ValidationError("A department cannot borrow from itself")

        with unit_of_work(self.session):
            self._get(User, requester_id, "Requester")
            self._get(Department, requester_department_id, "Requester department")
            self._get(Department, owning_department_id, "Owning department")
            self._get(Item, item_id, "Item")

            req = BorrowRequest(
                requester_id=requester_id,
                requester_department_id=requester_department_id,
                item_id=item_id,
                owning_department_id=owning_department_id,
                quantity_requested=qty,
                justification=justification,
                required_date=required_date,
                status=RequestStatus.PENDING,
                requester_hod_approval=ApprovalStatus.PENDING,
                owner_hod_approval=ApprovalStatus.PENDING,
            )
            self.session.add(req)
            self.session.flush()
            self.ledger.reserve(item_id, owning_department_id, qty)
            self.audit.record(
                requester_id,
                "CREATE_BORROW_REQUEST",
                ENTITY,
                req.id,
                after=snapshot(req),
                metadata=metadata,
            )
        log.info("borrow request #%s created (%s units)", req.id, qty)
        return req

    def approve(
        self, request_id: int, approval_type, actor_id: int, metadata: Optional[dict] = None
    ) -> BorrowRequest:
        gate = to_borrow_approval(approval_type)
        with unit_of_work(self.session):
            req = self._lock(request_id)
            before = snapshot(req)
            self._close_gate(req, gate, ApprovalStatus.APPROVED)
            req.approved_by = actor_id

            if getattr(req, gate.other.field) == ApprovalStatus.APPROVED:
                self._complete(req, actor_id)

            self.session.flush()
            self.audit.record(
                actor_id,
                "APPROVE_BORROW_REQUEST",
                ENTITY,
                req.id,
                before=before,
                after=snapshot(req),
                metadata=metadata,
            )
        log.info(
            "borrow request #%s %s approved by %s, status %s",
            req.id,
            gate.value,
            actor_id,
            req.status.value,
        )
        return req

    def reject(
        self,
        request_id: int,
        approval_type,
        reason: str,
        actor_id: int,
        metadata: Optional[dict] = None,
    ) -> BorrowRequest:
        gate = to_borrow_approval(approval_type)
        with unit_of_work(self.session):
            req = self._lock(request_id)
            before = snapshot(req)
            self._close_gate(req, gate, ApprovalStatus.REJECTED)
            ensure_transition(
                REQUEST_TRANSITIONS,
                req.status,
                RequestStatus.REJECTED,
                f"Borrow request #{req.id}",
            )
            req.status = RequestStatus.REJECTED
            req.rejection_reason = reason
            req.approved_by = actor_id
            self.ledger.release(
                req.item_id, req.owning_department_id, req.quantity_requested
            )

            self.session.flush()
            self.audit.record(
                actor_id,
                "REJECT_BORROW_REQUEST",
                ENTITY,
                req.id,
                before=before,
                after=snapshot(req),
                metadata=metadata,
            )
        log.info("borrow request #%s rejected at %s gate", req.id, gate.value)
        return req

    # ---------- queries ----------
    def get(self, request_id: int) -> Optional[dict]:
        row = self._projection().filter(BorrowRequest.id == int(request_id)).first()
        return _row(row) if row else None

    def list_all(self) -> List[dict]:
        return [_row(r) for r in self._projection().all()]

    def list_by_requester(self, requester_id: int) -> List[dict]:
        q = self._projection().filter(BorrowRequest.requester_id == int(requester_id))
        return [_row(r) for r in q.all()]

    def list_by_department(self, department_id: int) -> List[dict]:
        """Requests where the department is either the borrower or the owner."""
        department_id = int(department_id)
        q = self._projection().filter(
            or_(
                BorrowRequest.requester_department_id == department_id,
                BorrowRequest.owning_department_id == department_id,
            )
        )
        return [_row(r) for r in q.all()]

    def list_pending(self) -> List[dict]:
        q = self._projection().filter(BorrowRequest.status == RequestStatus.PENDING)
        return [_row(r) for r in q.all()]

    # ---------- helpers ----------
    def _get(self, model, pk: int, label: str):
        obj = self.session.get(model, pk)
        if obj is None:
            raise NotFoundError(f"{label} #{pk} not found")
        return obj

    def _lock(self, request_id) -> BorrowRequest:
        request_id = identifier(request_id, "request_id")
        req = (
            self.session.query(BorrowRequest)
            .filter(BorrowRequest.id == request_id)
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )
        if req is None:
            raise NotFoundError(f"Borrow request #{request_id} not found")
        return req

    @staticmethod
    def _close_gate(req: BorrowRequest, gate: BorrowApproval, outcome: ApprovalStatus):
        label = f"Borrow request #{req.id}"
        ensure_open(req.status, label)
        ensure_transition(
            GATE_TRANSITIONS,
            getattr(req, gate.field),
            outcome,
            f"{label} {gate.value} gate",
        )
        setattr(req, gate.field, outcome)

    def _complete(self, req: BorrowRequest, actor_id: int) -> None:
        ensure_transition(
            REQUEST_TRANSITIONS,
            req.status,
            RequestStatus.APPROVED,
            f"Borrow request #{req.id}",
        )
        req.status = RequestStatus.APPROVED
        requester_dept = req.requester_department
        owning_dept = req.owning_department
        self.ledger.transfer_out(
            req.item_id,
            req.owning_department_id,
            req.quantity_requested,
            f"Borrowed by {requester_dept.name}",
            req.id,
            actor_id,
        )
        self.ledger.transfer_in(
            req.item_id,
            req.requester_department_id,
            req.quantity_requested,
            f"Borrowed from {owning_dept.name}",
            req.id,
            actor_id,
        )

    def _projection(self):
        req_dept = aliased(Department)
        own_dept = aliased(Department)
        return (
            self.session.query(
                BorrowRequest,
                User.full_name.label("requester"),
                Item.name.label("item"),
                req_dept.name.label("requester_department"),
                own_dept.name.label("owning_department"),
            )
            .join(User, BorrowRequest.requester_id == User.id)
            .join(Item, BorrowRequest.item_id == Item.id)
            .join(req_dept, BorrowRequest.requester_department_id == req_dept.id)
            .join(own_dept, BorrowRequest.owning_department_id == own_dept.id)
            .order_by(BorrowRequest.created_at.desc(), BorrowRequest.id.desc())
        )


def _row(row) -> dict:
    data = snapshot(row[0])
    data.update(
        requester=row.requester,
        item=row.item,
        requester_department=row.requester_department,
        owning_department=row.owning_department,
    )
    return data
