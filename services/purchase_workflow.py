# services/purchase_workflow.py
import enum
import logging
from typing import List, Optional

from db.models.common import ApprovalStatus, RequestStatus
from db.models.department import Department
from db.models.purchase_requisition import PurchaseRequisition
from db.models.user import User
from services.audit import AuditRecorder
from services.errors import NotFoundError, ValidationError
from services.state import (
    GATE_TRANSITIONS,
    REQUEST_TRANSITIONS,
    ensure_open,
    ensure_transition,
)
from services.validators import (
    as_datetime,
    identifier,
    money,
    positive_int,
    required_text,
)
from utils.persistence import snapshot, unit_of_work

log = logging.getLogger(__name__)

ENTITY = "PurchaseRequisition"


class PurchaseApproval(enum.Enum):
    HOD = "hod"
    PROCUREMENT = "procurement"
    FINANCE = "finance"

    @property
    def field(self) -> str:
        return f"{self.value}_approval"


def to_purchase_approval(value) -> PurchaseApproval:
    if isinstance(value, PurchaseApproval):
        return value
    try:
        return PurchaseApproval(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown purchase approval type: {value!r}") from None


class PurchaseWorkflow:
    """Three-gate sign-off (hod, procurement, finance) for new purchases.

    Finance commits funds last: the requisition only becomes APPROVED when
    the finance gate is approved while hod and procurement are already
    APPROVED. Any rejection is terminal. No stock is touched.
    """

    def __init__(self, session, audit: AuditRecorder = None):
        self.session = session
        self.audit = audit or AuditRecorder(session)

    def create(
        self,
        requester_id: int,
        department_id: int,
        item_name: str,
        description: str,
        qty,
        estimated_cost,
        justification: str,
        required_date,
        metadata: Optional[dict] = None,
    ) -> PurchaseRequisition:
        requester_id = identifier(requester_id, "requester_id")
        department_id = identifier(department_id, "department_id")
        item_name = required_text(item_name, "item_name")
        description = required_text(description, "description")
        qty = positive_int(qty, "quantity")
        estimated_cost = money(estimated_cost, "estimated_cost")
        justification = required_text(justification, "justification")
        required_date = as_datetime(required_date, "required_date")

        with unit_of_work(self.session):
            self._get(User, requester_id, "Requester")
            self._get(Department, department_id, "Department")
            pr = PurchaseRequisition(
                requester_id=requester_id,
                department_id=department_id,
                item_name=item_name,
                description=description,
                quantity=qty,
                estimated_cost=estimated_cost,
                justification=justification,
                required_date=required_date,
                status=RequestStatus.PENDING,
                hod_approval=ApprovalStatus.PENDING,
                procurement_approval=ApprovalStatus.PENDING,
                finance_approval=ApprovalStatus.PENDING,
            )
            self.session.add(pr)
            self.session.flush()
            self.audit.record(
                requester_id,
                "CREATE_PURCHASE_REQUISITION",
                ENTITY,
                pr.id,
                after=snapshot(pr),
                metadata=metadata,
            )
        log.info("purchase requisition #%s created", pr.id)
        return pr

    def approve(
        self,
        requisition_id: int,
        approval_type,
        actor_id: int,
        metadata: Optional[dict] = None,
    ) -> PurchaseRequisition:
        gate = to_purchase_approval(approval_type)
        with unit_of_work(self.session):
            pr = self._lock(requisition_id)
            before = snapshot(pr)
            label = f"Purchase requisition #{pr.id}"
            ensure_open(pr.status, label)

            # finance may sign again once hod and procurement closed after it
            if not self._finance_resign(pr, gate):
                ensure_transition(
                    GATE_TRANSITIONS,
                    getattr(pr, gate.field),
                    ApprovalStatus.APPROVED,
                    f"{label} {gate.value} gate",
                )
                setattr(pr, gate.field, ApprovalStatus.APPROVED)
            pr.approved_by = actor_id

            if (
                gate is PurchaseApproval.FINANCE
                and pr.hod_approval == ApprovalStatus.APPROVED
                and pr.procurement_approval == ApprovalStatus.APPROVED
            ):
                ensure_transition(
                    REQUEST_TRANSITIONS, pr.status, RequestStatus.APPROVED, label
                )
                pr.status = RequestStatus.APPROVED

            self.session.flush()
            self.audit.record(
                actor_id,
                "APPROVE_PURCHASE_REQUISITION",
                ENTITY,
                pr.id,
                before=before,
                after=snapshot(pr),
                metadata=metadata,
            )
        log.info(
            "purchase requisition #%s %s approved by %s, status %s",
            pr.id,
            gate.value,
            actor_id,
            pr.status.value,
        )
        return pr

    def reject(
        self,
        requisition_id: int,
        approval_type,
        reason: str,
        actor_id: int,
        metadata: Optional[dict] = None,
    ) -> PurchaseRequisition:
        gate = to_purchase_approval(approval_type)
        with unit_of_work(self.session):
            pr = self._lock(requisition_id)
            before = snapshot(pr)
            label = f"Purchase requisition #{pr.id}"
            ensure_open(pr.status, label)
            ensure_transition(
                GATE_TRANSITIONS,
                getattr(pr, gate.field),
                ApprovalStatus.REJECTED,
                f"{label} {gate.value} gate",
            )
            setattr(pr, gate.field, ApprovalStatus.REJECTED)
            ensure_transition(
                REQUEST_TRANSITIONS, pr.status, RequestStatus.REJECTED, label
            )
            pr.status = RequestStatus.REJECTED
            pr.rejection_reason = reason
            pr.approved_by = actor_id

            self.session.flush()
            self.audit.record(
                actor_id,
                "REJECT_PURCHASE_REQUISITION",
                ENTITY,
                pr.id,
                before=before,
                after=snapshot(pr),
                metadata=metadata,
            )
        log.info("purchase requisition #%s rejected at %s gate", pr.id, gate.value)
        return pr

    # ---------- queries ----------
    def get(self, requisition_id: int) -> Optional[dict]:
        row = (
            self._projection()
            .filter(PurchaseRequisition.id == int(requisition_id))
            .first()
        )
        return _row(row) if row else None

    def list_all(self) -> List[dict]:
        return [_row(r) for r in self._projection().all()]

    def list_by_requester(self, requester_id: int) -> List[dict]:
        q = self._projection().filter(
            PurchaseRequisition.requester_id == int(requester_id)
        )
        return [_row(r) for r in q.all()]

    def list_by_department(self, department_id: int) -> List[dict]:
        q = self._projection().filter(
            PurchaseRequisition.department_id == int(department_id)
        )
        return [_row(r) for r in q.all()]

    def list_pending(self) -> List[dict]:
        q = self._projection().filter(
            PurchaseRequisition.status == RequestStatus.PENDING
        )
        return [_row(r) for r in q.all()]

    # ---------- helpers ----------
    @staticmethod
    def _finance_resign(pr: PurchaseRequisition, gate: PurchaseApproval) -> bool:
        return (
            gate is PurchaseApproval.FINANCE
            and pr.finance_approval == ApprovalStatus.APPROVED
            and pr.hod_approval == ApprovalStatus.APPROVED
            and pr.procurement_approval == ApprovalStatus.APPROVED
        )

    def _get(self, model, pk: int, label: str):
        obj = self.session.get(model, pk)
        if obj is None:
            raise NotFoundError(f"{label} #{pk} not found")
        return obj

    def _lock(self, requisition_id) -> PurchaseRequisition:
        requisition_id = identifier(requisition_id, "requisition_id")
        pr = (
            self.session.query(PurchaseRequisition)
            .filter(PurchaseRequisition.id == requisition_id)
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )
        if pr is None:
            raise NotFoundError(f"Purchase requisition #{requisition_id} not found")
        return pr

    def _projection(self):
        return (
            self.session.query(
                PurchaseRequisition,
                User.full_name.label("requester"),
                Department.name.label("department"),
            )
            .join(User, PurchaseRequisition.requester_id == User.id)
            .join(Department, PurchaseRequisition.department_id == Department.id)
            .order_by(
                PurchaseRequisition.created_at.desc(), PurchaseRequisition.id.desc()
            )
        )


def _row(row) -> dict:
    data = snapshot(row[0])
    data.update(requester=row.requester, department=row.department)
    return data
