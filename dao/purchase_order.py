# dao/purchase_order.py
from typing import List, Optional
from configs import db
from db.models.common import RequestStatus
from db.models.purchase_order import PurchaseOrder
from db.models.purchase_requisition import PurchaseRequisition
from db.models.vendor import Vendor
from services.audit import AuditRecorder
from services.errors import InvalidStateTransition, NotFoundError
from services.validators import as_datetime, identifier, money
from utils.persistence import snapshot, unit_of_work


def _projection():
    return (
        db.session.query(
            PurchaseOrder,
            PurchaseRequisition.item_name.label("item_name"),
            Vendor.name.label("vendor"),
        )
        .join(PurchaseRequisition, PurchaseOrder.requisition_id == PurchaseRequisition.id)
        .join(Vendor, PurchaseOrder.vendor_id == Vendor.id)
    )


def _row(row) -> dict:
    data = snapshot(row[0])
    data.update(item_name=row.item_name, vendor=row.vendor)
    return data


def list_purchase_orders() -> List[dict]:
    q = _projection().order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc())
    return [_row(r) for r in q.all()]


def get_purchase_order(po_id: int) -> Optional[dict]:
    row = _projection().filter(PurchaseOrder.id == int(po_id)).first()
    return _row(row) if row else None


def create_purchase_order(
    requisition_id,
    vendor_id,
    total_amount,
    expected_delivery=None,
    actor_id: int | None = None,
    metadata: dict | None = None,
) -> PurchaseOrder:
    requisition_id = identifier(requisition_id, "requisition_id")
    vendor_id = identifier(vendor_id, "vendor_id")
    total_amount = money(total_amount, "total_amount")
    expected_delivery = as_datetime(expected_delivery, "expected_delivery", required=False)

    with unit_of_work(db.session):
        pr = db.session.get(PurchaseRequisition, requisition_id)
        if pr is None:
            raise NotFoundError(f"Purchase requisition #{requisition_id} not found")
        # only fully signed-off requisitions can be ordered
        if pr.status != RequestStatus.APPROVED:
            raise InvalidStateTransition(
                f"Purchase requisition #{pr.id} is {pr.status.value}, not APPROVED"
            )
        if db.session.get(Vendor, vendor_id) is None:
            raise NotFoundError(f"Vendor #{vendor_id} not found")
        po = PurchaseOrder(
            requisition_id=requisition_id,
            vendor_id=vendor_id,
            total_amount=total_amount,
            expected_delivery=expected_delivery,
            status=RequestStatus.PENDING,
        )
        db.session.add(po)
        db.session.flush()
        AuditRecorder(db.session).record(
            actor_id,
            "CREATE_PURCHASE_ORDER",
            "PurchaseOrder",
            po.id,
            after=snapshot(po),
            metadata=metadata,
        )
    return po
