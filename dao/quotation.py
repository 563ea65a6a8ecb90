from typing import List, Optional
from configs import db
from db.models.purchase_requisition import PurchaseRequisition
from db.models.quotation import Quotation
from db.models.vendor import Vendor
from services.audit import AuditRecorder
from services.errors import NotFoundError
from services.validators import as_datetime, identifier, money, optional_text
from utils.persistence import snapshot, unit_of_work


def list_quotations(requisition_id: Optional[int] = None) -> List[dict]:
    """All quotations newest first, or one requisition's cheapest first."""
    q = db.session.query(Quotation, Vendor.name.label("vendor")).join(
        Vendor, Quotation.vendor_id == Vendor.id
    )
    if requisition_id is not None:
        q = q.filter(Quotation.requisition_id == int(requisition_id)).order_by(
            Quotation.total_price.asc()
        )
    else:
        q = q.order_by(Quotation.created_at.desc(), Quotation.id.desc())
    out = []
    for quote, vendor_name in q.all():
        data = snapshot(quote)
        data["vendor"] = vendor_name
        out.append(data)
    return out


def create_quotation(
    requisition_id,
    vendor_id,
    unit_price,
    total_price=None,
    delivery_timeline: str | None = None,
    valid_until=None,
    actor_id: int | None = None,
    metadata: dict | None = None,
) -> Quotation:
    requisition_id = identifier(requisition_id, "requisition_id")
    vendor_id = identifier(vendor_id, "vendor_id")
    unit_price = money(unit_price, "unit_price")
    valid_until = as_datetime(valid_until, "valid_until", required=False)

    with unit_of_work(db.session):
        pr = db.session.get(PurchaseRequisition, requisition_id)
        if pr is None:
            raise NotFoundError(f"Purchase requisition #{requisition_id} not found")
        if db.session.get(Vendor, vendor_id) is None:
            raise NotFoundError(f"Vendor #{vendor_id} not found")
        if total_price in (None, ""):
            total_price = unit_price * pr.quantity
        else:
            total_price = money(total_price, "total_price")
        quote = Quotation(
            requisition_id=requisition_id,
            vendor_id=vendor_id,
            unit_price=unit_price,
            total_price=total_price,
            delivery_timeline=optional_text(delivery_timeline),
            valid_until=valid_until,
        )
        db.session.add(quote)
        db.session.flush()
        AuditRecorder(db.session).record(
            actor_id,
            "CREATE_QUOTATION",
            "Quotation",
            quote.id,
            after=snapshot(quote),
            metadata=metadata,
        )
    return quote
