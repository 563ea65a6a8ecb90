from configs import db
from datetime import datetime
from db.models.common import RequestStatus


class PurchaseOrder(db.Model):
    __tablename__ = "purchase_order"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    requisition_id = db.Column(
        db.Integer, db.ForeignKey("purchase_requisition.id"), nullable=False
    )
    vendor_id = db.Column(db.Integer, db.ForeignKey("vendor.id"), nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(
        db.Enum(RequestStatus), default=RequestStatus.PENDING, nullable=False
    )
    expected_delivery = db.Column(db.DateTime)
    actual_delivery = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    requisition = db.relationship("PurchaseRequisition", backref="purchase_orders")
    vendor = db.relationship("Vendor", backref="purchase_orders")
