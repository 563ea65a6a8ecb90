from datetime import datetime
from configs import db


class Quotation(db.Model):
    __tablename__ = "quotation"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    requisition_id = db.Column(
        db.Integer,
        db.ForeignKey("purchase_requisition.id", ondelete="CASCADE"),
        nullable=False,
    )
    vendor_id = db.Column(db.Integer, db.ForeignKey("vendor.id"), nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    delivery_timeline = db.Column(db.String(120))
    valid_until = db.Column(db.DateTime)
    is_selected = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    requisition = db.relationship(
        "PurchaseRequisition",
        backref=db.backref("quotations", cascade="all, delete-orphan"),
    )
    vendor = db.relationship("Vendor", backref="quotations")
