from datetime import datetime
from configs import db
from db.models.common import ApprovalStatus, RequestStatus


class PurchaseRequisition(db.Model):
    __tablename__ = "purchase_requisition"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    requester_id = db.Column(
        db.Integer, db.ForeignKey("user_account.id"), nullable=False
    )
    department_id = db.Column(
        db.Integer, db.ForeignKey("department.id"), nullable=False
    )
    item_name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    estimated_cost = db.Column(db.Numeric(10, 2), nullable=False)
    justification = db.Column(db.Text, nullable=False)
    required_date = db.Column(db.DateTime, nullable=False)

    status = db.Column(
        db.Enum(RequestStatus), default=RequestStatus.PENDING, nullable=False
    )  # pending/approved/rejected
    hod_approval = db.Column(
        db.Enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False
    )
    procurement_approval = db.Column(
        db.Enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False
    )
    finance_approval = db.Column(
        db.Enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False
    )
    approved_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    rejection_reason = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    version = db.Column(db.Integer, nullable=False)

    requester = db.relationship("User", foreign_keys=[requester_id])
    department = db.relationship("Department")

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_pr_quantity"),
        db.CheckConstraint("estimated_cost >= 0.01", name="ck_pr_cost"),
    )
