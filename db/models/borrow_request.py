from datetime import datetime
from configs import db
from db.models.common import ApprovalStatus, RequestStatus


class BorrowRequest(db.Model):
    __tablename__ = "borrow_request"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    requester_id = db.Column(
        db.Integer, db.ForeignKey("user_account.id"), nullable=False
    )
    requester_department_id = db.Column(
        db.Integer, db.ForeignKey("department.id"), nullable=False
    )
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    owning_department_id = db.Column(
        db.Integer, db.ForeignKey("department.id"), nullable=False
    )
    quantity_requested = db.Column(db.Integer, nullable=False)
    justification = db.Column(db.Text, nullable=False)
    required_date = db.Column(db.DateTime, nullable=False)

    status = db.Column(
        db.Enum(RequestStatus), default=RequestStatus.PENDING, nullable=False
    )
    requester_hod_approval = db.Column(
        db.Enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False
    )
    owner_hod_approval = db.Column(
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
    approver = db.relationship("User", foreign_keys=[approved_by])
    item = db.relationship("Item")
    requester_department = db.relationship(
        "Department", foreign_keys=[requester_department_id]
    )
    owning_department = db.relationship(
        "Department", foreign_keys=[owning_department_id]
    )

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        db.CheckConstraint("quantity_requested >= 1", name="ck_borrow_quantity"),
        db.CheckConstraint(
            "owning_department_id <> requester_department_id",
            name="ck_borrow_distinct_departments",
        ),
    )
