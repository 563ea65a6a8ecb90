import enum
from configs import db
from datetime import datetime


class MovementType(enum.Enum):
    IN = "IN"
    OUT = "OUT"


class StockRecord(db.Model):
    __tablename__ = "stock"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    department_id = db.Column(
        db.Integer, db.ForeignKey("department.id"), nullable=False
    )
    quantity_available = db.Column(db.Integer, default=0, nullable=False)
    quantity_reserved = db.Column(db.Integer, default=0, nullable=False)
    last_updated = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    item = db.relationship("Item", backref="stock")
    department = db.relationship("Department", backref="stock")

    __table_args__ = (
        db.UniqueConstraint("item_id", "department_id", name="uq_stock_item_dept"),
        db.CheckConstraint("quantity_available >= 0", name="ck_stock_available"),
        db.CheckConstraint("quantity_reserved >= 0", name="ck_stock_reserved"),
    )

    @property
    def quantity_unreserved(self) -> int:
        return (self.quantity_available or 0) - (self.quantity_reserved or 0)


class StockMovement(db.Model):
    """Append-only; one row per physical quantity change."""

    __tablename__ = "stock_movement"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    stock_id = db.Column(db.Integer, db.ForeignKey("stock.id"), nullable=False)
    movement_type = db.Column(db.Enum(MovementType), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.Text, nullable=False)
    reference_id = db.Column(db.Integer)  # borrow request id, if any
    performed_by = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    stock = db.relationship("StockRecord", backref="movements")
    performer = db.relationship("User")

    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_movement_quantity"),
    )
