import enum
from datetime import datetime
from configs import db
from db.models.common import JSONPayload


class VendorStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


class Vendor(db.Model):
    __tablename__ = "vendor"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    registration_number = db.Column(db.String(100))

    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(30))
    address = db.Column(db.Text)
    contact_person = db.Column(db.String(120))

    status = db.Column(
        db.Enum(VendorStatus), default=VendorStatus.PENDING, nullable=False
    )
    categories = db.Column(JSONPayload, default=list)  # tags, kept sorted/unique
    rating = db.Column(db.Numeric(3, 2), default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        db.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_vendor_rating"),
    )
