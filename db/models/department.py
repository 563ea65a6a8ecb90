from datetime import datetime
from configs import db


class Department(db.Model):
    __tablename__ = "department"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    hod_id = db.Column(
        db.Integer,
        db.ForeignKey("user_account.id", use_alter=True, name="fk_department_hod"),
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    hod = db.relationship("User", foreign_keys=[hod_id], post_update=True)
