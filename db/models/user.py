# db/models/user.py
import enum
from datetime import datetime
from configs import db
from flask_login import UserMixin


class UserRole(enum.Enum):
    GENERAL_USER = "GENERAL_USER"
    HOD = "HOD"  # Head of department
    PROCUREMENT_MANAGER = "PROCUREMENT_MANAGER"
    FINANCE_OFFICER = "FINANCE_OFFICER"


APPROVER_ROLES = (
    UserRole.HOD,
    UserRole.PROCUREMENT_MANAGER,
    UserRole.FINANCE_OFFICER,
)


class User(db.Model, UserMixin):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    full_name = db.Column(db.String(120), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.GENERAL_USER, nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("department.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    department = db.relationship(
        "Department", foreign_keys=[department_id], backref="users"
    )

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        """True if the user holds any of the given roles."""
        return self.role in roles
