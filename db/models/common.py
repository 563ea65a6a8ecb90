import enum

from sqlalchemy.dialects.postgresql import JSONB
from configs import db

# JSONB on PostgreSQL, generic JSON elsewhere (tests run on SQLite)
JSONPayload = db.JSON().with_variant(JSONB(), "postgresql")


class RequestStatus(enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


class ApprovalStatus(enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
