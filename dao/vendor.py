from decimal import Decimal
from typing import Optional, List
from configs import db
from db.models.vendor import Vendor, VendorStatus
from services.audit import AuditRecorder
from services.errors import NotFoundError, ValidationError
from services.validators import money, optional_text, required_text
from utils.persistence import snapshot, unit_of_work

MAX_RATING = Decimal("5.00")

# fields a procurement manager may change through update_vendor
UPDATABLE = (
    "name",
    "registration_number",
    "email",
    "phone",
    "address",
    "contact_person",
    "status",
    "categories",
    "rating",
)


def _tags(value) -> list:
    if value in (None, ""):
        return []
    if isinstance(value, str):
        value = value.split(",")
    return sorted({str(v).strip() for v in value if str(v).strip()})


def _to_vendor_status(value) -> VendorStatus:
    if isinstance(value, VendorStatus):
        return value
    try:
        return VendorStatus((value or "").strip().upper())
    except (ValueError, AttributeError):
        raise ValidationError(f"Unknown vendor status: {value!r}") from None


def list_vendors(active_only: bool = False) -> List[Vendor]:
    q = Vendor.query
    if active_only:
        q = q.filter(Vendor.status == VendorStatus.ACTIVE)
    return q.order_by(Vendor.name.asc()).all()


def get_vendor(vendor_id: int) -> Optional[Vendor]:
    return db.session.get(Vendor, int(vendor_id))


def create_vendor(
    name: str,
    email: str,
    registration_number: str | None = None,
    phone: str | None = None,
    address: str | None = None,
    contact_person: str | None = None,
    categories=None,
    actor_id: int | None = None,
    metadata: dict | None = None,
) -> Vendor:
    v = Vendor(
        name=required_text(name, "name"),
        email=required_text(email, "email"),
        registration_number=optional_text(registration_number),
        phone=optional_text(phone),
        address=optional_text(address),
        contact_person=optional_text(contact_person),
        categories=_tags(categories),
        status=VendorStatus.PENDING,
        rating=0,
    )
    with unit_of_work(db.session):
        db.session.add(v)
        db.session.flush()
        AuditRecorder(db.session).record(
            actor_id, "CREATE_VENDOR", "Vendor", v.id, after=snapshot(v), metadata=metadata
        )
    return v


def update_vendor(
    vendor_id: int,
    fields: dict,
    actor_id: int | None = None,
    metadata: dict | None = None,
) -> Vendor:
    unknown = set(fields) - set(UPDATABLE)
    if unknown:
        raise ValidationError(f"Cannot update vendor fields: {', '.join(sorted(unknown))}")

    with unit_of_work(db.session):
        v = get_vendor(vendor_id)
        if v is None:
            raise NotFoundError(f"Vendor #{vendor_id} not found")
        before = snapshot(v)
        for k, val in fields.items():
            if k in ("name", "email"):
                val = required_text(val, k)
            elif k == "status":
                val = _to_vendor_status(val)
            elif k == "categories":
                val = _tags(val)
            elif k == "rating":
                val = money(val, "rating", minimum=0)
                if val > MAX_RATING:
                    raise ValidationError(f"rating must be at most {MAX_RATING}")
            else:
                val = optional_text(val)
            setattr(v, k, val)
        db.session.flush()
        AuditRecorder(db.session).record(
            actor_id,
            "UPDATE_VENDOR",
            "Vendor",
            v.id,
            before=before,
            after=snapshot(v),
            metadata=metadata,
        )
    return v
