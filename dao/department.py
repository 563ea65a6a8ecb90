from typing import Optional, List
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.department import Department
from services.errors import ValidationError
from services.validators import required_text


def list_departments() -> List[Department]:
    return Department.query.order_by(Department.name.asc()).all()


def get_department(dept_id: int) -> Optional[Department]:
    return db.session.get(Department, int(dept_id))


def get_department_by_name(name: str) -> Optional[Department]:
    return Department.query.filter_by(name=name.strip()).first()


def create_department(name: str, hod_id: int | None = None) -> Department:
    name = required_text(name, "name")
    if get_department_by_name(name):
        raise ValidationError(f"Department '{name}' already exists")
    d = Department(name=name, hod_id=hod_id)
    db.session.add(d)
    _commit()
    return d


def set_hod(dept_id: int, hod_id: int | None) -> Department:
    d = get_department(dept_id)
    if d is None:
        raise ValidationError(f"Department #{dept_id} does not exist")
    d.hod_id = hod_id
    _commit()
    return d


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
