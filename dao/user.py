from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash
from configs import db
from db.models.user import User, UserRole


def get_user_by_username(username: str) -> Optional[User]:
    return User.query.filter_by(username=(username or "").strip()).first()


def create_user(
    username: str,
    password: str,
    email: str,
    full_name: str,
    role: UserRole = UserRole.GENERAL_USER,
    department_id: int | None = None,
) -> User:
    u = User(
        username=username.strip(),
        password_hash=generate_password_hash(password),
        email=email.strip(),
        full_name=full_name.strip(),
        role=role,
        department_id=department_id,
        is_active=True,
    )
    db.session.add(u)
    _commit()
    return u


def to_dict(u: User) -> dict:
    return {
        "id": u.id,
        "username": u.username,
        "email": u.email,
        "full_name": u.full_name,
        "role": u.role.value,
        "department_id": u.department_id,
    }


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
