from typing import List
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.category import Category
from services.errors import ValidationError
from services.validators import optional_text, required_text


def list_categories() -> List[Category]:
    return Category.query.order_by(Category.name.asc()).all()


def create_category(name: str, description: str | None = None) -> Category:
    name = required_text(name, "name")
    if Category.query.filter_by(name=name).first():
        raise ValidationError(f"Category '{name}' already exists")
    c = Category(name=name, description=optional_text(description))
    db.session.add(c)
    _commit()
    return c


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
