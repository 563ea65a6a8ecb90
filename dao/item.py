from typing import Optional, List
from sqlalchemy import or_
from configs import db
from db.models.category import Category
from db.models.item import Item
from services.audit import AuditRecorder
from services.errors import NotFoundError, ValidationError
from services.validators import (
    identifier,
    money,
    non_negative_int,
    optional_text,
    required_text,
)
from utils.persistence import snapshot, unit_of_work


def list_items() -> List[Item]:
    return Item.query.order_by(Item.name.asc()).all()


def get_item(item_id: int) -> Optional[Item]:
    return db.session.get(Item, int(item_id))


def search_items(query: str) -> List[Item]:
    """Case-insensitive match on code, name or description."""
    pattern = f"%{(query or '').strip()}%"
    return (
        Item.query.filter(
            or_(
                Item.name.ilike(pattern),
                Item.description.ilike(pattern),
                Item.code.ilike(pattern),
            )
        )
        .order_by(Item.name.asc())
        .all()
    )


def create_item(
    code: str,
    name: str,
    unit: str,
    min_reorder_level=0,
    unit_price=None,
    description: str | None = None,
    category_id: int | None = None,
    actor_id: int | None = None,
    metadata: dict | None = None,
) -> Item:
    code = required_text(code, "code")
    name = required_text(name, "name")
    unit = required_text(unit, "unit")
    min_reorder_level = non_negative_int(min_reorder_level, "min_reorder_level")
    if unit_price not in (None, ""):
        unit_price = money(unit_price, "unit_price", minimum=0)
    else:
        unit_price = None
    if category_id not in (None, ""):
        category_id = identifier(category_id, "category_id")
    else:
        category_id = None

    with unit_of_work(db.session):
        if Item.query.filter_by(code=code).first():
            raise ValidationError(f"Item code '{code}' already exists")
        if category_id is not None and db.session.get(Category, category_id) is None:
            raise NotFoundError(f"Category #{category_id} not found")
        it = Item(
            code=code,
            name=name,
            unit=unit,
            min_reorder_level=min_reorder_level,
            unit_price=unit_price,
            description=optional_text(description),
            category_id=category_id,
        )
        db.session.add(it)
        db.session.flush()
        AuditRecorder(db.session).record(
            actor_id, "CREATE_ITEM", "Item", it.id, after=snapshot(it), metadata=metadata
        )
    return it
