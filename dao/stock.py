# dao/stock.py
from typing import List, Optional
from configs import db
from db.models.department import Department
from db.models.item import Item
from db.models.stock import StockMovement, StockRecord
from db.models.user import User
from services.audit import AuditRecorder
from services.errors import NotFoundError
from services.stock_ledger import StockLedger
from services.validators import identifier
from utils.persistence import snapshot, unit_of_work


def _stock_query():
    return (
        db.session.query(
            StockRecord.id,
            StockRecord.item_id,
            Item.code.label("item_code"),
            Item.name.label("item_name"),
            StockRecord.department_id,
            Department.name.label("department_name"),
            StockRecord.quantity_available,
            StockRecord.quantity_reserved,
            Item.unit,
            Item.min_reorder_level,
            StockRecord.last_updated,
        )
        .join(Item, StockRecord.item_id == Item.id)
        .join(Department, StockRecord.department_id == Department.id)
    )


def _as_dict(row) -> dict:
    data = dict(row._mapping)
    data["last_updated"] = row.last_updated.isoformat() if row.last_updated else None
    return data


def list_stock(
    department_id: Optional[int] = None, item_id: Optional[int] = None
) -> List[dict]:
    q = _stock_query()
    if department_id is not None:
        q = q.filter(StockRecord.department_id == int(department_id))
        q = q.order_by(Item.name.asc())
    elif item_id is not None:
        q = q.filter(StockRecord.item_id == int(item_id))
        q = q.order_by(Department.name.asc())
    else:
        q = q.order_by(Item.name.asc())
    return [_as_dict(r) for r in q.all()]


def list_low_stock() -> List[dict]:
    """Records at or below the item's reorder level."""
    q = _stock_query().filter(
        StockRecord.quantity_available <= Item.min_reorder_level
    )
    return [_as_dict(r) for r in q.order_by(Item.name.asc()).all()]


def list_movements(stock_id: Optional[int] = None) -> List[dict]:
    q = db.session.query(StockMovement, User.full_name.label("performed_by_name"))
    q = q.outerjoin(User, StockMovement.performed_by == User.id)
    if stock_id is not None:
        q = q.filter(StockMovement.stock_id == int(stock_id))
    rows = q.order_by(StockMovement.created_at.desc(), StockMovement.id.desc()).all()
    out = []
    for mv, performer in rows:
        data = snapshot(mv)
        data["performed_by_name"] = performer
        out.append(data)
    return out


def create_stock(
    item_id, department_id, quantity_available=0, actor_id=None, metadata=None
) -> StockRecord:
    """Initial stocking of an item in a department (ledger IN movement + audit)."""
    item_id = identifier(item_id, "item_id")
    department_id = identifier(department_id, "department_id")
    with unit_of_work(db.session):
        if db.session.get(Item, item_id) is None:
            raise NotFoundError(f"Item #{item_id} not found")
        if db.session.get(Department, department_id) is None:
            raise NotFoundError(f"Department #{department_id} not found")
        record = StockLedger(db.session).create_initial(
            item_id, department_id, quantity_available, actor_id
        )
        AuditRecorder(db.session).record(
            actor_id,
            "CREATE_STOCK",
            "Stock",
            record.id,
            after=snapshot(record),
            metadata=metadata,
        )
    return record
