# seed.py
import logging

from configs import db
from app import create_app
from dao import (
    category as category_dao,
    department as department_dao,
    item as item_dao,
    stock as stock_dao,
    user as user_dao,
)
from db.models.item import Item
from db.models.user import UserRole

log = logging.getLogger("seed")

DEFAULT_PASSWORD = "changeme"


# -------- Departments --------
def seed_departments():
    for name in ("Engineering", "Finance", "Operations", "Procurement"):
        if not department_dao.get_department_by_name(name):
            department_dao.create_department(name)
    log.info("departments seeded")


# -------- Users --------
def seed_users():
    dept = {d.name: d.id for d in department_dao.list_departments()}
    users = [
        # username, full name, role, department
        ("engineer1", "Field Engineer", UserRole.GENERAL_USER, "Engineering"),
        ("hod_eng", "Head of Engineering", UserRole.HOD, "Engineering"),
        ("hod_ops", "Head of Operations", UserRole.HOD, "Operations"),
        ("proc1", "Procurement Manager", UserRole.PROCUREMENT_MANAGER, "Procurement"),
        ("fin1", "Finance Officer", UserRole.FINANCE_OFFICER, "Finance"),
    ]
    for username, full_name, role, dept_name in users:
        if user_dao.get_user_by_username(username):
            continue
        u = user_dao.create_user(
            username=username,
            password=DEFAULT_PASSWORD,
            email=f"{username}@example.com",
            full_name=full_name,
            role=role,
            department_id=dept[dept_name],
        )
        if role == UserRole.HOD:
            department_dao.set_hod(dept[dept_name], u.id)
    log.info("users seeded")


# -------- Items & stock --------
def seed_items_and_stock():
    if not category_dao.list_categories():
        category_dao.create_category("Tools", "Hand and power tools")
        category_dao.create_category("Consumables", "Single-use supplies")
    cats = {c.name: c.id for c in category_dao.list_categories()}
    dept = {d.name: d.id for d in department_dao.list_departments()}
    items = [
        # code, name, unit, reorder level, price, category, owning dept, qty
        ("TL-DRILL", "Cordless drill", "pieces", 2, "120.00", "Tools", "Operations", 10),
        ("TL-LADDER", "Step ladder", "pieces", 1, "85.50", "Tools", "Operations", 4),
        ("CN-GLOVES", "Nitrile gloves (box)", "boxes", 20, "9.90", "Consumables", "Engineering", 50),
    ]
    for code, name, unit, reorder, price, cat, owner, qty in items:
        it = Item.query.filter_by(code=code).first()
        if not it:
            it = item_dao.create_item(
                code=code,
                name=name,
                unit=unit,
                min_reorder_level=reorder,
                unit_price=price,
                category_id=cats[cat],
            )
        if not stock_dao.list_stock(item_id=it.id):
            stock_dao.create_stock(it.id, dept[owner], qty)
    log.info("items and stock seeded")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_departments()
        seed_users()
        seed_items_and_stock()
