"""
Pytest fixtures: app over in-memory SQLite plus a small two-department world.
"""
from datetime import date
from types import SimpleNamespace

import pytest

from app import create_app
from configs import db as _db
from dao import department as department_dao
from dao import item as item_dao
from dao import stock as stock_dao
from dao import user as user_dao
from db.models.user import UserRole

PASSWORD = "secret123"


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "ENABLE_ADMIN": False,
            "SECRET_KEY": "test",
        }
    )
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def session(app):
    return _db.session


@pytest.fixture
def client(app):
    return app.test_client()


def _user(username, role, department_id):
    return user_dao.create_user(
        username=username,
        password=PASSWORD,
        email=f"{username}@example.com",
        full_name=username.replace("_", " ").title(),
        role=role,
        department_id=department_id,
    )


@pytest.fixture
def world(app):
    """Department X owns 10 units of item I; department Y wants to borrow."""
    x = department_dao.create_department("Operations")
    y = department_dao.create_department("Engineering")
    requester = _user("requester", UserRole.GENERAL_USER, y.id)
    hod_x = _user("hod_x", UserRole.HOD, x.id)
    hod_y = _user("hod_y", UserRole.HOD, y.id)
    proc = _user("proc", UserRole.PROCUREMENT_MANAGER, x.id)
    fin = _user("fin", UserRole.FINANCE_OFFICER, x.id)
    item = item_dao.create_item(
        code="TL-DRILL", name="Cordless drill", unit="pieces", min_reorder_level=2
    )
    stock = stock_dao.create_stock(item.id, x.id, 10, actor_id=hod_x.id)
    return SimpleNamespace(
        x=x.id,
        y=y.id,
        item=item.id,
        stock=stock.id,
        requester=requester.id,
        hod_x=hod_x.id,
        hod_y=hod_y.id,
        proc=proc.id,
        fin=fin.id,
        required=date(2030, 1, 15),
    )


@pytest.fixture
def login(client):
    def _login(username, password=PASSWORD):
        return client.post("/auth/login", json={"username": username, "password": password})

    return _login
