import warnings

import pytest

from app import create_app
from configs import db as _db
from dao import department as department_dao
from dao import user as user_dao
from db.models.audit_log import AuditLogEntry
from db.models.item import Item
from db.models.user import UserRole
from db.models.vendor import Vendor

PASSWORD = "pw123456"


@pytest.fixture
def admin_app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "SECRET_KEY": "test",
        }
    )
    with app.app_context():
        _db.create_all()
        dept = department_dao.create_department("Operations")
        user_dao.create_user(
            "clerk", PASSWORD, "clerk@example.com", "Clerk", UserRole.GENERAL_USER, dept.id
        )
        user_dao.create_user(
            "fin", PASSWORD, "fin@example.com", "Fin", UserRole.FINANCE_OFFICER, dept.id
        )
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def admin_client(admin_app):
    return admin_app.test_client()


def _login(client, username):
    return client.post("/auth/login", json={"username": username, "password": PASSWORD})


def test_manage_requires_login(admin_client):
    assert admin_client.get("/manage/").status_code == 401


def test_manage_refuses_general_users(admin_client):
    _login(admin_client, "clerk")
    assert admin_client.get("/manage/").status_code == 403
    assert admin_client.get("/manage/admin_borrow/").status_code == 403


def test_manage_forms_cannot_write(admin_client):
    _login(admin_client, "fin")
    admin_client.post(
        "/manage/admin_vendor/new/",
        data={"name": "Acme", "email": "a@acme.test", "status": "ACTIVE"},
    )
    admin_client.post(
        "/manage/admin_item/new/",
        data={"code": "X1", "name": "Thing", "unit": "pieces", "min_reorder_level": "0"},
    )
    assert Vendor.query.count() == 0
    assert Item.query.count() == 0
    assert AuditLogEntry.query.count() == 0


def test_admin_views_bind_db_without_session_warning():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        create_app(
            {
                "TESTING": True,
                "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
                "SECRET_KEY": "test",
            }
        )
    assert not [w for w in caught if "session object" in str(w.message)]
