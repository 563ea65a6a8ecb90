# admin/setup.py
from flask import abort, redirect, url_for
from flask_login import current_user, logout_user
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from configs import db
from db.models.user import APPROVER_ROLES


# Approvers only; everyone else gets 401/403


class MyAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        if not current_user.is_authenticated:
            abort(401)
        if not current_user.has_role(*APPROVER_ROLES):
            abort(403)
        return super().index()

    @expose("/logout")
    def admin_logout(self):
        if current_user.is_authenticated:
            logout_user()
        return redirect(url_for("admin.index"))

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(*APPROVER_ROLES)

    def inaccessible_callback(self, name, **kwargs):
        abort(401 if not current_user.is_authenticated else 403)


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True
    can_delete = False

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(*APPROVER_ROLES)

    def inaccessible_callback(self, name, **kwargs):
        abort(401 if not current_user.is_authenticated else 403)


class ReadOnlyView(SecureModelView):
    """Rows change only through the audited API, never through admin forms."""

    can_create = False
    can_edit = False


class BorrowRequestView(ReadOnlyView):
    column_filters = ["status", "requester_hod_approval", "owner_hod_approval"]
    column_list = [
        "id",
        "requester",
        "item",
        "requester_department",
        "owning_department",
        "quantity_requested",
        "status",
        "requester_hod_approval",
        "owner_hod_approval",
        "created_at",
    ]


class PurchaseRequisitionView(ReadOnlyView):
    column_searchable_list = ["item_name"]
    column_filters = ["status", "hod_approval", "procurement_approval", "finance_approval"]


class UserView(ReadOnlyView):
    column_exclude_list = ["password_hash"]
    column_details_exclude_list = ["password_hash"]


def init_admin(app):

    admin = Admin(
        app,
        name="Procurement Admin",
        index_view=MyAdminIndex(url="/manage"),  # index at /manage/
        url="/manage",
    )
    # Import models here to avoid circular imports
    from db.models.user import User
    from db.models.department import Department
    from db.models.category import Category
    from db.models.item import Item
    from db.models.vendor import Vendor
    from db.models.borrow_request import BorrowRequest
    from db.models.purchase_requisition import PurchaseRequisition
    from db.models.quotation import Quotation
    from db.models.purchase_order import PurchaseOrder
    from db.models.stock import StockRecord, StockMovement
    from db.models.audit_log import AuditLogEntry

    views = [
        (UserView, User, "System", "admin_user", "Users"),
        (ReadOnlyView, Department, "Master Data", "admin_department", "Departments"),
        (ReadOnlyView, Category, "Master Data", "admin_category", "Categories"),
        (ReadOnlyView, Item, "Master Data", "admin_item", "Items"),
        (ReadOnlyView, Vendor, "Master Data", "admin_vendor", "Vendors"),
        (BorrowRequestView, BorrowRequest, "Requests", "admin_borrow", "Borrow Requests"),
        (
            PurchaseRequisitionView,
            PurchaseRequisition,
            "Requests",
            "admin_pr",
            "Purchase Requisitions",
        ),
        (ReadOnlyView, Quotation, "Sourcing", "admin_quotation", "Quotations"),
        (ReadOnlyView, PurchaseOrder, "Sourcing", "admin_po", "Purchase Orders"),
        (ReadOnlyView, StockRecord, "Inventory", "admin_stock", "Stock"),
        (ReadOnlyView, StockMovement, "Inventory", "admin_stock_movement", "Stock Movements"),
        (ReadOnlyView, AuditLogEntry, "System", "admin_audit", "Audit Log"),
    ]
    for view_cls, model, category, endpoint, name in views:
        admin.add_view(
            view_cls(model, db, category=category, endpoint=endpoint, name=name)
        )

    admin.add_link(
        MenuLink(
            name="Logout",
            category="System",
            endpoint="admin.admin_logout",
        )
    )
    return admin
