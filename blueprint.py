from index import main_bp
from routes.auth import auth_bp
from routes.department import department_bp
from routes.item import item_bp
from routes.stock import stock_bp
from routes.borrow_request import borrow_bp
from routes.purchase_requisition import pr_bp
from routes.vendor import vendor_bp
from routes.quotation import quotation_bp
from routes.purchase_order import purchase_order_bp
from routes.audit_log import audit_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(department_bp)
    app.register_blueprint(item_bp)
    app.register_blueprint(stock_bp)
    app.register_blueprint(borrow_bp)
    app.register_blueprint(pr_bp)
    app.register_blueprint(vendor_bp)
    app.register_blueprint(quotation_bp)
    app.register_blueprint(purchase_order_bp)
    app.register_blueprint(audit_bp)
