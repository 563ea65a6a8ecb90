from .common import ApprovalStatus, RequestStatus
from .user import User, UserRole
from .department import Department
from .category import Category
from .item import Item

from .stock import StockRecord, StockMovement, MovementType
from .borrow_request import BorrowRequest
from .purchase_requisition import PurchaseRequisition

from .vendor import Vendor, VendorStatus
from .quotation import Quotation
from .purchase_order import PurchaseOrder
from .audit_log import AuditLogEntry

__all__ = [n for n in dir() if n[:1].isupper()]
