from decimal import Decimal

import pytest

from dao import category as category_dao
from dao import department as department_dao
from dao import item as item_dao
from dao import purchase_order as po_dao
from dao import quotation as quotation_dao
from dao import stock as stock_dao
from dao import vendor as vendor_dao
from db.models.vendor import VendorStatus
from services.errors import InvalidStateTransition, NotFoundError, ValidationError
from services.purchase_workflow import PurchaseWorkflow


def _approved_requisition(session, world):
    wf = PurchaseWorkflow(session)
    pr = wf.create(
        requester_id=world.requester,
        department_id=world.y,
        item_name="Projector",
        description="Meeting room",
        qty=3,
        estimated_cost="900",
        justification="Room refit",
        required_date="2030-03-01",
    )
    for gate, actor in (("hod", world.hod_y), ("procurement", world.proc), ("finance", world.fin)):
        wf.approve(pr.id, gate, actor)
    return pr


def test_department_names_are_unique(world):
    with pytest.raises(ValidationError):
        department_dao.create_department("Operations")


def test_category_and_item(world):
    cat = category_dao.create_category("Tools")
    it = item_dao.create_item(
        code="TL-SAW", name="Circular saw", unit="pieces", unit_price="120.5", category_id=cat.id
    )
    assert it.unit_price == Decimal("120.50")
    assert [i.code for i in item_dao.search_items("saw")] == ["TL-SAW"]
    assert {i.code for i in item_dao.search_items("tl-")} == {"TL-SAW", "TL-DRILL"}


def test_duplicate_item_code(world):
    with pytest.raises(ValidationError):
        item_dao.create_item(code="TL-DRILL", name="Other", unit="pieces")


def test_item_with_unknown_category(world):
    with pytest.raises(NotFoundError):
        item_dao.create_item(code="X1", name="X", unit="pieces", category_id=77)


def test_stock_listing_and_low_stock(world):
    rows = stock_dao.list_stock(department_id=world.x)
    assert len(rows) == 1
    assert rows[0]["item_name"] == "Cordless drill"
    assert rows[0]["department_name"] == "Operations"
    assert stock_dao.list_stock(department_id=world.y) == []
    assert stock_dao.list_low_stock() == []

    stock_dao.create_stock(world.item, world.y, 1)
    low = stock_dao.list_low_stock()
    assert [r["department_id"] for r in low] == [world.y]
    assert len(stock_dao.list_stock(item_id=world.item)) == 2


def test_movements_carry_performer_name(world):
    rows = stock_dao.list_movements(world.stock)
    assert len(rows) == 1
    assert rows[0]["movement_type"] == "IN"
    assert rows[0]["performed_by_name"] == "Hod X"


def test_duplicate_stock_record(world):
    with pytest.raises(ValidationError):
        stock_dao.create_stock(world.item, world.x, 3)


def test_vendor_lifecycle(world):
    v = vendor_dao.create_vendor(
        name="Acme Supplies", email="sales@acme.test", categories="tools, office,tools"
    )
    assert v.status == VendorStatus.PENDING
    assert v.categories == ["office", "tools"]
    assert vendor_dao.list_vendors(active_only=True) == []

    v = vendor_dao.update_vendor(v.id, {"status": "active", "rating": "4.5"}, actor_id=world.proc)
    assert v.status == VendorStatus.ACTIVE
    assert v.rating == Decimal("4.50")
    assert [x.id for x in vendor_dao.list_vendors(active_only=True)] == [v.id]


def test_vendor_update_rejects_unknown_fields(world):
    v = vendor_dao.create_vendor(name="Acme", email="a@acme.test")
    with pytest.raises(ValidationError):
        vendor_dao.update_vendor(v.id, {"id": 5})
    with pytest.raises(ValidationError):
        vendor_dao.update_vendor(v.id, {"status": "BLOCKED"})
    with pytest.raises(NotFoundError):
        vendor_dao.update_vendor(999, {"name": "x"})


def test_quotations_cheapest_first(world, session):
    pr = _approved_requisition(session, world)
    a = vendor_dao.create_vendor(name="A", email="a@a.test")
    b = vendor_dao.create_vendor(name="B", email="b@b.test")
    qa = quotation_dao.create_quotation(pr.id, a.id, "300")
    qb = quotation_dao.create_quotation(pr.id, b.id, "250", total_price="760")
    assert qa.total_price == Decimal("900.00")

    rows = quotation_dao.list_quotations(pr.id)
    assert [r["id"] for r in rows] == [qb.id, qa.id]
    assert rows[0]["vendor"] == "B"


def test_purchase_order_needs_approved_requisition(world, session):
    v = vendor_dao.create_vendor(name="A", email="a@a.test")
    wf = PurchaseWorkflow(session)
    pending = wf.create(
        requester_id=world.requester,
        department_id=world.y,
        item_name="Desk",
        description="Standing desk",
        qty=1,
        estimated_cost="400",
        justification="Ergonomics",
        required_date="2030-03-01",
    )
    with pytest.raises(InvalidStateTransition):
        po_dao.create_purchase_order(pending.id, v.id, "400")

    approved = _approved_requisition(session, world)
    po = po_dao.create_purchase_order(approved.id, v.id, "880.00", actor_id=world.proc)
    row = po_dao.get_purchase_order(po.id)
    assert row["status"] == "PENDING"
    assert row["item_name"] == "Projector"
    assert row["vendor"] == "A"
    assert len(po_dao.list_purchase_orders()) == 1


@pytest.mark.parametrize("rating", ["5.01", "10", "-1"])
def test_vendor_rating_bounds(world, rating):
    v = vendor_dao.create_vendor(name="Acme", email="a@acme.test")
    with pytest.raises(ValidationError):
        vendor_dao.update_vendor(v.id, {"rating": rating})


def test_vendor_rating_upper_bound_accepted(world):
    v = vendor_dao.create_vendor(name="Acme", email="a@acme.test")
    assert vendor_dao.update_vendor(v.id, {"rating": "5"}).rating == Decimal("5.00")
