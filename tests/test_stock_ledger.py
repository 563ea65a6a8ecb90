import pytest

from db.models.stock import MovementType, StockMovement
from services.errors import (
    InsufficientStockError,
    InvariantViolation,
    ValidationError,
)
from services.stock_ledger import INITIAL_STOCK_REASON, StockLedger


@pytest.fixture
def ledger(session):
    return StockLedger(session)


def _assert_valid(record):
    assert record.quantity_available >= 0
    assert record.quantity_reserved >= 0
    assert record.quantity_reserved <= record.quantity_available


def test_initial_stock_writes_one_in_movement(world, ledger):
    record = ledger.get_or_none(world.item, world.x)
    assert record.quantity_available == 10
    assert record.quantity_reserved == 0
    movements = ledger.movements(record.id)
    assert len(movements) == 1
    assert movements[0].movement_type == MovementType.IN
    assert movements[0].quantity == 10
    assert movements[0].reason == INITIAL_STOCK_REASON


def test_get_or_none_missing(world, ledger):
    assert ledger.get_or_none(world.item, world.y) is None


def test_create_initial_twice_is_refused(world, ledger):
    with pytest.raises(ValidationError):
        ledger.create_initial(world.item, world.x, 5)


def test_create_initial_zero_has_no_movement(world, ledger, session):
    record = ledger.create_initial(world.item, world.y, 0)
    session.commit()
    assert record.quantity_available == 0
    assert ledger.movements(record.id) == []


def test_reserve_and_release(world, ledger):
    record = ledger.reserve(world.item, world.x, 4)
    assert record.quantity_reserved == 4
    _assert_valid(record)
    record = ledger.release(world.item, world.x, 4)
    assert record.quantity_reserved == 0
    # reservation is not a physical movement
    assert len(ledger.movements(record.id)) == 1


def test_reserve_more_than_unreserved(world, ledger):
    ledger.reserve(world.item, world.x, 7)
    with pytest.raises(InsufficientStockError):
        ledger.reserve(world.item, world.x, 4)
    assert ledger.get_or_none(world.item, world.x).quantity_reserved == 7


def test_reserve_without_record(world, ledger):
    with pytest.raises(InsufficientStockError):
        ledger.reserve(world.item, world.y, 1)


def test_release_below_zero_is_invariant_violation(world, ledger):
    ledger.reserve(world.item, world.x, 2)
    with pytest.raises(InvariantViolation):
        ledger.release(world.item, world.x, 3)


def test_transfer_out_requires_reservation(world, ledger):
    with pytest.raises(InvariantViolation):
        ledger.transfer_out(world.item, world.x, 1, "Borrowed by Engineering")


def test_transfer_out_and_in(world, ledger, session):
    ledger.reserve(world.item, world.x, 4)
    out = ledger.transfer_out(world.item, world.x, 4, "Borrowed by Engineering", 99, world.hod_x)
    inn = ledger.transfer_in(world.item, world.y, 4, "Borrowed from Operations", 99, world.hod_x)
    session.commit()

    owner = ledger.get_or_none(world.item, world.x)
    receiver = ledger.get_or_none(world.item, world.y)
    assert (owner.quantity_available, owner.quantity_reserved) == (6, 0)
    assert (receiver.quantity_available, receiver.quantity_reserved) == (4, 0)
    assert out.movement_type == MovementType.OUT and out.reference_id == 99
    assert inn.movement_type == MovementType.IN and inn.stock_id == receiver.id
    _assert_valid(owner)
    _assert_valid(receiver)


def test_transfer_in_adds_to_existing_record(world, ledger):
    ledger.transfer_in(world.item, world.x, 3, "Returned")
    assert ledger.get_or_none(world.item, world.x).quantity_available == 13


@pytest.mark.parametrize("qty", [0, -1, "abc", 1.5, 2**31, float("inf")])
def test_non_positive_quantities_rejected(world, ledger, qty):
    with pytest.raises(ValidationError):
        ledger.reserve(world.item, world.x, qty)


def test_movements_are_newest_first(world, ledger, session):
    ledger.transfer_in(world.item, world.x, 1, "first")
    ledger.transfer_in(world.item, world.x, 2, "second")
    session.commit()
    reasons = [m.reason for m in ledger.movements()]
    assert reasons[:2] == ["second", "first"]
    assert session.query(StockMovement).count() == 3
