# services/stock_ledger.py
import logging
from typing import List, Optional

from db.models.stock import MovementType, StockMovement, StockRecord
from services.errors import (
    InsufficientStockError,
    InvariantViolation,
    ValidationError,
)
from services.validators import non_negative_int, positive_int

log = logging.getLogger(__name__)

INITIAL_STOCK_REASON = "Initial stock creation"


class StockLedger:
    """Available/reserved quantities per (item, department) plus movement log.

    Methods never commit; they run inside the caller's unit of work. Rows are
    read with ``FOR UPDATE`` before any mutation.
    """

    def __init__(self, session):
        self.session = session

    # ---------- reads ----------
    def get_or_none(self, item_id: int, department_id: int) -> Optional[StockRecord]:
        return (
            self.session.query(StockRecord)
            .filter_by(item_id=int(item_id), department_id=int(department_id))
            .one_or_none()
        )

    def movements(self, stock_id: Optional[int] = None) -> List[StockMovement]:
        q = self.session.query(StockMovement)
        if stock_id is not None:
            q = q.filter(StockMovement.stock_id == int(stock_id))
        return q.order_by(
            StockMovement.created_at.desc(), StockMovement.id.desc()
        ).all()

    # ---------- mutations ----------
    def reserve(self, item_id: int, department_id: int, qty) -> StockRecord:
        qty = positive_int(qty, "quantity")
        record = self._locked(item_id, department_id)
        if record is None or record.quantity_unreserved < qty:
            unreserved = record.quantity_unreserved if record else 0
            raise InsufficientStockError(
                f"Insufficient stock available: requested {qty}, "
                f"unreserved {unreserved}"
            )
        record.quantity_reserved += qty
        return record

    def release(self, item_id: int, department_id: int, qty) -> StockRecord:
        qty = positive_int(qty, "quantity")
        record = self._require(item_id, department_id)
        if record.quantity_reserved - qty < 0:
            self._violation(
                f"release of {qty} would make reserved negative "
                f"(stock #{record.id}, reserved {record.quantity_reserved})"
            )
        record.quantity_reserved -= qty
        return record

    def transfer_out(
        self,
        item_id: int,
        from_department_id: int,
        qty,
        reason: str,
        reference_id: Optional[int] = None,
        actor_id: Optional[int] = None,
    ) -> StockMovement:
        """Stock physically leaves; the quantity must have been reserved."""
        qty = positive_int(qty, "quantity")
        record = self._require(item_id, from_department_id)
        if record.quantity_reserved < qty or record.quantity_available < qty:
            self._violation(
                f"transfer out of {qty} exceeds stock #{record.id} "
                f"(available {record.quantity_available}, "
                f"reserved {record.quantity_reserved})"
            )
        record.quantity_available -= qty
        record.quantity_reserved -= qty
        return self._append(
            record, MovementType.OUT, qty, reason, reference_id, actor_id
        )

    def transfer_in(
        self,
        item_id: int,
        to_department_id: int,
        qty,
        reason: str,
        reference_id: Optional[int] = None,
        actor_id: Optional[int] = None,
    ) -> StockMovement:
        qty = positive_int(qty, "quantity")
        record = self._locked(item_id, to_department_id)
        if record is None:
            record = StockRecord(
                item_id=int(item_id),
                department_id=int(to_department_id),
                quantity_available=0,
                quantity_reserved=0,
            )
            self.session.add(record)
            self.session.flush()
        record.quantity_available += qty
        return self._append(record, MovementType.IN, qty, reason, reference_id, actor_id)

    def create_initial(
        self, item_id: int, department_id: int, qty, actor_id: Optional[int] = None
    ) -> StockRecord:
        qty = non_negative_int(qty, "quantity_available")
        if self._locked(item_id, department_id) is not None:
            raise ValidationError(
                "Stock already exists for this item in this department"
            )
        record = StockRecord(
            item_id=int(item_id),
            department_id=int(department_id),
            quantity_available=qty,
            quantity_reserved=0,
        )
        self.session.add(record)
        self.session.flush()
        # zero-quantity stocking opens the record without a movement
        if qty > 0:
            self._append(
                record, MovementType.IN, qty, INITIAL_STOCK_REASON, None, actor_id
            )
        return record

    # ---------- helpers ----------
    def _locked(self, item_id: int, department_id: int) -> Optional[StockRecord]:
        return (
            self.session.query(StockRecord)
            .filter_by(item_id=int(item_id), department_id=int(department_id))
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )

    def _require(self, item_id: int, department_id: int) -> StockRecord:
        record = self._locked(item_id, department_id)
        if record is None:
            self._violation(
                f"no stock record for item {item_id} in department {department_id}"
            )
        return record

    def _append(
        self,
        record: StockRecord,
        movement_type: MovementType,
        qty: int,
        reason: str,
        reference_id: Optional[int],
        actor_id: Optional[int],
    ) -> StockMovement:
        mv = StockMovement(
            stock_id=record.id,
            movement_type=movement_type,
            quantity=qty,
            reason=reason,
            reference_id=reference_id,
            performed_by=actor_id,
        )
        self.session.add(mv)
        self.session.flush()
        log.info(
            "stock #%s %s %s (%s)", record.id, movement_type.value, qty, reason
        )
        return mv

    @staticmethod
    def _violation(message: str):
        log.critical("ledger invariant violated: %s", message)
        raise InvariantViolation(message)
