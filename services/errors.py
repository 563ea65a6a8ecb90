# services/errors.py
"""Typed failures raised by the core; the HTTP layer maps them to statuses."""


class ProcurementError(Exception):
    """Base class for every error the core surfaces to its callers."""


class ValidationError(ProcurementError):
    """Malformed input: missing or invalid fields."""


class NotFoundError(ProcurementError):
    """A referenced request, requisition, stock record or catalog row is missing."""


class InsufficientStockError(ProcurementError):
    """Not enough unreserved quantity to satisfy a borrow."""


class InvalidStateTransition(ProcurementError):
    """Operation attempted on a terminal request or an already-closed gate."""


class InvariantViolation(ProcurementError):
    """A ledger mutation would produce a negative quantity.

    Indicates a sequencing bug upstream; never a normal user-facing error.
    """
