# services/validators.py
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from services.errors import ValidationError

CENT = Decimal("0.01")
# upper bound of the 32-bit INTEGER columns quantities and ids are stored in
MAX_INT = 2**31 - 1


def positive_int(value, field: str) -> int:
    """Quantities are whole units >= 1; bools and fractional values are refused."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer") from None
    if isinstance(value, float) and number != value:
        raise ValidationError(f"{field} must be a whole number")
    if number < 1:
        raise ValidationError(f"{field} must be at least 1")
    if number > MAX_INT:
        raise ValidationError(f"{field} must be at most {MAX_INT}")
    return number


def non_negative_int(value, field: str) -> int:
    if value in (None, ""):
        return 0
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer") from None
    if number < 0:
        raise ValidationError(f"{field} must not be negative")
    if number > MAX_INT:
        raise ValidationError(f"{field} must be at most {MAX_INT}")
    return number


def required_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def optional_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def money(value, field: str, minimum: Decimal = CENT) -> Decimal:
    if isinstance(value, bool) or value in (None, ""):
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a decimal amount") from None
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a decimal amount")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return amount


def as_datetime(value, field: str, required: bool = True) -> Optional[datetime]:
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"{field} must be an ISO date") from None
    raise ValidationError(f"{field} must be a date")


def identifier(value, field: str) -> int:
    if isinstance(value, bool) or value in (None, ""):
        raise ValidationError(f"{field} is required")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer id") from None
    if not 1 <= number <= MAX_INT:
        raise ValidationError(f"{field} is not a valid id")
    return number
