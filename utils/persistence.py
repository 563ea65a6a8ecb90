# utils/persistence.py
import enum
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import inspect as sa_inspect


@contextmanager
def unit_of_work(session):
    """Commit on success, roll back on any error and re-raise it."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def _jsonable(value):
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


def snapshot(obj) -> dict:
    """Column values of a mapped object as a JSON-safe dict."""
    mapper = sa_inspect(obj).mapper
    return {attr.key: _jsonable(getattr(obj, attr.key)) for attr in mapper.column_attrs}


def row_to_dict(obj, exclude=()) -> dict:
    data = snapshot(obj)
    for key in exclude:
        data.pop(key, None)
    return data
