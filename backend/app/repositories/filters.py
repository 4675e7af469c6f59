# backend/app/repositories/filters.py
"""
Predicate-list query filtering.

List queries build every optional filter as an entry in one tuple, with
``None`` standing for "filter not requested", and hand the tuple to
``Query.filter``. Nothing reassigns a query per optional parameter.

    predicates = build_predicates(
        Booking.teacher_id == teacher_id if teacher_id else None,
        Booking.status == status.value if status else None,
    )
    query = db.query(Booking).filter(*predicates)
"""

from datetime import date, datetime, time, timezone
from typing import Any, Optional, Tuple

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

Predicates = Tuple[ColumnElement[bool], ...]


def build_predicates(*candidates: Optional[ColumnElement[bool]]) -> Predicates:
    return tuple(candidate for candidate in candidates if candidate is not None)


def all_of(predicates: Predicates) -> ColumnElement[bool]:
    """AND of every predicate; TRUE when the list is empty."""
    if not predicates:
        return true()
    return and_(*predicates)


def ilike_any(term: Optional[str], *columns: Any) -> Optional[ColumnElement[bool]]:
    """Case-insensitive substring match on any of ``columns``; None for a blank term."""
    if not term or not term.strip():
        return None
    pattern = f"%{term.strip()}%"
    return or_(*(column.ilike(pattern) for column in columns))


def day_start(value: Optional[date]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def day_end(value: Optional[date]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.combine(value, time.max, tzinfo=timezone.utc)
