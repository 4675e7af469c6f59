# backend/app/utils/intervals.py
"""
Half-open time interval helpers.

An interval ``[start, end)`` includes its start and excludes its end, so
back-to-back windows (10:00-11:00 and 11:00-12:00) do not overlap. This is
the only definition of "overlap" in the codebase: ``overlaps`` for Python
values and ``overlap_clause`` for the equivalent SQL predicate.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Sequence, Tuple

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

Interval = Tuple[datetime, datetime]


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_interval(start: datetime, end: datetime) -> None:
    if as_utc(start) >= as_utc(end):
        raise ValueError(f"Interval start {start.isoformat()} must be before end {end.isoformat()}")


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    True when ``[a_start, a_end)`` and ``[b_start, b_end)`` share any instant.

    Covers every shape: a starts inside b, a ends inside b, a contains b,
    and b contains a.
    """
    return as_utc(a_start) < as_utc(b_end) and as_utc(b_start) < as_utc(a_end)


def overlap_clause(start_col: Any, end_col: Any, start: datetime, end: datetime) -> ColumnElement[bool]:
    """SQL form of ``overlaps`` against a ``[start_col, end_col)`` column pair."""
    return and_(start_col < end, end_col > start)


def first_overlapping_pair(intervals: Sequence[Interval]) -> Optional[Tuple[int, int]]:
    """
    Indices of the first pair of mutually overlapping intervals in ``intervals``.

    Sorting by start means only neighbours need comparing.
    """
    order = sorted(range(len(intervals)), key=lambda i: as_utc(intervals[i][0]))
    for left, right in zip(order, order[1:]):
        if overlaps(*intervals[left], *intervals[right]):
            return (left, right)
    return None


def duration_hours(start: datetime, end: datetime) -> Decimal:
    seconds = (as_utc(end) - as_utc(start)).total_seconds()
    return Decimal(str(seconds)) / Decimal(3600)


def format_interval(start: datetime, end: datetime) -> str:
    return f"[{as_utc(start).isoformat()}, {as_utc(end).isoformat()})"
