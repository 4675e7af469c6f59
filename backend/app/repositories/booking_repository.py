# backend/app/repositories/booking_repository.py
"""
Booking Repository.

Handles booking queries: conflict lookups, role-scoped listings and the
aggregates used by dashboards and payout statistics.
"""

from datetime import datetime
from decimal import Decimal
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from ..models.teacher import Teacher
from ..utils.intervals import overlap_clause
from .base_repository import BaseRepository, Page
from .filters import build_predicates

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def _with_parties(self):
        return self.db.query(Booking).options(
            joinedload(Booking.teacher).joinedload(Teacher.profile),
            joinedload(Booking.student),
        )

    def get_with_details(self, booking_id: str) -> Optional[Booking]:
        try:
            return (
                self._with_parties()
                .options(joinedload(Booking.session), joinedload(Booking.review))
                .filter(Booking.id == booking_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to load booking: {str(e)}")

    def find_confirmed_overlapping(
        self,
        teacher_id: str,
        start: datetime,
        end: datetime,
        *,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        predicates = build_predicates(
            Booking.teacher_id == teacher_id,
            Booking.status == BookingStatus.CONFIRMED.value,
            overlap_clause(Booking.start_time, Booking.end_time, start, end),
            Booking.id != exclude_booking_id if exclude_booking_id else None,
        )
        try:
            return self.db.query(Booking).filter(*predicates).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking booking conflicts for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to check booking conflicts: {str(e)}")

    def list_bookings(
        self,
        *,
        teacher_id: Optional[str] = None,
        student_profile_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        page: int,
        limit: int,
    ) -> Page[Booking]:
        predicates = build_predicates(
            Booking.teacher_id == teacher_id if teacher_id else None,
            Booking.student_profile_id == student_profile_id if student_profile_id else None,
            Booking.status == status.value if status else None,
        )
        query = self._with_parties().filter(*predicates).order_by(Booking.created_at.desc())
        return self.paginate(query, page=page, limit=limit)

    def upcoming(
        self,
        *,
        now: datetime,
        teacher_id: Optional[str] = None,
        student_profile_id: Optional[str] = None,
        limit: int = 5,
    ) -> List[Booking]:
        """CONFIRMED bookings starting after ``now``, soonest first."""
        predicates = build_predicates(
            Booking.status == BookingStatus.CONFIRMED.value,
            Booking.start_time > now,
            Booking.teacher_id == teacher_id if teacher_id else None,
            Booking.student_profile_id == student_profile_id if student_profile_id else None,
        )
        return (
            self._with_parties()
            .filter(*predicates)
            .order_by(Booking.start_time)
            .limit(limit)
            .all()
        )

    def recent(
        self,
        *,
        teacher_id: Optional[str] = None,
        student_profile_id: Optional[str] = None,
        limit: int = 5,
    ) -> List[Booking]:
        predicates = build_predicates(
            Booking.teacher_id == teacher_id if teacher_id else None,
            Booking.student_profile_id == student_profile_id if student_profile_id else None,
        )
        return (
            self._with_parties()
            .filter(*predicates)
            .order_by(Booking.created_at.desc())
            .limit(limit)
            .all()
        )

    def sum_total_price(self, *, teacher_id: str, status: BookingStatus) -> Decimal:
        try:
            total = (
                self.db.query(func.coalesce(func.sum(Booking.total_price), 0))
                .filter(Booking.teacher_id == teacher_id, Booking.status == status.value)
                .scalar()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error summing bookings for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to compute earnings: {str(e)}")
        return Decimal(str(total or 0))

    def count_by_status(self, *, teacher_id: Optional[str] = None) -> Dict[str, int]:
        predicates = build_predicates(Booking.teacher_id == teacher_id if teacher_id else None)
        rows = (
            self.db.query(Booking.status, func.count(Booking.id))
            .filter(*predicates)
            .group_by(Booking.status)
            .all()
        )
        return {status: count for status, count in rows}
