# backend/app/repositories/tutoring_session_repository.py
import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ..models.booking import Booking, BookingStatus
from ..models.teacher import Teacher
from ..models.tutoring_session import TutoringSession
from .base_repository import BaseRepository, Page
from .filters import build_predicates

logger = logging.getLogger(__name__)


class TutoringSessionRepository(BaseRepository[TutoringSession]):
    def __init__(self, db: Session):
        super().__init__(db, TutoringSession)

    def get_by_booking_id(self, booking_id: str) -> Optional[TutoringSession]:
        return self.find_one_by(booking_id=booking_id)

    def get_with_booking(self, session_id: str) -> Optional[TutoringSession]:
        return (
            self.db.query(TutoringSession)
            .options(joinedload(TutoringSession.booking))
            .filter(TutoringSession.id == session_id)
            .first()
        )

    def list_sessions(
        self,
        *,
        teacher_id: Optional[str] = None,
        student_profile_id: Optional[str] = None,
        booking_status: Optional[BookingStatus] = None,
        page: int,
        limit: int,
    ) -> Page[TutoringSession]:
        predicates = build_predicates(
            Booking.teacher_id == teacher_id if teacher_id else None,
            Booking.student_profile_id == student_profile_id if student_profile_id else None,
            Booking.status == booking_status.value if booking_status else None,
        )
        query = (
            self.db.query(TutoringSession)
            .join(Booking, TutoringSession.booking_id == Booking.id)
            .options(
                joinedload(TutoringSession.booking)
                .joinedload(Booking.teacher)
                .joinedload(Teacher.profile),
                joinedload(TutoringSession.booking).joinedload(Booking.student),
            )
            .filter(*predicates)
            .order_by(Booking.start_time.desc())
        )
        return self.paginate(query, page=page, limit=limit)
