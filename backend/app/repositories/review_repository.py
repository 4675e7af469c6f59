# backend/app/repositories/review_repository.py
from decimal import Decimal
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from ..models.review import Review
from .base_repository import BaseRepository, Page
from .filters import build_predicates

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    def __init__(self, db: Session):
        super().__init__(db, Review)

    def get_with_booking(self, review_id: str) -> Optional[Review]:
        return (
            self.db.query(Review)
            .options(joinedload(Review.booking))
            .filter(Review.id == review_id)
            .first()
        )

    def get_by_booking_id(self, booking_id: str) -> Optional[Review]:
        return self.find_one_by(booking_id=booking_id)

    def list_reviews(
        self,
        *,
        teacher_id: Optional[str] = None,
        min_rating: Optional[int] = None,
        max_rating: Optional[int] = None,
        student_profile_id: Optional[str] = None,
        page: int,
        limit: int,
    ) -> Page[Review]:
        predicates = build_predicates(
            Booking.teacher_id == teacher_id if teacher_id else None,
            Booking.student_profile_id == student_profile_id if student_profile_id else None,
            Review.rating >= min_rating if min_rating is not None else None,
            Review.rating <= max_rating if max_rating is not None else None,
        )
        query = (
            self.db.query(Review)
            .join(Booking, Review.booking_id == Booking.id)
            .options(joinedload(Review.booking).joinedload(Booking.student))
            .filter(*predicates)
            .order_by(Review.created_at.desc())
        )
        return self.paginate(query, page=page, limit=limit)

    def rating_aggregate(self, teacher_id: str) -> Tuple[Decimal, int]:
        """
        Mean rating and review count over reviews of the teacher's COMPLETED bookings.

        Returns ``(Decimal(0), 0)`` when the teacher has no reviews.
        """
        try:
            avg, count = (
                self.db.query(func.avg(Review.rating), func.count(Review.id))
                .join(Booking, Review.booking_id == Booking.id)
                .filter(
                    Booking.teacher_id == teacher_id,
                    Booking.status == BookingStatus.COMPLETED.value,
                )
                .one()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error aggregating ratings for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to aggregate ratings: {str(e)}")
        if not count:
            return Decimal(0), 0
        return Decimal(str(avg)), int(count)

    def recent(
        self,
        *,
        teacher_id: Optional[str] = None,
        student_profile_id: Optional[str] = None,
        limit: int = 5,
    ) -> List[Review]:
        predicates = build_predicates(
            Booking.teacher_id == teacher_id if teacher_id else None,
            Booking.student_profile_id == student_profile_id if student_profile_id else None,
        )
        return (
            self.db.query(Review)
            .join(Booking, Review.booking_id == Booking.id)
            .options(joinedload(Review.booking).joinedload(Booking.student))
            .filter(*predicates)
            .order_by(Review.created_at.desc())
            .limit(limit)
            .all()
        )
