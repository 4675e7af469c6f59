# backend/app/services/review_service.py
"""
Review Service.

Students review a booking once it is COMPLETED. Every create, update and
delete triggers a full recompute of the teacher's rating in the same
transaction.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.enums import Action
from ..core.exceptions import (
    ConflictException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from ..core.permissions import authorize
from ..models.booking import BookingStatus
from ..models.review import MAX_RATING, MIN_RATING, Review
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .rating_service import RatingService

logger = logging.getLogger(__name__)


def validate_rating(rating: object) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not (
        MIN_RATING <= rating <= MAX_RATING
    ):
        raise ValidationException(
            f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}",
            code="INVALID_RATING",
            details={"rating": rating},
        )
    return rating


class ReviewService(BaseService):
    def __init__(self, db: Session, rating_service: Optional[RatingService] = None):
        super().__init__(db)
        self.review_repository = RepositoryFactory.create_review_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.rating_service = rating_service or RatingService(db)

    @BaseService.measure_operation("list_reviews")
    def list_reviews(
        self,
        *,
        teacher_id: Optional[str] = None,
        min_rating: Optional[int] = None,
        max_rating: Optional[int] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Review]:
        if min_rating is not None and max_rating is not None and min_rating > max_rating:
            raise ValidationException("min_rating must not exceed max_rating")
        return self.review_repository.list_reviews(
            teacher_id=teacher_id,
            min_rating=min_rating,
            max_rating=max_rating,
            page=page,
            limit=limit,
        )

    @BaseService.measure_operation("submit_review")
    def create_review(
        self,
        principal: Principal,
        booking_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        """
        Submit the single review for a completed booking.

        Raises:
            ValidationException: rating outside 1-5
            NotFoundException: booking does not exist
            ForbiddenException: caller is not the booking's student
            InvalidStateException: booking not COMPLETED
            ConflictException: booking already reviewed
        """
        validate_rating(rating)
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")

        authorize(
            principal,
            Action.REVIEW_CREATE,
            is_owner=booking.student_profile_id == principal.profile_id,
        )
        if booking.status_enum is not BookingStatus.COMPLETED:
            raise InvalidStateException(
                "Only completed bookings can be reviewed", current=booking.status
            )
        if self.review_repository.get_by_booking_id(booking_id) is not None:
            raise ConflictException("This booking has already been reviewed", code="REVIEW_EXISTS")

        with self.transaction():
            review = self.review_repository.create(
                booking_id=booking_id, rating=rating, comment=comment
            )
            self.rating_service.recompute(booking.teacher_id)

        self.logger.info(f"Review {review.id} submitted for booking {booking_id} (rating={rating})")
        return review

    @BaseService.measure_operation("update_review")
    def update_review(
        self,
        principal: Principal,
        review_id: str,
        *,
        rating: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> Review:
        review = self._get_review(review_id)
        authorize(
            principal,
            Action.REVIEW_UPDATE,
            is_owner=review.booking.student_profile_id == principal.profile_id,
        )
        changes = {}
        if rating is not None:
            changes["rating"] = validate_rating(rating)
        if comment is not None:
            changes["comment"] = comment
        if not changes:
            return review

        with self.transaction():
            self.review_repository.update(review_id, **changes)
            self.rating_service.recompute(review.booking.teacher_id)
        return review

    @BaseService.measure_operation("delete_review")
    def delete_review(self, principal: Principal, review_id: str) -> None:
        review = self._get_review(review_id)
        authorize(
            principal,
            Action.REVIEW_DELETE,
            is_owner=review.booking.student_profile_id == principal.profile_id,
        )
        teacher_id = review.booking.teacher_id
        with self.transaction():
            self.review_repository.delete(review_id)
            self.rating_service.recompute(teacher_id)
        self.logger.info(f"Review {review_id} deleted by {principal.user_id}")

    def _get_review(self, review_id: str) -> Review:
        review = self.review_repository.get_with_booking(review_id)
        if review is None:
            raise NotFoundException("Review not found", code="REVIEW_NOT_FOUND")
        return review
