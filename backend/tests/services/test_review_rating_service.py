# backend/tests/services/test_review_rating_service.py
"""
Reviews and the teacher rating aggregate.

The aggregate is recomputed from scratch on every review mutation, so the
stored average always equals the mean of the current reviews.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    ValidationException,
)
from app.models.booking import BookingStatus
from app.services.booking_service import BookingService
from app.services.rating_service import RatingService, round_rating
from app.services.review_service import ReviewService, validate_rating

BASE_TIME = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db):
    return ReviewService(db)


@pytest.fixture
def completed_bookings(student, teacher, make_booking):
    """Three completed lessons with the same teacher on consecutive days."""
    return [
        make_booking(
            student,
            teacher,
            status=BookingStatus.COMPLETED,
            start=BASE_TIME + timedelta(days=day),
        )
        for day in range(3)
    ]


@pytest.mark.parametrize("rating", [0, 6, -1, 4.5, "5", True])
def test_validate_rating_rejects_out_of_range_and_non_integers(rating):
    with pytest.raises(ValidationException):
        validate_rating(rating)


def test_round_rating_is_half_up():
    assert round_rating(Decimal("4.335")) == Decimal("4.34")
    assert round_rating(Decimal("3.3333333")) == Decimal("3.33")


class TestAggregate:
    def test_average_and_count_follow_every_mutation(
        self, service, db, student, teacher, completed_bookings
    ):
        reviews = [
            service.create_review(student.principal, booking.id, rating)
            for booking, rating in zip(completed_bookings, [5, 4, 3])
        ]
        db.refresh(teacher.teacher)
        assert teacher.teacher.avg_rating == Decimal("4.00")
        assert teacher.teacher.review_count == 3

        service.delete_review(student.principal, reviews[2].id)
        db.refresh(teacher.teacher)
        assert teacher.teacher.avg_rating == Decimal("4.50")
        assert teacher.teacher.review_count == 2

        service.update_review(student.principal, reviews[0].id, rating=1)
        db.refresh(teacher.teacher)
        assert teacher.teacher.avg_rating == Decimal("2.50")
        assert teacher.teacher.review_count == 2

    def test_no_reviews_means_zero(self, db, teacher):
        summary = RatingService(db).recompute(teacher.teacher.id)
        assert summary.avg_rating == Decimal("0.00")
        assert summary.review_count == 0

    def test_booking_leaving_completed_drops_out_of_the_aggregate(
        self, service, db, admin, student, teacher, completed_bookings
    ):
        service.create_review(student.principal, completed_bookings[0].id, 5)
        service.create_review(student.principal, completed_bookings[1].id, 3)
        bookings = BookingService(db)

        bookings.update_status(admin.principal, completed_bookings[0].id, BookingStatus.REFUNDED)
        db.refresh(teacher.teacher)
        assert teacher.teacher.avg_rating == Decimal("3.00")
        assert teacher.teacher.review_count == 1

        bookings.update_status(admin.principal, completed_bookings[1].id, BookingStatus.CANCELLED)
        db.refresh(teacher.teacher)
        assert teacher.teacher.avg_rating == Decimal("0.00")
        assert teacher.teacher.review_count == 0

    def test_booking_returning_to_completed_counts_again(
        self, service, db, admin, student, teacher, completed_bookings
    ):
        service.create_review(student.principal, completed_bookings[0].id, 4)
        bookings = BookingService(db)
        bookings.update_status(admin.principal, completed_bookings[0].id, BookingStatus.CONFIRMED)
        db.refresh(teacher.teacher)
        assert teacher.teacher.review_count == 0

        bookings.update_status(admin.principal, completed_bookings[0].id, BookingStatus.COMPLETED)
        db.refresh(teacher.teacher)
        assert teacher.teacher.avg_rating == Decimal("4.00")
        assert teacher.teacher.review_count == 1

    def test_other_teachers_are_untouched(
        self, service, db, student, teacher, other_teacher, completed_bookings
    ):
        service.create_review(student.principal, completed_bookings[0].id, 5)
        db.refresh(other_teacher.teacher)
        assert other_teacher.teacher.review_count == 0


class TestReviewRules:
    def test_rating_outside_range_is_rejected(self, service, student, completed_bookings):
        with pytest.raises(ValidationException) as exc_info:
            service.create_review(student.principal, completed_bookings[0].id, 6)
        assert exc_info.value.code == "INVALID_RATING"

    def test_only_completed_bookings_can_be_reviewed(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.CONFIRMED)
        with pytest.raises(InvalidStateException):
            service.create_review(student.principal, booking.id, 5)

    def test_one_review_per_booking(self, service, student, completed_bookings):
        service.create_review(student.principal, completed_bookings[0].id, 5)
        with pytest.raises(ConflictException):
            service.create_review(student.principal, completed_bookings[0].id, 4)

    def test_only_the_booking_student_reviews(self, service, other_student, completed_bookings):
        with pytest.raises(ForbiddenException):
            service.create_review(other_student.principal, completed_bookings[0].id, 5)

    def test_teacher_cannot_review(self, service, teacher, completed_bookings):
        with pytest.raises(ForbiddenException):
            service.create_review(teacher.principal, completed_bookings[0].id, 5)

    def test_admin_may_delete_but_not_edit(self, service, admin, student, completed_bookings):
        review = service.create_review(student.principal, completed_bookings[0].id, 5)

        with pytest.raises(ForbiddenException):
            service.update_review(admin.principal, review.id, rating=1)
        service.delete_review(admin.principal, review.id)

    def test_list_filters_by_teacher_and_rating(
        self, service, student, teacher, other_teacher, completed_bookings
    ):
        for booking, rating in zip(completed_bookings, [5, 4, 2]):
            service.create_review(student.principal, booking.id, rating)

        page = service.list_reviews(teacher_id=teacher.teacher.id, min_rating=4)
        assert page.total == 2
        assert sorted(r.rating for r in page.items) == [4, 5]
        assert service.list_reviews(teacher_id=other_teacher.teacher.id).total == 0

    def test_list_rejects_inverted_rating_range(self, service):
        with pytest.raises(ValidationException):
            service.list_reviews(min_rating=4, max_rating=2)
