# backend/app/schemas/review.py
"""Review schemas."""

from typing import Any, Optional

from pydantic import Field

from ..models.review import MAX_RATING, MIN_RATING
from ._strict_base import StrictRequestModel
from .base import OptionalUtcDatetime, StandardizedModel, UtcDatetime


class ReviewCreate(StrictRequestModel):
    booking_id: str
    # Range is enforced by the service so every caller gets the same error code.
    rating: int = Field(..., strict=True, description=f"Integer from {MIN_RATING} to {MAX_RATING}")
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewUpdate(StrictRequestModel):
    rating: Optional[int] = Field(None, strict=True)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(StandardizedModel):
    id: str
    booking_id: str
    teacher_id: Optional[str] = None
    student_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: UtcDatetime
    updated_at: OptionalUtcDatetime = None

    @classmethod
    def from_review(cls, review: Any) -> "ReviewResponse":
        booking = review.booking
        student = booking.student if booking is not None else None
        return cls(
            id=review.id,
            booking_id=review.booking_id,
            teacher_id=booking.teacher_id if booking is not None else None,
            student_name=student.full_name if student is not None else None,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
