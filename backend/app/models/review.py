# backend/app/models/review.py
"""
Review model.

Design notes:
- One review per booking, enforced by a unique constraint
- Rating is an integer in [1, 5]
- Teacher aggregates are recomputed from this table, never incremented
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

MIN_RATING = 1
MAX_RATING = 5


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True), nullable=True, onupdate=lambda: datetime.now(timezone.utc)
    )

    booking = relationship("Booking", back_populates="review")

    __table_args__ = (
        CheckConstraint(
            f"rating >= {MIN_RATING} AND rating <= {MAX_RATING}", name="ck_reviews_rating_range"
        ),
    )

    def __repr__(self) -> str:
        return f"<Review booking={self.booking_id} rating={self.rating}>"
