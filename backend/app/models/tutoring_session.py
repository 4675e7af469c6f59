# backend/app/models/tutoring_session.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class TutoringSession(Base):
    """Delivery details of a booking: where it happens and when it actually ran."""

    __tablename__ = "sessions"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    meeting_link = Column(String(500), nullable=True)
    location = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    booking = relationship("Booking", back_populates="session")

    def __repr__(self) -> str:
        return f"<TutoringSession booking={self.booking_id} started={self.started_at}>"
