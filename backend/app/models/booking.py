# backend/app/models/booking.py
"""
Booking model.

A booking reserves one availability slot of a teacher for one student and
moves through the lifecycle::

    PENDING -> PAID -> CONFIRMED -> COMPLETED
    PENDING/PAID/CONFIRMED -> CANCELLED
    PAID -> REFUNDED

The partial unique index on ``(teacher_id, start_time, end_time)`` backs the
application-level overlap check.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "PENDING"  # Awaiting payment
    PAID = "PAID"  # Gateway settled
    CONFIRMED = "CONFIRMED"  # Teacher confirmed or started the session
    COMPLETED = "COMPLETED"  # Session ended
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class BookingMode(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


# Legal transitions for non-admin actors. Admins may force any transition.
BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.PAID, BookingStatus.CANCELLED}),
    BookingStatus.PAID: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.REFUNDED}
    ),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.REFUNDED: frozenset(),
}

TERMINAL_BOOKING_STATUSES: FrozenSet[BookingStatus] = frozenset(
    status for status, targets in BOOKING_TRANSITIONS.items() if not targets
)


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS[current]


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    teacher_id = Column(
        String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_profile_id = Column(
        String(26), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slot_id = Column(
        String(26), ForeignKey("availability_slots.id", ondelete="SET NULL"), nullable=True
    )

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    total_price = Column(Numeric(12, 2), nullable=False)
    mode = Column(String(10), nullable=False, default=BookingMode.ONLINE.value)
    notes = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=lambda: datetime.now(timezone.utc),
    )

    teacher = relationship("Teacher")
    student = relationship("Profile", foreign_keys=[student_profile_id])
    slot = relationship("AvailabilitySlot")
    payments = relationship("Payment", back_populates="booking", cascade="all, delete-orphan")
    session = relationship(
        "TutoringSession", back_populates="booking", uselist=False, cascade="all, delete-orphan"
    )
    review = relationship(
        "Review", back_populates="booking", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        # Cancelled and refunded bookings release their window for rebooking.
        Index(
            "uq_bookings_teacher_window",
            "teacher_id",
            "start_time",
            "end_time",
            unique=True,
            postgresql_where=text("status NOT IN ('CANCELLED', 'REFUNDED')"),
            sqlite_where=text("status NOT IN ('CANCELLED', 'REFUNDED')"),
        ),
        CheckConstraint("start_time < end_time", name="ck_bookings_time_order"),
        CheckConstraint("total_price >= 0", name="ck_bookings_price_non_negative"),
        CheckConstraint(
            "status IN ('PENDING','PAID','CONFIRMED','COMPLETED','CANCELLED','REFUNDED')",
            name="ck_bookings_status",
        ),
        CheckConstraint("mode IN ('ONLINE','OFFLINE')", name="ck_bookings_mode"),
        Index("idx_bookings_teacher_status", "teacher_id", "status"),
    )

    @property
    def status_enum(self) -> BookingStatus:
        return BookingStatus(self.status)

    def __repr__(self) -> str:
        return f"<Booking {self.id} teacher={self.teacher_id} status={self.status}>"
