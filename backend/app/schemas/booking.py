# backend/app/schemas/booking.py
"""Booking and tutoring session schemas."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator

from ..models.booking import BookingMode, BookingStatus
from ._strict_base import StrictRequestModel
from .base import Money, OptionalUtcDatetime, StandardizedModel, UtcDatetime


def _full_name(profile: Any) -> Optional[str]:
    return getattr(profile, "full_name", None) if profile is not None else None


class BookingCreate(StrictRequestModel):
    slot_id: str = Field(..., description="Availability slot to book")
    mode: BookingMode = BookingMode.ONLINE
    notes: Optional[str] = Field(None, max_length=1000, description="Optional note for the teacher")

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class BookingStatusUpdate(StrictRequestModel):
    status: BookingStatus


class BookingResponse(StandardizedModel):
    id: str
    teacher_id: str
    teacher_name: Optional[str] = None
    student_profile_id: str
    student_name: Optional[str] = None
    slot_id: Optional[str] = None
    start_time: UtcDatetime
    end_time: UtcDatetime
    status: BookingStatus
    total_price: Money
    mode: BookingMode
    notes: Optional[str] = None
    created_at: UtcDatetime

    @classmethod
    def from_booking(cls, booking: Any) -> "BookingResponse":
        teacher = booking.teacher
        return cls(
            id=booking.id,
            teacher_id=booking.teacher_id,
            teacher_name=_full_name(teacher.profile) if teacher is not None else None,
            student_profile_id=booking.student_profile_id,
            student_name=_full_name(booking.student),
            slot_id=booking.slot_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            status=booking.status,
            total_price=Decimal(str(booking.total_price)),
            mode=booking.mode,
            notes=booking.notes,
            created_at=booking.created_at,
        )


class SessionUpsert(StrictRequestModel):
    booking_id: str
    meeting_link: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=1000)


class SessionResponse(StandardizedModel):
    id: str
    booking_id: str
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    started_at: OptionalUtcDatetime = None
    ended_at: OptionalUtcDatetime = None
    booking_status: Optional[BookingStatus] = None
    start_time: OptionalUtcDatetime = None
    end_time: OptionalUtcDatetime = None

    @classmethod
    def from_session(cls, session: Any) -> "SessionResponse":
        booking = session.booking
        return cls(
            id=session.id,
            booking_id=session.booking_id,
            meeting_link=session.meeting_link,
            location=session.location,
            started_at=session.started_at,
            ended_at=session.ended_at,
            booking_status=booking.status if booking is not None else None,
            start_time=booking.start_time if booking is not None else None,
            end_time=booking.end_time if booking is not None else None,
        )
