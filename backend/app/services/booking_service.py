# backend/app/services/booking_service.py
"""
Booking Service.

Owns the booking lifecycle:

    PENDING -> PAID -> CONFIRMED -> COMPLETED
    PENDING/PAID/CONFIRMED -> CANCELLED
    PAID -> REFUNDED

Who may request which transition is decided by the permission matrix in
``app.core.permissions``; which transitions are legal for non-admins is
decided by ``BOOKING_TRANSITIONS``. Admins may force any transition, but the
"no overlapping CONFIRMED bookings per teacher" invariant holds for everyone.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.enums import Action, RoleName
from ..core.exceptions import (
    AlreadyBookedException,
    BookingConflictException,
    ConflictException,
    InvalidStateException,
    NotFoundException,
)
from ..core.metrics import BOOKING_TRANSITIONS_TOTAL
from ..core.permissions import authorize
from ..models.booking import (
    Booking,
    BookingMode,
    BookingStatus,
    can_transition,
)
from ..models.tutoring_session import TutoringSession
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from ..utils.intervals import duration_hours
from .base import BaseService
from .rating_service import RatingService

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")

# Statuses whose booking no longer holds its availability slot.
SLOT_RELEASING_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.REFUNDED})


def calculate_total_price(price_per_hour: Decimal, start: datetime, end: datetime) -> Decimal:
    """Hourly rate times slot duration in hours, rounded to cents."""
    rate = Decimal(str(price_per_hour or 0))
    return (rate * duration_hours(start, end)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def transition_action(target: BookingStatus) -> Action:
    if target is BookingStatus.CANCELLED:
        return Action.BOOKING_CANCEL
    if target is BookingStatus.CONFIRMED:
        return Action.BOOKING_CONFIRM
    return Action.BOOKING_OVERRIDE


def owns_booking(principal: Principal, booking: Booking) -> bool:
    """Ownership as seen from the principal's role: the student or the teacher of the booking."""
    if principal.role is RoleName.STUDENT:
        return booking.student_profile_id == principal.profile_id
    if principal.role is RoleName.TEACHER:
        return principal.teacher_id is not None and booking.teacher_id == principal.teacher_id
    return False


class BookingService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)
        self.session_repository = RepositoryFactory.create_tutoring_session_repository(db)

    # ========== Creation ==========

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        principal: Principal,
        slot_id: str,
        mode: BookingMode = BookingMode.ONLINE,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Book a free availability slot for the calling student.

        The booking insert and the slot's booked flag are committed together.

        Raises:
            ForbiddenException: caller is not a student
            NotFoundException: slot does not exist
            AlreadyBookedException: slot is already booked
            BookingConflictException: a CONFIRMED booking of the teacher overlaps the slot
        """
        authorize(principal, Action.BOOKING_CREATE)

        with self.transaction():
            slot = self.availability_repository.get_for_update(slot_id)
            if slot is None:
                raise NotFoundException("Availability slot not found", code="SLOT_NOT_FOUND")
            if slot.is_booked:
                raise AlreadyBookedException(slot_id)

            self._ensure_no_confirmed_overlap(slot.teacher_id, slot.start_time, slot.end_time)

            teacher = self.teacher_repository.get_by_id(slot.teacher_id)
            if teacher is None:
                raise NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND")

            booking = self.booking_repository.create(
                teacher_id=slot.teacher_id,
                student_profile_id=principal.profile_id,
                slot_id=slot.id,
                start_time=slot.start_time,
                end_time=slot.end_time,
                status=BookingStatus.PENDING.value,
                total_price=calculate_total_price(
                    teacher.price_per_hour, slot.start_time, slot.end_time
                ),
                mode=mode.value,
                notes=notes,
            )
            self.availability_repository.update(slot.id, is_booked=True)

        self.logger.info(
            f"Booking {booking.id} created for slot {slot_id} by profile {principal.profile_id}"
        )
        return booking

    # ========== Queries ==========

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        principal: Principal,
        *,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Booking]:
        """Bookings visible to the caller: own as student, own as teacher, all as admin."""
        scope: dict = {}
        if principal.role is RoleName.STUDENT:
            scope["student_profile_id"] = principal.profile_id
        elif principal.role is RoleName.TEACHER:
            scope["teacher_id"] = self.require_teacher_id(principal)
        return self.booking_repository.list_bookings(status=status, page=page, limit=limit, **scope)

    def get_booking(self, principal: Principal, booking_id: str) -> Booking:
        booking = self.booking_repository.get_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if not principal.is_admin and not owns_booking(principal, booking):
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        return booking

    # ========== Status transitions ==========

    @BaseService.measure_operation("update_booking_status")
    def update_status(
        self, principal: Principal, booking_id: str, new_status: BookingStatus
    ) -> Booking:
        """
        Apply a requested status change.

        student (owner) -> CANCELLED; teacher (owner) -> CONFIRMED; admin -> any.
        """
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")

        authorize(principal, transition_action(new_status), is_owner=owns_booking(principal, booking))

        current = booking.status_enum
        if current is new_status:
            return booking
        if not principal.is_admin and not can_transition(current, new_status):
            raise InvalidStateException(
                f"Cannot move booking from {current.value} to {new_status.value}",
                current=current.value,
                requested=new_status.value,
            )

        with self.transaction():
            self._apply_status(booking, new_status)

        self.logger.info(
            f"Booking {booking_id} moved {current.value} -> {new_status.value} "
            f"by {principal.role.value} {principal.user_id}"
        )
        return booking

    @BaseService.measure_operation("start_session")
    def start_session(self, principal: Principal, session_id: str) -> TutoringSession:
        """Owning teacher starts the session: booking becomes CONFIRMED, started_at stamped."""
        session, booking = self._load_owned_session(principal, session_id)

        if session.started_at is not None and booking.status_enum is BookingStatus.CONFIRMED:
            return session
        if booking.status_enum not in (BookingStatus.PAID, BookingStatus.CONFIRMED):
            raise InvalidStateException(
                "Only paid bookings can be started",
                current=booking.status,
                requested=BookingStatus.CONFIRMED.value,
            )

        with self.transaction():
            self._apply_status(booking, BookingStatus.CONFIRMED)
            self.session_repository.update(session.id, started_at=datetime.now(timezone.utc))

        self.logger.info(f"Session {session_id} started for booking {booking.id}")
        return session

    @BaseService.measure_operation("end_session")
    def end_session(self, principal: Principal, session_id: str) -> TutoringSession:
        """Owning teacher ends the session: booking becomes COMPLETED, ended_at stamped."""
        session, booking = self._load_owned_session(principal, session_id)

        if booking.status_enum is not BookingStatus.CONFIRMED or session.started_at is None:
            raise InvalidStateException(
                "Session must be started before it can end",
                current=booking.status,
                requested=BookingStatus.COMPLETED.value,
            )

        with self.transaction():
            self._apply_status(booking, BookingStatus.COMPLETED)
            self.session_repository.update(session.id, ended_at=datetime.now(timezone.utc))

        self.logger.info(f"Session {session_id} ended; booking {booking.id} completed")
        return session

    # ========== Internals ==========

    def apply_status(self, booking: Booking, new_status: BookingStatus) -> None:
        """
        Write a status change with its slot side effects; caller owns the transaction.

        Used by payment reconciliation, which has already decided the change is legal.
        """
        self._apply_status(booking, new_status)

    def _apply_status(self, booking: Booking, new_status: BookingStatus) -> None:
        current = booking.status_enum
        if new_status is BookingStatus.CONFIRMED:
            self._ensure_no_confirmed_overlap(
                booking.teacher_id,
                booking.start_time,
                booking.end_time,
                exclude_booking_id=booking.id,
            )

        if new_status in SLOT_RELEASING_STATUSES and current not in SLOT_RELEASING_STATUSES:
            self.availability_repository.release(booking.slot_id)
        elif current in SLOT_RELEASING_STATUSES and new_status not in SLOT_RELEASING_STATUSES:
            self._reclaim_slot(booking)

        self.booking_repository.update(booking.id, status=new_status.value)
        if BookingStatus.COMPLETED in (current, new_status):
            # Ratings only count COMPLETED bookings.
            RatingService(self.db).recompute(booking.teacher_id)
        BOOKING_TRANSITIONS_TOTAL.labels(from_status=current.value, to_status=new_status.value).inc()

    def _reclaim_slot(self, booking: Booking) -> None:
        """Re-hold the slot when an admin revives a cancelled or refunded booking."""
        if not booking.slot_id:
            return
        slot = self.availability_repository.get_for_update(booking.slot_id)
        if slot is None:
            return
        if slot.is_booked:
            raise ConflictException(
                "The slot has been booked by someone else", code="SLOT_TAKEN"
            )
        self.availability_repository.update(slot.id, is_booked=True)

    def _ensure_no_confirmed_overlap(
        self,
        teacher_id: str,
        start: datetime,
        end: datetime,
        *,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        conflicts = self.booking_repository.find_confirmed_overlapping(
            teacher_id, start, end, exclude_booking_id=exclude_booking_id
        )
        if conflicts:
            raise BookingConflictException(
                details={"conflicting_booking_id": conflicts[0].id},
            )

    def _load_owned_session(self, principal: Principal, session_id: str):
        session = self.session_repository.get_with_booking(session_id)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        booking = session.booking
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        authorize(principal, Action.SESSION_MANAGE, is_owner=owns_booking(principal, booking))
        return session, booking
