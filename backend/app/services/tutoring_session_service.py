# backend/app/services/tutoring_session_service.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.enums import Action, RoleName
from ..core.exceptions import InvalidStateException, NotFoundException
from ..core.permissions import authorize
from ..models.booking import TERMINAL_BOOKING_STATUSES, BookingStatus
from ..models.tutoring_session import TutoringSession
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .booking_service import owns_booking

logger = logging.getLogger(__name__)


class TutoringSessionService(BaseService):
    """Meeting details for bookings. Starting and ending sessions lives in BookingService."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.session_repository = RepositoryFactory.create_tutoring_session_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("list_sessions")
    def list_sessions(
        self,
        principal: Principal,
        *,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[TutoringSession]:
        scope: dict = {}
        if principal.role is RoleName.STUDENT:
            scope["student_profile_id"] = principal.profile_id
        elif principal.role is RoleName.TEACHER:
            scope["teacher_id"] = self.require_teacher_id(principal)
        return self.session_repository.list_sessions(
            booking_status=status, page=page, limit=limit, **scope
        )

    @BaseService.measure_operation("upsert_session")
    def upsert_session(
        self,
        principal: Principal,
        booking_id: str,
        *,
        meeting_link: Optional[str] = None,
        location: Optional[str] = None,
    ) -> TutoringSession:
        """Create or update the single session of the teacher's booking."""
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        authorize(principal, Action.SESSION_MANAGE, is_owner=owns_booking(principal, booking))

        if booking.status_enum in TERMINAL_BOOKING_STATUSES:
            raise InvalidStateException(
                "Sessions cannot be scheduled for closed bookings", current=booking.status
            )

        with self.transaction():
            session = self.session_repository.get_by_booking_id(booking_id)
            if session is None:
                session = self.session_repository.create(
                    booking_id=booking_id, meeting_link=meeting_link, location=location
                )
                self.logger.info(f"Session {session.id} created for booking {booking_id}")
            else:
                changes = {
                    key: value
                    for key, value in (("meeting_link", meeting_link), ("location", location))
                    if value is not None
                }
                if changes:
                    self.session_repository.update(session.id, **changes)
        return session
