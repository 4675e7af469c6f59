# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the tutoring marketplace.

Services raise these; the API layer converts them into HTTP responses
through ``to_http_exception`` (or the global handlers in ``app.errors``).
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Malformed or out-of-range input (rating outside 1-5, unknown status, ...)."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(DomainException):
    """Raised when no valid credentials accompany the request."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when the principal lacks the role or ownership for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(DomainException):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when a write collides with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    status_code = HTTP_422_UNPROCESSABLE


class UpstreamFailureException(DomainException):
    """Raised when a third-party collaborator (payment gateway) fails."""

    status_code = status.HTTP_502_BAD_GATEWAY


class ServiceException(DomainException):
    """Raised when a service operation fails unexpectedly."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details,
            },
        )


# Specific business exceptions


class SlotConflictException(ConflictException):
    """Raised when a proposed availability slot overlaps another slot."""

    def __init__(self, new_range: str, conflicting_range: str):
        super().__init__(
            message=f"Slot {new_range} overlaps existing slot {conflicting_range}",
            code="SLOT_CONFLICT",
            details={"new_slot": new_range, "conflicting_slot": conflicting_range},
        )


class AlreadyBookedException(ConflictException):
    def __init__(self, slot_id: str):
        super().__init__(
            message="Slot is already booked",
            code="ALREADY_BOOKED",
            details={"slot_id": slot_id},
        )


class BookingConflictException(ConflictException):
    """Raised when a booking overlaps a confirmed booking of the same teacher."""

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class InvalidStateException(BusinessRuleException):
    """Raised when an entity is not in a state that permits the requested operation."""

    def __init__(self, message: str, *, current: Optional[str] = None, requested: Optional[str] = None):
        details: Dict[str, Any] = {}
        if current is not None:
            details["current_status"] = current
        if requested is not None:
            details["requested_status"] = requested
        super().__init__(message=message, code="INVALID_STATE", details=details)


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as query failures or
    constraint violations.
    """

    def __init__(self, message: str, *, constraint_violation: bool = False) -> None:
        super().__init__(message)
        self.constraint_violation = constraint_violation
