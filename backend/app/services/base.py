# backend/app/services/base.py
"""
Base Service Pattern.

Provides common functionality for all service classes including:
- Transaction management
- Logging
- Performance monitoring
"""

import asyncio
from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Iterator, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    RepositoryException,
    ServiceException,
)
from ..core.metrics import SERVICE_OPERATION_SECONDS

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class BaseService:
    """
    Base class for all service layer components.

    Services own the unit of work: repositories flush, ``transaction()``
    commits or rolls back.
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Usage:
            with self.transaction():
                self.booking_repository.create(...)
                slot.is_booked = True
            # committed here, or rolled back if anything raised
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except RepositoryException as e:
            self.db.rollback()
            if e.constraint_violation:
                raise ConflictException(
                    "Request conflicts with existing data", code="CONSTRAINT_VIOLATION"
                ) from e
            self.logger.error(f"Repository failure in transaction: {str(e)}")
            raise ServiceException(f"Database operation failed: {str(e)}") from e
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {str(e)}") from e
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_booking")
            def create_booking(self, ...):
                ...
        """

        def decorator(func: F) -> F:
            if asyncio.iscoroutinefunction(func):

                @wraps(func)
                async def async_wrapper(self, *args, **kwargs):
                    start_time = time.perf_counter()
                    success = False
                    try:
                        result = await func(self, *args, **kwargs)
                        success = True
                        return result
                    finally:
                        self._record_metric(operation_name, time.perf_counter() - start_time, success)

                return cast(F, async_wrapper)

            @wraps(func)
            def wrapper(self, *args, **kwargs):
                start_time = time.perf_counter()
                success = False
                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                finally:
                    self._record_metric(operation_name, time.perf_counter() - start_time, success)

            return cast(F, wrapper)

        return decorator

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        SERVICE_OPERATION_SECONDS.labels(
            service=self.__class__.__name__,
            operation=operation,
            status="success" if success else "error",
        ).observe(elapsed)

        if elapsed > settings.slow_operation_threshold_seconds:
            self.logger.warning(f"Slow operation detected: {operation} took {elapsed:.2f}s")

    def require_teacher_id(self, principal: Any) -> str:
        """The caller's teacher id, or ForbiddenException for non-teachers."""
        if principal.teacher_id is None:
            raise ForbiddenException("A teacher profile is required", code="TEACHER_REQUIRED")
        return cast(str, principal.teacher_id)
