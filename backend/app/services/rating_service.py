# backend/app/services/rating_service.py
"""
Rating aggregation.

Teacher averages are always recomputed from scratch over the reviews of the
teacher's COMPLETED bookings. Callers run ``recompute`` inside the same
transaction as the review mutation that triggered it.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
import logging

from sqlalchemy.orm import Session

from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

_RATING_PRECISION = Decimal("0.01")


@dataclass(frozen=True)
class RatingSummary:
    teacher_id: str
    avg_rating: Decimal
    review_count: int


def round_rating(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_RATING_PRECISION, rounding=ROUND_HALF_UP)


class RatingService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.review_repository = RepositoryFactory.create_review_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)

    @BaseService.measure_operation("recompute_rating")
    def recompute(self, teacher_id: str) -> RatingSummary:
        """Persist and return the teacher's mean rating and review count."""
        average, count = self.review_repository.rating_aggregate(teacher_id)
        summary = RatingSummary(
            teacher_id=teacher_id,
            avg_rating=round_rating(average),
            review_count=count,
        )
        self.teacher_repository.set_rating(teacher_id, summary.avg_rating, summary.review_count)
        self.logger.info(
            f"Teacher {teacher_id} rating recomputed: avg={summary.avg_rating} count={count}"
        )
        return summary
