# backend/app/repositories/payout_repository.py
from datetime import date
from decimal import Decimal
import logging
from typing import Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.payout import Payout, PayoutStatus
from .base_repository import BaseRepository, Page
from .filters import build_predicates, day_end, day_start

logger = logging.getLogger(__name__)


class PayoutRepository(BaseRepository[Payout]):
    def __init__(self, db: Session):
        super().__init__(db, Payout)

    def list_payouts(
        self,
        *,
        teacher_id: Optional[str] = None,
        status: Optional[PayoutStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int,
        limit: int,
    ) -> Page[Payout]:
        starts, ends = day_start(start_date), day_end(end_date)
        predicates = build_predicates(
            Payout.teacher_id == teacher_id if teacher_id else None,
            Payout.status == status.value if status else None,
            Payout.requested_at >= starts if starts else None,
            Payout.requested_at <= ends if ends else None,
        )
        query = self.db.query(Payout).filter(*predicates).order_by(Payout.requested_at.desc())
        return self.paginate(query, page=page, limit=limit)

    def sum_amount(self, *, teacher_id: str, statuses: Sequence[PayoutStatus]) -> Decimal:
        try:
            total = (
                self.db.query(func.coalesce(func.sum(Payout.amount), 0))
                .filter(
                    Payout.teacher_id == teacher_id,
                    Payout.status.in_([status.value for status in statuses]),
                )
                .scalar()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error summing payouts for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to compute payout totals: {str(e)}")
        return Decimal(str(total or 0))
