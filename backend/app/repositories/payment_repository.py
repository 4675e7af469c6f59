# backend/app/repositories/payment_repository.py
"""
Payment Repository.

Lookups by gateway reference for reconciliation, plus the admin
transaction listing and revenue statistics.
"""

from datetime import date
from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from ..models.payment import Payment, PaymentGateway, PaymentStatus
from .base_repository import BaseRepository, Page
from .filters import build_predicates, day_end, day_start

logger = logging.getLogger(__name__)


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self, db: Session):
        super().__init__(db, Payment)

    def get_by_gateway_ref(self, gateway_ref: str) -> Optional[Payment]:
        try:
            return (
                self.db.query(Payment)
                .options(joinedload(Payment.booking))
                .filter(Payment.gateway_ref == gateway_ref)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading payment by ref {gateway_ref}: {str(e)}")
            raise RepositoryException(f"Failed to load payment: {str(e)}")

    def get_by_booking_id(self, booking_id: str) -> Optional[Payment]:
        return self.find_one_by(booking_id=booking_id)

    def get_with_booking(self, payment_id: str) -> Optional[Payment]:
        return (
            self.db.query(Payment)
            .options(joinedload(Payment.booking))
            .filter(Payment.id == payment_id)
            .first()
        )

    def list_transactions(
        self,
        *,
        status: Optional[PaymentStatus] = None,
        gateway: Optional[PaymentGateway] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int,
        limit: int,
    ) -> Page[Payment]:
        starts, ends = day_start(start_date), day_end(end_date)
        predicates = build_predicates(
            Payment.status == status.value if status else None,
            Payment.gateway == gateway.value if gateway else None,
            Payment.created_at >= starts if starts else None,
            Payment.created_at <= ends if ends else None,
        )
        query = (
            self.db.query(Payment)
            .options(joinedload(Payment.booking).joinedload(Booking.student))
            .filter(*predicates)
            .order_by(Payment.created_at.desc())
        )
        return self.paginate(query, page=page, limit=limit)

    def transaction_stats(self) -> dict:
        success = PaymentStatus.SUCCESS.value
        try:
            total, successful, failed, revenue = self.db.query(
                func.count(Payment.id),
                func.coalesce(func.sum(case((Payment.status == success, 1), else_=0)), 0),
                func.coalesce(
                    func.sum(case((Payment.status == PaymentStatus.FAILED.value, 1), else_=0)), 0
                ),
                func.coalesce(
                    func.sum(case((Payment.status == success, Payment.amount), else_=0)), 0
                ),
            ).one()
        except SQLAlchemyError as e:
            self.logger.error(f"Error computing transaction stats: {str(e)}")
            raise RepositoryException(f"Failed to compute transaction stats: {str(e)}")
        return {
            "total_transactions": int(total or 0),
            "successful_transactions": int(successful or 0),
            "failed_transactions": int(failed or 0),
            "total_revenue": Decimal(str(revenue or 0)),
        }

    def recent(self, limit: int = 5) -> List[Payment]:
        return self.db.query(Payment).order_by(Payment.created_at.desc()).limit(limit).all()
