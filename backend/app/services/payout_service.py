# backend/app/services/payout_service.py
"""
Payout Service.

A teacher's available balance is what their COMPLETED bookings earned minus
every payout that is not FAILED (requested, processing or already paid).
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.enums import Action, RoleName
from ..core.exceptions import (
    BusinessRuleException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from ..core.permissions import authorize
from ..models.booking import BookingStatus
from ..models.payout import Payout, PayoutStatus
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from .admin_service import load_platform_settings
from .base import BaseService

logger = logging.getLogger(__name__)

_PENDING_PAYOUT_STATUSES = (PayoutStatus.REQUESTED, PayoutStatus.PROCESSING)
_FINAL_PAYOUT_STATUSES = frozenset({PayoutStatus.PAID, PayoutStatus.FAILED})
ADMIN_SETTABLE_STATUSES = frozenset(
    {PayoutStatus.PROCESSING, PayoutStatus.PAID, PayoutStatus.FAILED}
)


@dataclass(frozen=True)
class PayoutStats:
    total_earnings: Decimal
    total_paid_out: Decimal
    pending_payouts: Decimal
    available_balance: Decimal


class PayoutService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.payout_repository = RepositoryFactory.create_payout_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    def stats_for_teacher(self, teacher_id: str) -> PayoutStats:
        earnings = self.booking_repository.sum_total_price(
            teacher_id=teacher_id, status=BookingStatus.COMPLETED
        )
        paid = self.payout_repository.sum_amount(
            teacher_id=teacher_id, statuses=[PayoutStatus.PAID]
        )
        pending = self.payout_repository.sum_amount(
            teacher_id=teacher_id, statuses=_PENDING_PAYOUT_STATUSES
        )
        return PayoutStats(
            total_earnings=earnings,
            total_paid_out=paid,
            pending_payouts=pending,
            available_balance=earnings - paid - pending,
        )

    def stats(self, principal: Principal) -> PayoutStats:
        return self.stats_for_teacher(self.require_teacher_id(principal))

    @BaseService.measure_operation("list_payouts")
    def list_payouts(
        self,
        principal: Principal,
        *,
        status: Optional[PayoutStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Payout]:
        """Teachers see their own payouts, admins see all."""
        teacher_id = None
        if principal.role is RoleName.TEACHER:
            teacher_id = self.require_teacher_id(principal)
        elif not principal.is_admin:
            authorize(principal, Action.PAYOUT_PROCESS, is_owner=False)
        if start_date and end_date and start_date > end_date:
            raise ValidationException("start_date must not be after end_date")
        return self.payout_repository.list_payouts(
            teacher_id=teacher_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )

    @BaseService.measure_operation("request_payout")
    def request_payout(
        self, principal: Principal, amount: Decimal, notes: Optional[str] = None
    ) -> Payout:
        """
        Raises:
            ValidationException: amount not positive
            BusinessRuleException: below the platform minimum, or above the
                available balance
        """
        authorize(principal, Action.PAYOUT_REQUEST)
        teacher_id = self.require_teacher_id(principal)

        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValidationException("Payout amount must be positive", code="INVALID_AMOUNT")

        minimum = Decimal(load_platform_settings(self.db).min_payout_amount)
        if amount < minimum:
            raise BusinessRuleException(
                f"Minimum payout amount is {minimum}",
                code="BELOW_MINIMUM_PAYOUT",
                details={"min_payout_amount": str(minimum)},
            )

        with self.transaction():
            balance = self.stats_for_teacher(teacher_id).available_balance
            if amount > balance:
                raise BusinessRuleException(
                    "Insufficient balance",
                    code="INSUFFICIENT_BALANCE",
                    details={"available_balance": str(balance)},
                )
            payout = self.payout_repository.create(
                teacher_id=teacher_id,
                amount=amount,
                status=PayoutStatus.REQUESTED.value,
                notes=notes,
            )

        self.logger.info(f"Teacher {teacher_id} requested payout {payout.id} of {amount}")
        return payout

    @BaseService.measure_operation("update_payout_status")
    def update_status(
        self,
        principal: Principal,
        payout_id: str,
        new_status: PayoutStatus,
        notes: Optional[str] = None,
    ) -> Payout:
        authorize(principal, Action.PAYOUT_PROCESS, is_owner=False)
        if new_status not in ADMIN_SETTABLE_STATUSES:
            raise ValidationException(
                "Status must be PROCESSING, PAID or FAILED", code="INVALID_STATUS"
            )

        payout = self.payout_repository.get_by_id(payout_id)
        if payout is None:
            raise NotFoundException("Payout not found", code="PAYOUT_NOT_FOUND")
        current = PayoutStatus(payout.status)
        if current in _FINAL_PAYOUT_STATUSES:
            raise InvalidStateException(
                "Payout is already settled", current=current.value, requested=new_status.value
            )

        changes = {"status": new_status.value}
        if new_status in _FINAL_PAYOUT_STATUSES:
            changes["processed_at"] = datetime.now(timezone.utc)
        if notes is not None:
            changes["notes"] = notes

        with self.transaction():
            self.payout_repository.update(payout.id, **changes)
        self.logger.info(f"Payout {payout_id} moved {current.value} -> {new_status.value}")
        return payout
