# backend/app/services/admin_service.py
"""
Admin Service.

Platform settings, the payment transaction ledger and user management.
Every entry point authorizes against the permission matrix, so a
non-admin principal is rejected even if a route forgets to check.
"""

from dataclasses import asdict, dataclass
from datetime import date
import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import Action, RoleName
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..core.permissions import authorize
from ..models.payment import Payment, PaymentGateway, PaymentStatus
from ..models.user import User
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformSettings:
    commission_rate: float
    min_payout_amount: int
    payout_processing_days: int

    @classmethod
    def defaults(cls) -> "PlatformSettings":
        return cls(
            commission_rate=settings.default_commission_rate,
            min_payout_amount=settings.default_min_payout_amount,
            payout_processing_days=settings.default_payout_processing_days,
        )


SETTING_KEYS = tuple(PlatformSettings.__dataclass_fields__)


def validate_setting(key: str, value: Any) -> Any:
    if key not in SETTING_KEYS:
        raise ValidationException(f"Unknown setting '{key}'", code="UNKNOWN_SETTING")
    if isinstance(value, bool):
        raise ValidationException(f"Setting '{key}' must be numeric", code="INVALID_SETTING")
    if key == "commission_rate":
        if not isinstance(value, (int, float)) or not 0 <= value <= 1:
            raise ValidationException(
                "commission_rate must be between 0 and 1", code="INVALID_SETTING"
            )
        return float(value)
    if not isinstance(value, int) or value < 0:
        raise ValidationException(
            f"Setting '{key}' must be a non-negative integer", code="INVALID_SETTING"
        )
    return value


def load_platform_settings(db: Session) -> PlatformSettings:
    """Stored values layered over configured defaults."""
    stored = RepositoryFactory.create_platform_setting_repository(db).as_dict()
    merged = asdict(PlatformSettings.defaults())
    merged.update({key: value for key, value in stored.items() if key in SETTING_KEYS})
    return PlatformSettings(**merged)


class AdminService(BaseService):
    def __init__(self, db: Session, payment_service=None):
        super().__init__(db)
        self.setting_repository = RepositoryFactory.create_platform_setting_repository(db)
        self.payment_repository = RepositoryFactory.create_payment_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self._payment_service = payment_service

    @property
    def payment_service(self):
        # Built lazily so settings/user endpoints never construct a gateway client.
        if self._payment_service is None:
            from .payment_service import PaymentService

            self._payment_service = PaymentService(self.db)
        return self._payment_service

    # ========== Settings ==========

    def get_settings(self, principal: Principal) -> PlatformSettings:
        authorize(principal, Action.SETTINGS_MANAGE, is_owner=False)
        return load_platform_settings(self.db)

    @BaseService.measure_operation("update_settings")
    def update_settings(self, principal: Principal, changes: Mapping[str, Any]) -> PlatformSettings:
        authorize(principal, Action.SETTINGS_MANAGE, is_owner=False)
        cleaned = {key: validate_setting(key, value) for key, value in changes.items()}
        with self.transaction():
            for key, value in cleaned.items():
                self.setting_repository.upsert(key, value)
        self.logger.info(f"Admin {principal.user_id} updated settings {sorted(cleaned)}")
        return load_platform_settings(self.db)

    # ========== Transactions ==========

    def list_transactions(
        self,
        principal: Principal,
        *,
        status: Optional[PaymentStatus] = None,
        gateway: Optional[PaymentGateway] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Payment]:
        authorize(principal, Action.PAYMENT_VIEW, is_owner=False)
        if start_date and end_date and start_date > end_date:
            raise ValidationException("start_date must not be after end_date")
        return self.payment_repository.list_transactions(
            status=status,
            gateway=gateway,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )

    def get_transaction(self, principal: Principal, payment_id: str) -> Payment:
        return self.payment_service.get_payment(principal, payment_id)

    def override_transaction(
        self, principal: Principal, payment_id: str, new_status: PaymentStatus
    ) -> Payment:
        return self.payment_service.override_status(principal, payment_id, new_status)

    def transaction_stats(self, principal: Principal) -> Dict[str, Any]:
        authorize(principal, Action.PAYMENT_VIEW, is_owner=False)
        return self.payment_repository.transaction_stats()

    # ========== Users ==========

    def list_users(
        self,
        principal: Principal,
        *,
        role: Optional[RoleName] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[User]:
        authorize(principal, Action.USER_MANAGE, is_owner=False)
        return self.user_repository.list_users(role=role, page=page, limit=limit)

    @BaseService.measure_operation("set_user_active")
    def set_user_active(self, principal: Principal, user_id: str, is_active: bool) -> User:
        authorize(principal, Action.USER_MANAGE, is_owner=False)
        user = self._get_user(user_id)
        if user.id == principal.user_id and not is_active:
            raise ConflictException("Admins cannot deactivate themselves", code="SELF_DEACTIVATION")
        with self.transaction():
            self.user_repository.update(user.id, is_active=is_active)
        self.logger.info(
            f"Admin {principal.user_id} set user {user_id} active={is_active}"
        )
        return user

    @BaseService.measure_operation("delete_user")
    def delete_user(self, principal: Principal, user_id: str) -> None:
        authorize(principal, Action.USER_MANAGE, is_owner=False)
        user = self._get_user(user_id)
        if user.id == principal.user_id:
            raise ConflictException("Admins cannot delete themselves", code="SELF_DELETION")
        with self.transaction():
            self.user_repository.delete(user.id)
        self.logger.warning(f"Admin {principal.user_id} deleted user {user_id}")

    def _get_user(self, user_id: str) -> User:
        user = self.user_repository.get_with_profile(user_id)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user
