# backend/app/services/payment_service.py
"""
Payment Service.

Initiates gateway checkouts for PENDING bookings and reconciles the
gateway's asynchronous notifications back into payment and booking state.

Reconciliation treats the gateway status as untrusted input: only the
values in ``GatewayStatus`` are acted on, everything else is logged and
acknowledged. Notifications are delivered at least once, so applying the
same notification twice must leave state unchanged.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
import logging
import time
from typing import Any, Dict, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import Action
from ..core.exceptions import (
    InvalidStateException,
    NotFoundException,
    UpstreamFailureException,
    ValidationException,
)
from ..core.metrics import PAYMENT_WEBHOOK_TOTAL
from ..core.permissions import authorize
from ..integrations.midtrans_client import (
    CustomerDetails,
    FakeMidtransClient,
    GatewayStatus,
    MidtransClient,
    MidtransError,
    PaymentGatewayClient,
    verify_notification_signature,
)
from ..models.booking import Booking, BookingStatus
from ..models.payment import Payment, PaymentGateway, PaymentStatus
from ..principal import Principal
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .booking_service import BookingService, owns_booking

logger = logging.getLogger(__name__)

# Fraud screening verdicts that hold a captured card payment back.
_FRAUD_CHALLENGE = "challenge"
_FRAUD_DENY = "deny"

_FAILED_GATEWAY_STATUSES = frozenset(
    {GatewayStatus.DENY, GatewayStatus.CANCEL, GatewayStatus.EXPIRE, GatewayStatus.FAILURE}
)


@dataclass(frozen=True)
class PaymentInitiation:
    payment: Payment
    payment_url: str


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome label (for logs and metrics) and the affected payment, if any."""

    outcome: str
    payment_id: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    booking_status: Optional[BookingStatus] = None


def map_gateway_status(status: GatewayStatus, fraud_status: Optional[str]) -> PaymentStatus:
    """
    Translate a gateway transaction status into our payment status.

    settlement, and capture with fraud ``accept``, are successes; a fraud
    ``deny`` fails either. deny/cancel/expire/failure fail. Everything else
    (pending, authorize, challenged capture) stays PENDING.
    """
    fraud = (fraud_status or "").strip().lower()
    if status in _FAILED_GATEWAY_STATUSES:
        return PaymentStatus.FAILED
    if status in (GatewayStatus.SETTLEMENT, GatewayStatus.CAPTURE):
        if fraud == _FRAUD_DENY:
            return PaymentStatus.FAILED
        if status is GatewayStatus.CAPTURE and fraud == _FRAUD_CHALLENGE:
            return PaymentStatus.PENDING
        return PaymentStatus.SUCCESS
    return PaymentStatus.PENDING


def booking_status_for(payment_status: PaymentStatus) -> Optional[BookingStatus]:
    if payment_status is PaymentStatus.SUCCESS:
        return BookingStatus.PAID
    if payment_status is PaymentStatus.FAILED:
        return BookingStatus.CANCELLED
    return None


def gross_amount(total_price: Decimal) -> int:
    """Gateway amounts are whole currency units."""
    return int(Decimal(str(total_price)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def build_default_gateway() -> PaymentGatewayClient:
    server_key = settings.midtrans_server_key.get_secret_value()
    if not server_key:
        logger.warning("MIDTRANS_SERVER_KEY not configured; using fake payment gateway")
        return FakeMidtransClient()
    return MidtransClient(
        server_key=server_key,
        snap_base_url=settings.midtrans_snap_base_url,
        api_base_url=settings.midtrans_api_base_url,
        timeout=settings.midtrans_timeout_seconds,
    )


class PaymentService(BaseService):
    def __init__(
        self,
        db: Session,
        gateway: Optional[PaymentGatewayClient] = None,
        booking_service: Optional[BookingService] = None,
    ):
        super().__init__(db)
        self.gateway = gateway or build_default_gateway()
        self.booking_service = booking_service or BookingService(db)
        self.payment_repository = RepositoryFactory.create_payment_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    # ========== Initiation ==========

    @BaseService.measure_operation("initiate_payment")
    def initiate(self, principal: Principal, booking_id: str) -> PaymentInitiation:
        """
        Start a gateway checkout for the caller's PENDING booking.

        While a checkout is still open its reference and redirect URL are
        returned again, so every reference handed to the gateway resolves.

        Raises:
            NotFoundException: booking does not exist
            ForbiddenException: caller is not the booking's student
            InvalidStateException: booking is not PENDING
            UpstreamFailureException: the gateway call failed (nothing persisted)
        """
        booking = self.booking_repository.get_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")

        authorize(
            principal,
            Action.PAYMENT_INITIATE,
            is_owner=booking.student_profile_id == principal.profile_id,
        )
        if booking.status_enum is not BookingStatus.PENDING:
            raise InvalidStateException(
                "Only pending bookings can be paid", current=booking.status
            )

        open_checkout = self.payment_repository.get_by_booking_id(booking.id)
        if (
            open_checkout is not None
            and open_checkout.status_enum is PaymentStatus.PENDING
            and open_checkout.redirect_url
        ):
            # The issued reference stays live at the gateway until it settles or expires.
            self.logger.info(
                f"Reusing open checkout {open_checkout.gateway_ref} for booking {booking_id}"
            )
            return PaymentInitiation(payment=open_checkout, payment_url=open_checkout.redirect_url)

        order_id = f"booking-{booking.id}-{int(time.time() * 1000)}"
        amount = gross_amount(booking.total_price)
        try:
            transaction = self.gateway.create_transaction(
                order_id=order_id,
                amount=amount,
                customer=CustomerDetails(
                    full_name=booking.student.full_name if booking.student else "Student",
                    email=principal.email,
                ),
                item_name=f"Lesson with {self._teacher_name(booking)}",
            )
        except MidtransError as exc:
            self.logger.error(f"Gateway checkout failed for booking {booking_id}: {exc}")
            raise UpstreamFailureException(
                "Payment gateway is unavailable", code="GATEWAY_ERROR"
            ) from exc

        with self.transaction():
            payment = self.payment_repository.get_by_booking_id(booking.id)
            fields: Dict[str, Any] = {
                "gateway": PaymentGateway.MIDTRANS.value,
                "gateway_ref": transaction.reference,
                "amount": Decimal(amount),
                "status": PaymentStatus.PENDING.value,
                "redirect_url": transaction.redirect_url,
                "payload": None,
            }
            if payment is None:
                payment = self.payment_repository.create(booking_id=booking.id, **fields)
            else:
                # Only a closed (failed or settled) checkout is replaced.
                self.payment_repository.update(payment.id, **fields)

        self.logger.info(f"Payment {payment.id} initiated for booking {booking_id} ref={order_id}")
        return PaymentInitiation(payment=payment, payment_url=transaction.redirect_url)

    def get_payment(self, principal: Principal, payment_id: str) -> Payment:
        payment = self.payment_repository.get_with_booking(payment_id)
        if payment is None:
            raise NotFoundException("Payment not found", code="PAYMENT_NOT_FOUND")
        authorize(principal, Action.PAYMENT_VIEW, is_owner=owns_booking(principal, payment.booking))
        return payment

    # ========== Reconciliation ==========

    def verify_notification(self, payload: Mapping[str, Any]) -> bool:
        server_key = settings.midtrans_server_key.get_secret_value()
        if not server_key:
            self.logger.error("Cannot verify gateway notification: server key not configured")
            return False
        valid = verify_notification_signature(payload, server_key)
        if not valid:
            self.logger.warning(
                f"Invalid gateway notification signature for order {payload.get('order_id')}"
            )
        return valid

    @BaseService.measure_operation("reconcile_payment")
    def reconcile(self, notification: Mapping[str, Any]) -> ReconcileResult:
        """
        Apply a (signature-verified) gateway notification.

        Never raises for unknown references or unrecognized statuses: those
        are logged and acknowledged so the gateway stops redelivering.
        """
        order_id = notification.get("order_id")
        if not isinstance(order_id, str) or not order_id:
            raise ValidationException("Notification is missing order_id", code="INVALID_NOTIFICATION")

        status_payload = self._authoritative_status(order_id, notification)
        gateway_status = GatewayStatus.parse(status_payload.get("transaction_status"))
        if gateway_status is None:
            self.logger.warning(
                f"Ignoring unrecognized gateway status "
                f"{status_payload.get('transaction_status')!r} for order {order_id}"
            )
            return self._finish(ReconcileResult(outcome="ignored"))

        target = map_gateway_status(gateway_status, status_payload.get("fraud_status"))

        with self.transaction():
            payment = self.payment_repository.get_by_gateway_ref(order_id)
            if payment is None:
                self.logger.warning(f"Gateway notification for unknown payment reference {order_id}")
                return self._finish(ReconcileResult(outcome="unknown_reference"))

            outcome, booking_status = self._apply(payment, target, dict(status_payload))

        self.logger.info(
            f"Reconciled payment {payment.id} ref={order_id} gateway={gateway_status.value} "
            f"-> {payment.status} ({outcome})"
        )
        return self._finish(
            ReconcileResult(
                outcome=outcome,
                payment_id=payment.id,
                payment_status=payment.status_enum,
                booking_status=booking_status,
            )
        )

    @BaseService.measure_operation("override_payment_status")
    def override_status(
        self, principal: Principal, payment_id: str, new_status: PaymentStatus
    ) -> Payment:
        """Admin override to SUCCESS or FAILED, with the same booking mapping as reconciliation."""
        authorize(principal, Action.PAYMENT_OVERRIDE, is_owner=False)
        if new_status is PaymentStatus.PENDING:
            raise ValidationException("Status must be SUCCESS or FAILED", code="INVALID_STATUS")

        payment = self.payment_repository.get_with_booking(payment_id)
        if payment is None:
            raise NotFoundException("Payment not found", code="PAYMENT_NOT_FOUND")

        with self.transaction():
            previous = payment.status
            self.payment_repository.update(payment.id, status=new_status.value)
            self._sync_booking(payment.booking, new_status)

        self.logger.info(
            f"Admin {principal.user_id} overrode payment {payment_id}: {previous} -> {new_status.value}"
        )
        return payment

    # ========== Internals ==========

    def _authoritative_status(
        self, order_id: str, notification: Mapping[str, Any]
    ) -> Mapping[str, Any]:
        if not settings.midtrans_verify_status:
            return notification
        try:
            return self.gateway.get_status(order_id)
        except MidtransError as exc:
            self.logger.error(f"Status lookup failed for order {order_id}: {exc}")
            raise UpstreamFailureException(
                "Payment gateway status lookup failed", code="GATEWAY_ERROR"
            ) from exc

    def _apply(
        self, payment: Payment, target: PaymentStatus, raw: Dict[str, Any]
    ) -> Tuple[str, Optional[BookingStatus]]:
        current = payment.status_enum
        self.payment_repository.update(payment.id, payload=raw)

        if current is target:
            return "duplicate", None
        if current is not PaymentStatus.PENDING:
            # Settled payments are final; late or reordered notifications only refresh the audit payload.
            self.logger.warning(
                f"Payment {payment.id} already {current.value}; ignoring transition to {target.value}"
            )
            return "stale", None
        if target is PaymentStatus.PENDING:
            return "pending", None

        self.payment_repository.update(payment.id, status=target.value)
        booking_status = self._sync_booking(payment.booking, target)
        return target.value.lower(), booking_status

    def _sync_booking(
        self, booking: Optional[Booking], payment_status: PaymentStatus
    ) -> Optional[BookingStatus]:
        """Move a PENDING booking to its derived status; later lifecycle states are never regressed."""
        derived = booking_status_for(payment_status)
        if booking is None or derived is None:
            return None
        if booking.status_enum is not BookingStatus.PENDING:
            self.logger.warning(
                f"Booking {booking.id} is {booking.status}; not applying {derived.value} "
                f"from payment {payment_status.value}"
            )
            return None
        self.booking_service.apply_status(booking, derived)
        return derived

    def _finish(self, result: ReconcileResult) -> ReconcileResult:
        PAYMENT_WEBHOOK_TOTAL.labels(outcome=result.outcome).inc()
        return result

    @staticmethod
    def _teacher_name(booking: Booking) -> str:
        teacher = booking.teacher
        if teacher is not None and teacher.profile is not None:
            return teacher.profile.full_name
        return "Teacher"
