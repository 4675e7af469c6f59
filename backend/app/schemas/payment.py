# backend/app/schemas/payment.py
"""Payment, transaction and gateway webhook schemas."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import Field

from ..models.booking import BookingStatus
from ..models.payment import PaymentGateway, PaymentStatus
from ._strict_base import StrictModel, StrictRequestModel
from .base import Money, OptionalUtcDatetime, StandardizedModel, UtcDatetime


class PaymentInitiateRequest(StrictRequestModel):
    booking_id: str = Field(..., description="PENDING booking to pay for")


class PaymentInitiateResponse(StrictModel):
    payment_id: str
    booking_id: str
    status: PaymentStatus
    payment_url: str


class PaymentResponse(StandardizedModel):
    id: str
    booking_id: str
    gateway: PaymentGateway
    gateway_ref: str
    amount: Money
    status: PaymentStatus
    redirect_url: Optional[str] = None
    created_at: UtcDatetime
    updated_at: OptionalUtcDatetime = None
    booking_status: Optional[BookingStatus] = None
    student_name: Optional[str] = None

    @classmethod
    def from_payment(cls, payment: Any) -> "PaymentResponse":
        booking = payment.booking
        student = booking.student if booking is not None else None
        return cls(
            id=payment.id,
            booking_id=payment.booking_id,
            gateway=payment.gateway,
            gateway_ref=payment.gateway_ref,
            amount=Decimal(str(payment.amount)),
            status=payment.status,
            redirect_url=payment.redirect_url,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
            booking_status=booking.status if booking is not None else None,
            student_name=student.full_name if student is not None else None,
        )


class PaymentStatusOverride(StrictRequestModel):
    status: PaymentStatus


class TransactionStatsResponse(StrictModel):
    total_transactions: int
    successful_transactions: int
    failed_transactions: int
    total_revenue: Money


class WebhookAckResponse(StrictModel):
    """Acknowledgement returned to the gateway; anything but 2xx triggers redelivery."""

    status: str = "success"
    outcome: str
