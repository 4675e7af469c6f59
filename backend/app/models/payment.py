"""
Payment model for gateway-backed booking payments.

One payment row per booking, keyed on the gateway order reference. Rows are
written when a student initiates payment and mutated only by gateway
reconciliation or an admin override.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
import ulid

from app.database import Base

if TYPE_CHECKING:
    from app.models.booking import Booking


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class PaymentGateway(str, Enum):
    MIDTRANS = "MIDTRANS"


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    gateway: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentGateway.MIDTRANS.value
    )
    gateway_ref: Mapped[str] = mapped_column(String(120), nullable=False, unique=True, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True
    )
    redirect_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    # Raw gateway status payload, kept for audit
    payload: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    booking: Mapped["Booking"] = relationship("Booking", back_populates="payments")

    __table_args__ = (
        CheckConstraint("status IN ('PENDING','SUCCESS','FAILED')", name="ck_payments_status"),
        CheckConstraint("amount >= 0", name="ck_payments_amount_non_negative"),
    )

    @property
    def status_enum(self) -> PaymentStatus:
        return PaymentStatus(self.status)

    def __repr__(self) -> str:
        return f"<Payment(ref={self.gateway_ref}, status={self.status}, amount={self.amount})>"
