# backend/app/models/payout.py
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class PayoutStatus(str, Enum):
    REQUESTED = "REQUESTED"
    PROCESSING = "PROCESSING"
    PAID = "PAID"
    FAILED = "FAILED"


class Payout(Base):
    """A teacher's withdrawal request against their completed-booking earnings."""

    __tablename__ = "payouts"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default=PayoutStatus.REQUESTED.value)
    requested_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    processed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    teacher = relationship("Teacher")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payouts_amount_positive"),
        CheckConstraint(
            "status IN ('REQUESTED','PROCESSING','PAID','FAILED')", name="ck_payouts_status"
        ),
    )

    def __repr__(self) -> str:
        return f"<Payout {self.id} amount={self.amount} status={self.status}>"
