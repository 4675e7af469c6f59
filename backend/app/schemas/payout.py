# backend/app/schemas/payout.py
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..models.payout import PayoutStatus
from ._strict_base import StrictModel, StrictRequestModel
from .base import Money, OptionalUtcDatetime, StandardizedModel, UtcDatetime


class PayoutRequest(StrictRequestModel):
    amount: Decimal = Field(..., description="Amount to withdraw; must be positive")
    notes: Optional[str] = Field(None, max_length=1000)


class PayoutStatusUpdate(StrictRequestModel):
    status: PayoutStatus
    notes: Optional[str] = Field(None, max_length=1000)


class PayoutResponse(StandardizedModel):
    id: str
    teacher_id: str
    amount: Money
    status: PayoutStatus
    requested_at: UtcDatetime
    processed_at: OptionalUtcDatetime = None
    notes: Optional[str] = None


class PayoutStatsResponse(StrictModel):
    total_earnings: Money
    total_paid_out: Money
    pending_payouts: Money
    available_balance: Money
