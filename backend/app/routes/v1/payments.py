# backend/app/routes/v1/payments.py
"""
Payment routes - API v1

    POST /               → Start a gateway checkout for a PENDING booking (student)
    GET  /{payment_id}   → Payment detail (party or admin)
"""

import logging

from fastapi import APIRouter, Depends, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_payment_service
from ...models.payment import PaymentStatus
from ...principal import Principal
from ...schemas.payment import PaymentInitiateRequest, PaymentInitiateResponse, PaymentResponse
from ...services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments-v1"])


@router.post("", response_model=PaymentInitiateResponse, status_code=status.HTTP_201_CREATED)
def initiate_payment(
    payload: PaymentInitiateRequest,
    principal: Principal = Depends(get_current_principal),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentInitiateResponse:
    initiation = service.initiate(principal, payload.booking_id)
    return PaymentInitiateResponse(
        payment_id=initiation.payment.id,
        booking_id=initiation.payment.booking_id,
        status=PaymentStatus(initiation.payment.status),
        payment_url=initiation.payment_url,
    )


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: str,
    principal: Principal = Depends(get_current_principal),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    return PaymentResponse.from_payment(service.get_payment(principal, payment_id))
