# backend/app/routes/v1/webhooks_midtrans.py
"""
Midtrans notification endpoint (v1).

Mounted at /api/v1/webhooks/midtrans. The gateway retries anything that is
not a 2xx, so only a bad signature or an unreadable body is rejected;
unknown references and unrecognized statuses are acknowledged.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from ...api.dependencies.services import get_payment_service
from ...core.metrics import PAYMENT_WEBHOOK_TOTAL
from ...schemas.payment import WebhookAckResponse
from ...services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

_ACK_IGNORED_OUTCOMES = frozenset({"ignored", "unknown_reference"})


@router.post("", response_model=WebhookAckResponse)
async def handle_midtrans_notification(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
) -> WebhookAckResponse:
    body = await request.body()
    try:
        payload: Dict[str, Any] = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        PAYMENT_WEBHOOK_TOTAL.labels(outcome="malformed").inc()
        logger.warning("Rejected Midtrans notification with unreadable body")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload")
    if not isinstance(payload, dict):
        PAYMENT_WEBHOOK_TOTAL.labels(outcome="malformed").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload")

    if not service.verify_notification(payload):
        PAYMENT_WEBHOOK_TOTAL.labels(outcome="bad_signature").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature")

    result = await run_in_threadpool(service.reconcile, payload)
    ack_status = "ignored" if result.outcome in _ACK_IGNORED_OUTCOMES else "success"
    return WebhookAckResponse(status=ack_status, outcome=result.outcome)
