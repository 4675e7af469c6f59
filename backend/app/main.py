# backend/app/main.py
"""
FastAPI application entry point.

Run locally with ``uvicorn app.main:app --reload`` from ``backend/``.
"""

import logging
from typing import Awaitable, Callable, Dict
import uuid

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.request_context import (
    attach_request_id_filter,
    reset_request_id,
    set_request_id,
)
from .errors import register_error_handlers
from .routes.v1 import (
    admin as admin_v1,
    availability as availability_v1,
    bookings as bookings_v1,
    dashboard as dashboard_v1,
    materials as materials_v1,
    onboarding as onboarding_v1,
    orders as orders_v1,
    payments as payments_v1,
    payouts as payouts_v1,
    prometheus as prometheus_v1,
    reviews as reviews_v1,
    sessions as sessions_v1,
    skills as skills_v1,
    teachers as teachers_v1,
    webhooks_midtrans as webhooks_midtrans_v1,
)

API_TITLE = settings.app_name
API_DESCRIPTION = "Tutoring marketplace: availability, bookings, payments, reviews and storefront."
API_VERSION = "1.0.0"

REQUEST_ID_HEADER = "X-Request-ID"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
attach_request_id_filter()

logger = logging.getLogger(__name__)

app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Register unified error envelope handlers
register_error_handlers(app)


@app.middleware("http")
async def request_id_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Adopt the caller's X-Request-ID (or mint one) for logs and the response."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        reset_request_id(token)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)
logger.info(f"CORS allow_origins={settings.cors_origin_list}")

api_v1 = APIRouter(prefix="/api/v1")

api_v1.include_router(onboarding_v1.router, prefix="/onboarding")
api_v1.include_router(teachers_v1.router, prefix="/teachers")
api_v1.include_router(skills_v1.router, prefix="/skills")
api_v1.include_router(availability_v1.router, prefix="/availability")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(sessions_v1.router, prefix="/sessions")
api_v1.include_router(payments_v1.router, prefix="/payments")
api_v1.include_router(webhooks_midtrans_v1.router, prefix="/webhooks/midtrans")
api_v1.include_router(reviews_v1.router, prefix="/reviews")
api_v1.include_router(materials_v1.router, prefix="/materials")
api_v1.include_router(orders_v1.router, prefix="/orders")
api_v1.include_router(payouts_v1.router, prefix="/payouts")
api_v1.include_router(admin_v1.router, prefix="/admin")
api_v1.include_router(dashboard_v1.router, prefix="/dashboard")

app.include_router(api_v1)
app.include_router(prometheus_v1.router)


@app.get("/health", tags=["health"])
def health() -> Dict[str, str]:
    return {"status": "healthy", "service": API_TITLE, "version": API_VERSION}
