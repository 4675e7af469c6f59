"""Prometheus collectors for service operations and payment reconciliation."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

REGISTRY = CollectorRegistry()

SERVICE_OPERATION_SECONDS = Histogram(
    "service_operation_duration_seconds",
    "Duration of measured service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

# Gateway notifications by outcome label, e.g. success, duplicate, ignored, unknown_reference.
PAYMENT_WEBHOOK_TOTAL = Counter(
    "payment_webhook_total",
    "Payment gateway notifications processed",
    ["outcome"],
    registry=REGISTRY,
)

BOOKING_TRANSITIONS_TOTAL = Counter(
    "booking_transitions_total",
    "Booking status transitions applied",
    ["from_status", "to_status"],
    registry=REGISTRY,
)


def render_latest() -> tuple[bytes, str]:
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
