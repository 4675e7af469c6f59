"""
Prometheus metrics endpoint for monitoring infrastructure.

This is a PUBLIC endpoint (no authentication required) following
standard Prometheus practices. It exposes metrics collected from
the @measure_operation decorators throughout the application.
"""

from fastapi import APIRouter, Response

from ...core.metrics import render_latest

router = APIRouter(tags=["monitoring"])


@router.get("/metrics/prometheus", include_in_schema=False)
def prometheus_metrics_endpoint() -> Response:
    payload, content_type = render_latest()
    return Response(content=payload, media_type=content_type)
