"""
Prometheus metrics endpoint for monitoring infrastructure.

Public, unauthenticated scrape target exposing the custom registry filled by
@measure_operation, the timing middleware and the relay.
"""

from fastapi import APIRouter, Response

from ..monitoring.prometheus_metrics import prometheus_metrics

router = APIRouter(tags=["monitoring"])


@router.get("/internal/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
