"""Prometheus metrics router for LAMA Agent."""

from fastapi import APIRouter, Depends, Request, Response

from services import HealthMetricsService
from utils import get_logger

router = APIRouter(prefix="/metrics", tags=["metrics"])
logger = get_logger(__name__)

PROMETHEUS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def get_health_service(request: Request) -> HealthMetricsService:
    """Dependency to get health service from application state."""
    return request.app.state.health_metrics  # type: ignore[no-any-return]


@router.get("/", response_class=Response)
def prometheus_metrics(
    health_service: HealthMetricsService = Depends(get_health_service),
) -> Response:
    """Get Prometheus metrics in text format."""
    try:
        return Response(content=health_service.get_prometheus_metrics(), media_type=PROMETHEUS_CONTENT_TYPE)
    except Exception as e:
        logger.error("Failed to retrieve Prometheus metrics", error=str(e), endpoint="/metrics/")
        return Response(
            content=f"# ERROR: Failed to retrieve metrics - {e}\n",
            media_type=PROMETHEUS_CONTENT_TYPE,
            status_code=503,
        )
