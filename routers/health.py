"""Health check router for LAMA Agent."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from services import HealthMetricsService
from utils import get_logger

router = APIRouter(prefix="/health", tags=["health"])
logger = get_logger(__name__)


def get_health_service(request: Request) -> HealthMetricsService:
    """Dependency to get health service from application state."""
    return request.app.state.health_metrics  # type: ignore[no-any-return]


@router.get("/", response_model=Dict[str, Any])
def health_check(
    health_service: HealthMetricsService = Depends(get_health_service),
) -> Dict[str, Any]:
    """Get agent health: session, sequences and worker state."""
    try:
        return health_service.get_health_status()
    except Exception as e:
        logger.error("Health check failed", error=str(e), endpoint="/health/")
        return {
            "status": "unhealthy",
            "version": "unknown",
            "uptime_seconds": 0,
            "session_established": False,
            "error": str(e),
        }
