"""Health and metrics service for LAMA Agent.

This service exposes push/login counters in Prometheus format and
summarises the agent's health for the HTTP surface.
"""

import time
from typing import TYPE_CHECKING, Any, Dict, Optional

from prometheus_client import Counter, Gauge, generate_latest

from utils import create_contextual_logger

if TYPE_CHECKING:
    from .orchestrator import SyncOrchestrator
    from .sequence_tracker import SequenceTracker
    from .session_manager import SessionManager

push_attempts_total = Counter(
    "lama_push_attempts_total",
    "Total number of LAMA push attempts by outcome",
    ["category", "outcome"],
)

login_attempts_total = Counter(
    "lama_login_attempts_total",
    "Total number of LAMA login attempts by status",
    ["status"],
)

sync_failures_total = Counter(
    "lama_sync_failures_total",
    "Total number of host pushes abandoned after retries or a fatal outcome",
    ["category"],
)

sequence_id_gauge = Gauge(
    "lama_sequence_id",
    "Next sequence id expected by the LAMA API",
    ["category"],
)


class HealthMetricsService:
    """Aggregates session, sequence and scheduler state for health reporting."""

    def __init__(
        self,
        app_version: str,
        session_manager: "SessionManager",
        sequence_tracker: "SequenceTracker",
        orchestrator: "SyncOrchestrator",
    ) -> None:
        self.app_version = app_version
        self.session_manager = session_manager
        self.sequence_tracker = sequence_tracker
        self.orchestrator = orchestrator
        self.logger = create_contextual_logger(__name__, service="health_metrics")
        self._start_time = time.time()

    def get_health_status(self) -> Dict[str, Any]:
        """Overall status plus per-category scheduler state."""
        session_ok = self.session_manager.has_session
        schedulers = self.orchestrator.status()
        all_running = bool(schedulers) and all(s["running"] for s in schedulers.values())

        status = "unhealthy"
        if session_ok and all_running:
            status = "healthy"
        elif session_ok or any(s["running"] for s in schedulers.values()):
            status = "degraded"

        return {
            "status": status,
            "version": self.app_version,
            "uptime_seconds": int(time.time() - self._start_time),
            "session_established": session_ok,
            "sequences": self.sequence_tracker.snapshot(),
            "schedulers": schedulers,
        }

    def get_prometheus_metrics(self) -> bytes:
        return generate_latest()


def last_value(value: Optional[float]) -> Optional[float]:
    """Round a timestamp for JSON output."""
    return None if value is None else round(value, 3)
