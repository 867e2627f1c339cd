"""Service layer for LAMA Agent."""

from .collector import MetricsCollector
from .exceptions import (
    AuthRejected,
    BootstrapError,
    DecodeError,
    LamaError,
    MetricsSourceError,
    SequenceMismatch,
    TokenInvalidated,
    TransportError,
    UnrecognizedResponseCode,
)
from .health_metrics import HealthMetricsService
from .lama_client import LamaClient
from .metrics_source import PrometheusClient
from .orchestrator import SyncOrchestrator
from .publisher import Publisher
from .retry import RetryPolicy
from .sequence_tracker import SequenceTracker
from .session_manager import SessionManager
from .sync_scheduler import SyncScheduler

__all__ = [
    "AuthRejected",
    "BootstrapError",
    "DecodeError",
    "HealthMetricsService",
    "LamaClient",
    "LamaError",
    "MetricsCollector",
    "MetricsSourceError",
    "PrometheusClient",
    "Publisher",
    "RetryPolicy",
    "SequenceMismatch",
    "SequenceTracker",
    "SessionManager",
    "SyncOrchestrator",
    "SyncScheduler",
    "TokenInvalidated",
    "TransportError",
    "UnrecognizedResponseCode",
]
