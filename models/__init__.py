"""Data models for LAMA Agent.

This module contains all Pydantic models used throughout the application,
ensuring strict type safety and runtime validation."""

# Import all enums
from .enums import MetricCategory, OutcomeKind, ResponseCode

# Import collected metric models
from .metrics import MetricSample

# Import LAMA wire models
from .lama import (
    LoginRequest,
    LoginResponse,
    MetricData,
    MetricError,
    MetricPayload,
    MetricsRequest,
    MetricsResponse,
    MetricValue,
)

# Import outcome models
from .outcome import PushOutcome

__all__ = [
    # Enums
    "MetricCategory",
    "OutcomeKind",
    "ResponseCode",
    # Collected metric models
    "MetricSample",
    # LAMA wire models
    "LoginRequest",
    "LoginResponse",
    "MetricData",
    "MetricError",
    "MetricPayload",
    "MetricsRequest",
    "MetricsResponse",
    "MetricValue",
    # Outcome models
    "PushOutcome",
]
