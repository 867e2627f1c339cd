"""Enumeration types for LAMA Agent models."""

from enum import Enum, IntEnum


class MetricCategory(str, Enum):
    """Metric domains reported to the LAMA API, one sequence counter each."""

    HARDWARE = "hardware"
    DATABASE = "database"
    NETWORK = "network"
    APPLICATION = "application"


class ResponseCode(IntEnum):
    """LAMA API response codes."""

    SUCCESS = 601
    PARTIAL_SUCCESS = 602
    INVALID_LOGIN = 701
    INVALID_SEQUENCE_ID = 704
    INVALID_TOKEN = 801
    EXPIRED_TOKEN = 802


class OutcomeKind(str, Enum):
    """Classification of a single push attempt."""

    SUCCESS = "success"
    RETRYABLE_TRANSIENT = "retryable_transient"
    RETRYABLE_AFTER_REAUTH = "retryable_after_reauth"
    RETRYABLE_AFTER_RESYNC = "retryable_after_resync"
    FATAL = "fatal"
