"""Utility modules for LAMA Agent."""

from .logging import (
    configure_logging,
    create_contextual_logger,
    get_logger,
    log_exception,
    redact_secrets,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)

__all__ = [
    "configure_logging",
    "create_contextual_logger",
    "get_logger",
    "log_exception",
    "redact_secrets",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
