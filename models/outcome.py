"""Push outcome model for LAMA Agent."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import MetricCategory, OutcomeKind


class PushOutcome(BaseModel):
    """Result of a single push attempt.

    Build instances through the classmethod constructors; each one maps to a
    single `OutcomeKind`.
    """

    kind: OutcomeKind = Field(..., description="Outcome classification")
    category: MetricCategory = Field(..., description="Metric category pushed")
    host: str = Field(..., description="Host the metrics belong to")
    http_status: Optional[int] = Field(default=None, description="HTTP status received")
    response_code: Optional[int] = Field(default=None, description="LAMA response code")
    response_desc: Optional[str] = Field(default=None, description="LAMA response description")
    corrected_sequence: Optional[int] = Field(
        default=None, description="Server-declared sequence id after a mismatch"
    )
    error: Optional[str] = Field(default=None, description="Error message for failed attempts")
    cancelled: bool = Field(
        default=False, description="Remaining retries were abandoned on shutdown"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def success(cls, category: MetricCategory, host: str, **details: Any) -> "PushOutcome":
        return cls(kind=OutcomeKind.SUCCESS, category=category, host=host, **details)

    @classmethod
    def transient(
        cls, category: MetricCategory, host: str, error: str, **details: Any
    ) -> "PushOutcome":
        return cls(
            kind=OutcomeKind.RETRYABLE_TRANSIENT, category=category, host=host, error=error, **details
        )

    @classmethod
    def after_reauth(cls, category: MetricCategory, host: str, **details: Any) -> "PushOutcome":
        return cls(kind=OutcomeKind.RETRYABLE_AFTER_REAUTH, category=category, host=host, **details)

    @classmethod
    def after_resync(
        cls, category: MetricCategory, host: str, corrected_sequence: int, **details: Any
    ) -> "PushOutcome":
        return cls(
            kind=OutcomeKind.RETRYABLE_AFTER_RESYNC,
            category=category,
            host=host,
            corrected_sequence=corrected_sequence,
            **details,
        )

    @classmethod
    def fatal(cls, category: MetricCategory, host: str, error: str, **details: Any) -> "PushOutcome":
        return cls(kind=OutcomeKind.FATAL, category=category, host=host, error=error, **details)

    @property
    def succeeded(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def retryable(self) -> bool:
        return self.kind not in (OutcomeKind.SUCCESS, OutcomeKind.FATAL)

    def log_context(self) -> Dict[str, Any]:
        """Fields worth attaching to a log line for this outcome."""
        return self.model_dump(mode="json", exclude_defaults=True)
