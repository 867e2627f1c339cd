"""Collected metric models for LAMA Agent."""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from .enums import MetricCategory


class MetricSample(BaseModel):
    """Values of one category polled from one host in a single cycle."""

    category: MetricCategory = Field(..., description="Metric category")
    host: str = Field(..., description="Host the values were collected for")
    values: Dict[str, float] = Field(
        default_factory=dict, description="Metric name to collected value"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.values
