"""Per-category sequence counters for LAMA pushes."""

import threading
from typing import Dict

from models import MetricCategory
from utils import create_contextual_logger
from .health_metrics import sequence_id_gauge


class SequenceTracker:
    """Holds the next expected sequence id of every metric category.

    Each category has its own lock, so advancing one category never blocks
    readers of another.
    """

    def __init__(self, initial: int = 1) -> None:
        if initial < 1:
            raise ValueError("initial sequence id must be >= 1")
        self.logger = create_contextual_logger(__name__, service="sequence_tracker")
        self._values: Dict[MetricCategory, int] = {}
        self._locks: Dict[MetricCategory, threading.Lock] = {}
        for category in MetricCategory:
            self._values[category] = initial
            self._locks[category] = threading.Lock()
            sequence_id_gauge.labels(category=category.value).set(initial)

    def next_sequence(self, category: MetricCategory) -> int:
        """Sequence id to use for the next push of `category`."""
        category = MetricCategory(category)
        with self._locks[category]:
            return self._values[category]

    def advance(self, category: MetricCategory) -> int:
        """Move past an accepted push. Returns the new value."""
        category = MetricCategory(category)
        with self._locks[category]:
            self._values[category] += 1
            value = self._values[category]
        sequence_id_gauge.labels(category=category.value).set(value)
        return value

    def resync(self, category: MetricCategory, value: int) -> None:
        """Overwrite the counter with the value the API declared."""
        category = MetricCategory(category)
        if value < 1:
            raise ValueError(f"sequence id must be >= 1, got {value}")
        with self._locks[category]:
            previous = self._values[category]
            self._values[category] = value
        sequence_id_gauge.labels(category=category.value).set(value)
        self.logger.info(
            "Sequence id resynchronised",
            category=category.value,
            previous_seq_id=previous,
            expected_seq_id=value,
        )

    def snapshot(self) -> Dict[str, int]:
        return {category.value: self.next_sequence(category) for category in MetricCategory}
