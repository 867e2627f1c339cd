"""Per-category sync worker.

Each scheduler runs in its own thread: every `interval` seconds it collects
the category's samples and pushes them host by host under the retry policy.
Ticks never overlap; a tick finishes (or is abandoned on shutdown) before
the next wait begins.
"""

import threading
import time
import uuid
from typing import Any, Dict, Optional

from models import MetricCategory, MetricSample, OutcomeKind, PushOutcome
from utils import create_contextual_logger, log_exception, set_correlation_id
from .collector import MetricsCollector
from .health_metrics import last_value, sync_failures_total
from .publisher import Publisher
from .retry import RetryPolicy


class SyncScheduler:
    """Drives collection and publication for a single metric category."""

    def __init__(
        self,
        category: MetricCategory,
        collector: MetricsCollector,
        publisher: Publisher,
        retry_policy: RetryPolicy,
        interval: float,
        shutdown_event: threading.Event,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.category = MetricCategory(category)
        self.collector = collector
        self.publisher = publisher
        self.retry_policy = retry_policy
        self.interval = interval
        self.shutdown_event = shutdown_event
        self.logger = create_contextual_logger(
            __name__, service="sync_scheduler", category=self.category.value
        )

        self.running = False
        self.ticks = 0
        self.last_tick_at: Optional[float] = None
        self.last_success_at: Optional[float] = None

    def run(self) -> None:
        """Worker loop; returns once the shutdown event is set."""
        self.running = True
        self.logger.info("Starting metrics worker", interval=self.interval)
        try:
            # Event.wait returns True once shutdown is requested.
            while not self.shutdown_event.wait(timeout=self.interval):
                try:
                    self.tick()
                except Exception as e:
                    log_exception(self.logger, e, "Unhandled error in metrics worker tick")
        finally:
            self.running = False
            self.logger.info("Stopping metrics worker")

    def tick(self) -> None:
        """Collect and push once for every configured host."""
        set_correlation_id(str(uuid.uuid4()))
        self.ticks += 1
        self.last_tick_at = time.time()

        samples = self.collector.collect(self.category)
        for sample in samples:
            if self.shutdown_event.is_set():
                self.logger.info("Shutdown requested, abandoning tick", tick=self.ticks)
                return
            if sample.is_empty:
                self.logger.warning("No metric values collected, skipping host", host=sample.host)
                continue
            self.publish(sample)

    def publish(self, sample: MetricSample) -> PushOutcome:
        outcome = self.retry_policy.execute(
            lambda: self.publisher.push(self.category, sample.host, sample),
            self.category,
            sample.host,
        )
        if outcome.succeeded:
            self.last_success_at = time.time()
            return outcome

        context = {k: v for k, v in outcome.log_context().items() if k not in ("category", "host")}
        if outcome.cancelled:
            self.logger.info("Push abandoned on shutdown", host=sample.host, **context)
            return outcome

        sync_failures_total.labels(category=self.category.value).inc()
        if outcome.kind == OutcomeKind.FATAL:
            message = "Failed to push metrics, giving up on fatal response"
        else:
            message = "Failed to push metrics after max retries"
        self.logger.error(
            message,
            host=sample.host,
            max_retries=self.retry_policy.max_attempts,
            **context,
        )
        return outcome

    def status(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "ticks": self.ticks,
            "last_tick_at": last_value(self.last_tick_at),
            "last_success_at": last_value(self.last_success_at),
        }
