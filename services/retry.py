"""Bounded retry policy for metric pushes."""

import threading
from typing import Callable, Optional

from models import MetricCategory, PushOutcome
from utils import create_contextual_logger

# Returns True when the wait was interrupted by cancellation.
WaitFunc = Callable[[float], bool]


class RetryPolicy:
    """Runs an operation up to `max_attempts` times with a fixed interval.

    Every non-success outcome is retried except FATAL. The wait between
    attempts goes through `wait`, normally `threading.Event.wait` on the
    shutdown event, so a pending retry is abandoned as soon as shutdown is
    requested.
    """

    def __init__(self, max_attempts: int, interval: float, wait: Optional[WaitFunc] = None) -> None:
        if max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.max_attempts = max_attempts
        self.interval = interval
        self.wait = wait or threading.Event().wait
        self.logger = create_contextual_logger(__name__, service="retry_policy")

    def execute(
        self, operation: Callable[[], PushOutcome], category: MetricCategory, host: str
    ) -> PushOutcome:
        """Run `operation` until it succeeds, turns fatal, or attempts run out.

        Returns the last outcome observed, flagged `cancelled` when shutdown
        interrupted the wait before a retry.
        """
        log = self.logger.bind(category=MetricCategory(category).value, host=host)
        outcome = PushOutcome.transient(category, host, error="no push attempt was made")

        for attempt in range(1, self.max_attempts + 1):
            outcome = operation()
            if not outcome.retryable:
                return outcome

            if attempt == self.max_attempts:
                break

            log.warning(
                "Failed to push metrics. Retrying...",
                attempt=attempt,
                max_retries=self.max_attempts,
                outcome=outcome.kind.value,
                error=outcome.error or outcome.response_desc,
            )
            if self.wait(self.interval):
                log.info("Retry cancelled by shutdown", attempt=attempt)
                return outcome.model_copy(update={"cancelled": True})

        return outcome
