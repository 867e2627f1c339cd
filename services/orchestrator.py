"""Orchestration of the per-category sync workers."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional

from models import MetricCategory
from utils import create_contextual_logger
from .sync_scheduler import SyncScheduler


class SyncOrchestrator:
    """Starts every scheduler on its own worker thread and stops them together.

    All schedulers share `shutdown_event`; setting it interrupts pending
    waits in every worker.
    """

    def __init__(self, schedulers: List[SyncScheduler], shutdown_event: threading.Event) -> None:
        self.schedulers: Dict[MetricCategory, SyncScheduler] = {s.category: s for s in schedulers}
        self.shutdown_event = shutdown_event
        self.logger = create_contextual_logger(__name__, service="orchestrator")
        self._executor: Optional[ThreadPoolExecutor] = None
        self._futures: List[Future] = []

    @property
    def started(self) -> bool:
        return self._executor is not None

    def start(self) -> None:
        """Submit every scheduler to a dedicated thread pool."""
        if self.started:
            return
        self.logger.info("Starting sync workers", categories=[c.value for c in self.schedulers])
        self.shutdown_event.clear()
        self._executor = ThreadPoolExecutor(
            max_workers=max(len(self.schedulers), 1), thread_name_prefix="lama_sync"
        )
        self._futures = [self._executor.submit(s.run) for s in self.schedulers.values()]

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Signal shutdown and wait up to `timeout` seconds for every worker.

        Returns True when every worker finished in time.
        """
        if not self.started:
            return True
        self.logger.info("Stopping sync workers...")
        self.shutdown_event.set()

        done, not_done = wait(self._futures, timeout=timeout)
        for future in done:
            error = future.exception()
            if error is not None:
                self.logger.error("Sync worker exited with an error", error=str(error))
        if not_done:
            self.logger.error(
                "Sync workers did not stop in time",
                pending=len(not_done),
                timeout_seconds=timeout,
            )

        self._executor.shutdown(wait=False)
        self._executor = None
        self._futures = []
        self.logger.info("Sync workers stopped.", clean=not not_done)
        return not not_done

    def status(self) -> Dict[str, Dict[str, Any]]:
        return {category.value: s.status() for category, s in self.schedulers.items()}
