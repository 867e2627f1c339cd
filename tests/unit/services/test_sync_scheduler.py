"""Unit tests for the per-category sync scheduler."""

import threading
from unittest.mock import Mock, call

import pytest

from conftest import sample_value
from models import MetricCategory, MetricSample, PushOutcome
from services.retry import RetryPolicy
from services.sync_scheduler import SyncScheduler

HW = MetricCategory.HARDWARE


def sample(host: str, **values: float) -> MetricSample:
    return MetricSample(category=HW, host=host, values=values or {"cpu": 1.0})


class TestSyncScheduler:
    """Test cases for SyncScheduler."""

    @pytest.fixture
    def shutdown_event(self) -> threading.Event:
        """Create a fresh shutdown event."""
        return threading.Event()

    @pytest.fixture
    def collector(self) -> Mock:
        """Create a collector returning two hosts."""
        collector = Mock()
        collector.collect.return_value = [sample("h1"), sample("h2")]
        return collector

    @pytest.fixture
    def publisher(self) -> Mock:
        """Create a publisher that always succeeds."""
        publisher = Mock()
        publisher.push.side_effect = lambda category, host, s: PushOutcome.success(category, host)
        return publisher

    @pytest.fixture
    def wait(self) -> Mock:
        """Create a retry wait that is never cancelled."""
        return Mock(return_value=False)

    @pytest.fixture
    def scheduler(self, collector, publisher, wait, shutdown_event) -> SyncScheduler:
        """Create a scheduler with MaxRetries=3 and RetryInterval=5."""
        return SyncScheduler(
            category=HW,
            collector=collector,
            publisher=publisher,
            retry_policy=RetryPolicy(max_attempts=3, interval=5.0, wait=wait),
            interval=60.0,
            shutdown_event=shutdown_event,
        )

    def test_tick_pushes_every_host(self, scheduler, collector, publisher) -> None:
        """Test that all configured hosts are pushed, not only the first."""
        scheduler.tick()

        collector.collect.assert_called_once_with(HW)
        assert [c[0][1] for c in publisher.push.call_args_list] == ["h1", "h2"]
        assert scheduler.last_success_at is not None
        assert scheduler.ticks == 1

    def test_exhausted_retries_log_and_continue(self, scheduler, collector, publisher, wait) -> None:
        """Test that a host failing every attempt is abandoned and the tick moves on."""
        collector.collect.return_value = [sample("h1")]
        publisher.push.side_effect = lambda category, host, s: PushOutcome.transient(category, host, error="down")
        before = sample_value("lama_sync_failures_total", {"category": "hardware"})

        scheduler.tick()

        assert publisher.push.call_count == 3
        assert wait.call_args_list == [call(5.0), call(5.0)]
        assert sample_value("lama_sync_failures_total", {"category": "hardware"}) == before + 1

        scheduler.tick()

        assert publisher.push.call_count == 6

    def test_shutdown_during_retry_wait_is_not_a_failure(
        self, scheduler, collector, publisher, wait, shutdown_event
    ) -> None:
        """Test that a retry abandoned on shutdown is not counted as a sync failure."""
        collector.collect.return_value = [sample("h1"), sample("h2")]
        publisher.push.side_effect = lambda category, host, s: PushOutcome.transient(category, host, error="down")

        def cancel(interval: float) -> bool:
            shutdown_event.set()
            return True

        wait.side_effect = cancel
        before = sample_value("lama_sync_failures_total", {"category": "hardware"})

        scheduler.tick()

        assert [c[0][1] for c in publisher.push.call_args_list] == ["h1"]
        assert sample_value("lama_sync_failures_total", {"category": "hardware"}) == before

    def test_fatal_host_does_not_block_next_host(self, scheduler, publisher) -> None:
        """Test that a fatal outcome only affects its own host."""
        def push(category, host, s):
            if host == "h1":
                return PushOutcome.fatal(category, host, error="unhandled response code 999")
            return PushOutcome.success(category, host)

        publisher.push.side_effect = push

        scheduler.tick()

        assert [c[0][1] for c in publisher.push.call_args_list] == ["h1", "h2"]

    def test_empty_sample_is_skipped(self, scheduler, collector, publisher) -> None:
        """Test that hosts without any collected value are not pushed."""
        collector.collect.return_value = [MetricSample(category=HW, host="h1", values={}), sample("h2")]

        scheduler.tick()

        assert [c[0][1] for c in publisher.push.call_args_list] == ["h2"]

    def test_tick_abandoned_on_shutdown(self, scheduler, publisher, shutdown_event) -> None:
        """Test that no further hosts are pushed once shutdown is requested."""
        shutdown_event.set()

        scheduler.tick()

        publisher.push.assert_not_called()

    def test_run_exits_on_shutdown(self, collector, publisher, shutdown_event) -> None:
        """Test that the worker loop ticks on its interval and stops promptly."""
        ticked = threading.Event()
        collector.collect.side_effect = lambda category: (ticked.set(), [])[1]
        scheduler = SyncScheduler(
            category=HW,
            collector=collector,
            publisher=publisher,
            retry_policy=RetryPolicy(max_attempts=1, interval=0, wait=shutdown_event.wait),
            interval=0.01,
            shutdown_event=shutdown_event,
        )
        worker = threading.Thread(target=scheduler.run)

        worker.start()
        assert ticked.wait(timeout=5)
        shutdown_event.set()
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert scheduler.running is False

    def test_tick_errors_do_not_kill_worker(self, collector, publisher, shutdown_event) -> None:
        """Test that an unexpected error in a tick is logged and the loop continues."""
        calls = []

        def collect(category):
            calls.append(category)
            if len(calls) == 1:
                raise RuntimeError("boom")
            shutdown_event.set()
            return []

        collector.collect.side_effect = collect
        scheduler = SyncScheduler(
            category=HW,
            collector=collector,
            publisher=publisher,
            retry_policy=RetryPolicy(max_attempts=1, interval=0),
            interval=0.01,
            shutdown_event=shutdown_event,
        )

        scheduler.run()

        assert len(calls) == 2

    def test_status(self, scheduler) -> None:
        """Test the status summary before any tick."""
        assert scheduler.status() == {
            "running": False,
            "ticks": 0,
            "last_tick_at": None,
            "last_success_at": None,
        }

    def test_invalid_interval(self, collector, publisher, shutdown_event) -> None:
        """Test that a non-positive interval is refused."""
        with pytest.raises(ValueError):
            SyncScheduler(HW, collector, publisher, RetryPolicy(1, 0), 0, shutdown_event)
