"""Unit tests for the per-category sequence tracker."""

import threading

import pytest

from models import MetricCategory
from services.sequence_tracker import SequenceTracker


class TestSequenceTracker:
    """Test cases for SequenceTracker."""

    def test_every_category_starts_at_one(self) -> None:
        """Test that counters start at 1 for every category."""
        tracker = SequenceTracker()

        assert tracker.snapshot() == {
            "hardware": 1,
            "database": 1,
            "network": 1,
            "application": 1,
        }

    def test_next_sequence_does_not_mutate(self) -> None:
        """Test that reading the next sequence leaves the counter alone."""
        tracker = SequenceTracker()

        assert tracker.next_sequence(MetricCategory.HARDWARE) == 1
        assert tracker.next_sequence(MetricCategory.HARDWARE) == 1

    def test_advance_is_strictly_monotonic(self) -> None:
        """Test that each accepted push moves the counter by exactly one."""
        tracker = SequenceTracker()
        seen = [tracker.next_sequence(MetricCategory.DATABASE)]

        for _ in range(10):
            tracker.advance(MetricCategory.DATABASE)
            seen.append(tracker.next_sequence(MetricCategory.DATABASE))

        assert seen == list(range(1, 12))
        assert len(set(seen)) == len(seen)

    def test_categories_are_independent(self) -> None:
        """Test that advancing one category leaves the others untouched."""
        tracker = SequenceTracker()

        tracker.advance(MetricCategory.NETWORK)
        tracker.advance(MetricCategory.NETWORK)

        assert tracker.next_sequence(MetricCategory.NETWORK) == 3
        assert tracker.next_sequence(MetricCategory.HARDWARE) == 1
        assert tracker.next_sequence(MetricCategory.APPLICATION) == 1

    @pytest.mark.parametrize("prior_advances,corrected", [(0, 42), (50, 7), (3, 3)])
    def test_resync_sets_exact_value(self, prior_advances: int, corrected: int) -> None:
        """Test that resync sets the counter regardless of its prior value."""
        tracker = SequenceTracker()
        for _ in range(prior_advances):
            tracker.advance(MetricCategory.HARDWARE)

        tracker.resync(MetricCategory.HARDWARE, corrected)

        assert tracker.next_sequence(MetricCategory.HARDWARE) == corrected

    def test_resync_rejects_non_positive_values(self) -> None:
        """Test that an impossible sequence id is refused."""
        tracker = SequenceTracker()

        with pytest.raises(ValueError):
            tracker.resync(MetricCategory.HARDWARE, 0)
        assert tracker.next_sequence(MetricCategory.HARDWARE) == 1

    def test_accepts_category_values(self) -> None:
        """Test that plain string category values are accepted."""
        tracker = SequenceTracker(initial=5)

        tracker.advance("hardware")

        assert tracker.next_sequence(MetricCategory.HARDWARE) == 6

    def test_concurrent_advances_are_not_lost(self) -> None:
        """Test that concurrent advances on one category all count."""
        tracker = SequenceTracker()

        def worker() -> None:
            for _ in range(500):
                tracker.advance(MetricCategory.HARDWARE)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert tracker.next_sequence(MetricCategory.HARDWARE) == 2001
