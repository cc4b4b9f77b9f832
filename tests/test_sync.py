"""Tests for SynchronizedProgressTracker."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from milestone import InvalidArgumentError, InvalidStateError, ProgressTracker
from milestone.progress import SynchronizedProgressTracker


class TestSynchronizedProgressTracker:
    """Tests for the lock-guarded adapter."""

    def test_wraps_new_tracker_by_default(self):
        tracker = SynchronizedProgressTracker()
        assert isinstance(tracker.tracker, ProgressTracker)
        assert tracker.progress == 0
        assert tracker.maximum is None
        assert not tracker.is_done()

    def test_concurrent_increments(self):
        """Concurrent increments are neither lost nor published out of order."""
        published = []
        tracker = SynchronizedProgressTracker().add_observer(lambda e: published.append(e.progress))

        def work():
            for _ in range(1000):
                tracker.increment()

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(work) for _ in range(8)]
            for future in futures:
                future.result()
        tracker.complete()

        assert tracker.get_progress() == 8000
        assert published == sorted(set(published))
        assert published[-1] == 8000

    def test_concurrent_advance(self):
        tracker = SynchronizedProgressTracker().set_maximum(4 * 250 * 3)
        barrier = threading.Barrier(4)

        def work():
            barrier.wait()
            for _ in range(250):
                tracker.advance(3)

        threads = [threading.Thread(target=work) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert tracker.progress == 3000
        assert tracker.get_maximum() == 3000

    def test_errors_pass_through(self):
        tracker = SynchronizedProgressTracker().set_maximum(10)
        with pytest.raises(InvalidArgumentError):
            tracker.set_progress(11)

        tracker.complete()
        with pytest.raises(InvalidStateError):
            tracker.increment()

    def test_lock_is_reentrant_for_observers(self):
        """Observers may read the wrapper while it is publishing."""
        seen = []
        tracker = SynchronizedProgressTracker()
        tracker.add_observer(lambda e: seen.append(tracker.progress))
        tracker.set_progress(10)
        assert seen == [10]

    def test_context_manager_and_reset(self):
        published = []
        with SynchronizedProgressTracker().add_observer(lambda e: published.append(e.progress)) as tracker:
            tracker.set_progress(4)
        assert tracker.done
        assert published == [4]

        tracker.reset()
        assert tracker.progress == 0
        assert not tracker.done

    def test_step_configuration_forwarded(self):
        """Step size settings go through the wrapper."""
        published = []
        tracker = SynchronizedProgressTracker().add_observer(lambda e: published.append(e.progress))

        assert tracker.set_step_size(100).step == 100
        tracker.set_progress(50)
        assert tracker.set_step_range(5, 55).step == 5
        assert tracker.tracker.max_step_size == 55
        tracker.set_progress(75)

        assert published == [75]

    def test_clear_observers_forwarded(self):
        published = []
        tracker = SynchronizedProgressTracker().add_observer(lambda e: published.append(e.progress))
        tracker.clear_observers().set_progress(10)

        assert published == []
        assert tracker.tracker.observers == ()
