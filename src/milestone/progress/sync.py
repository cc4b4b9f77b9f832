"""
Lock-guarded adapter around ProgressTracker.

ProgressTracker itself does no locking. When worker threads report progress
concurrently, wrap the tracker here instead of synchronizing every call
site. Observers run while the lock is held, so a slow observer stalls every
reporting thread.
"""

import threading
from typing import Optional

from milestone.progress.tracker import ProgressCallback, ProgressTracker


class SynchronizedProgressTracker:
    """
    Delegates to a ProgressTracker under a reentrant lock.

    Usage:
        tracker = SynchronizedProgressTracker(ProgressTracker())
        with ThreadPoolExecutor() as pool:
            for item in items:
                pool.submit(work, item, tracker)   # work() calls tracker.increment()
        tracker.complete()
    """

    def __init__(self, tracker: Optional[ProgressTracker] = None):
        self._tracker = tracker if tracker is not None else ProgressTracker()
        self._lock = threading.RLock()

    @property
    def tracker(self) -> ProgressTracker:
        """The wrapped tracker. Access it directly only while holding lock."""
        return self._tracker

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def add_observer(self, callback: ProgressCallback) -> "SynchronizedProgressTracker":
        with self._lock:
            self._tracker.add_observer(callback)
        return self

    def clear_observers(self) -> "SynchronizedProgressTracker":
        with self._lock:
            self._tracker.clear_observers()
        return self

    def set_step_size(self, step_size: int) -> "SynchronizedProgressTracker":
        with self._lock:
            self._tracker.set_step_size(step_size)
        return self

    def set_step_range(self, min_step_size: int, max_step_size: int) -> "SynchronizedProgressTracker":
        with self._lock:
            self._tracker.set_step_range(min_step_size, max_step_size)
        return self

    def set_maximum(self, maximum: int) -> "SynchronizedProgressTracker":
        with self._lock:
            self._tracker.set_maximum(maximum)
        return self

    def set_progress(self, count: int) -> "SynchronizedProgressTracker":
        with self._lock:
            self._tracker.set_progress(count)
        return self

    def advance(self, amount: int) -> int:
        """Add amount to the progress count atomically and return the new count."""
        with self._lock:
            self._tracker.set_progress(self._tracker.progress + amount)
            return self._tracker.progress

    def increment(self) -> int:
        with self._lock:
            return self._tracker.increment()

    def complete(self) -> None:
        with self._lock:
            self._tracker.complete()

    def reset(self) -> "SynchronizedProgressTracker":
        with self._lock:
            self._tracker.reset()
        return self

    @property
    def progress(self) -> int:
        with self._lock:
            return self._tracker.progress

    @property
    def maximum(self) -> Optional[int]:
        with self._lock:
            return self._tracker.maximum

    @property
    def step(self) -> int:
        with self._lock:
            return self._tracker.step

    @property
    def done(self) -> bool:
        with self._lock:
            return self._tracker.done

    def get_progress(self) -> int:
        return self.progress

    def get_maximum(self) -> Optional[int]:
        return self.maximum

    def is_done(self) -> bool:
        return self.done

    def __enter__(self) -> "SynchronizedProgressTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.complete()
